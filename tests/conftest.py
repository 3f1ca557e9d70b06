"""Pytest fixtures: an in-memory stand-in for a DynamoDB Table."""

import copy

import pytest
from botocore.exceptions import ClientError

from products.config import Settings
from products.store import ProductStore


def _client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class FakeTable:
    """Enough of ``boto3`` Table for ProductStore, keyed by ``id``."""

    def __init__(self, page_size=None):
        self.items = {}
        self.page_size = page_size
        self.calls = []

    def put_item(self, Item):
        self.calls.append("put_item")
        self.items[Item["id"]] = copy.deepcopy(Item)
        return {}

    def get_item(self, Key):
        self.calls.append("get_item")
        item = self.items.get(Key["id"])
        return {"Item": copy.deepcopy(item)} if item is not None else {}

    def scan(self, ExclusiveStartKey=None):
        self.calls.append("scan")
        keys = sorted(self.items)
        if ExclusiveStartKey is not None:
            keys = [k for k in keys if k > ExclusiveStartKey["id"]]
        page = keys if self.page_size is None else keys[: self.page_size]
        res = {"Items": [copy.deepcopy(self.items[k]) for k in page]}
        if self.page_size is not None and len(keys) > self.page_size:
            res["LastEvaluatedKey"] = {"id": page[-1]}
        return res

    def update_item(self, Key, UpdateExpression, ExpressionAttributeNames,
                    ExpressionAttributeValues, ConditionExpression=None, ReturnValues=None):
        self.calls.append("update_item")
        item = self.items.get(Key["id"])
        if item is None:
            if ConditionExpression is not None:
                raise _client_error("ConditionalCheckFailedException", "UpdateItem")
            item = self.items[Key["id"]] = dict(Key)

        assert UpdateExpression.startswith("SET ")
        for clause in UpdateExpression[len("SET "):].split(", "):
            name, value = (part.strip() for part in clause.split("="))
            item[ExpressionAttributeNames[name]] = ExpressionAttributeValues[value]
        return {"Attributes": copy.deepcopy(item)}

    def delete_item(self, Key):
        self.calls.append("delete_item")
        self.items.pop(Key["id"], None)
        return {}


class BrokenTable:
    """Every call fails the way a throttled or unreachable table does."""

    def __getattr__(self, name):
        def fail(**kwargs):
            raise _client_error("ProvisionedThroughputExceededException", name)
        return fail


@pytest.fixture
def settings():
    return Settings(table_name="Product-test", region="ap-southeast-1", seed_count=4)


@pytest.fixture
def table():
    return FakeTable()


@pytest.fixture
def store(settings, table):
    return ProductStore(settings, table_factory=lambda: table)


@pytest.fixture
def broken_store(settings):
    return ProductStore(settings, table_factory=BrokenTable)


def _api_event(method, path, product_id=None, body=None):
    """Build an API Gateway (REST, proxy integration) event."""
    return {
        "httpMethod": method,
        "path": path,
        "resource": "/products/{id}" if product_id else path,
        "pathParameters": {"id": product_id} if product_id else None,
        "queryStringParameters": None,
        "headers": {"Accept": "application/json"},
        "body": body,
    }


@pytest.fixture
def api_event():
    return _api_event
