import logging
from typing import Any, Callable, Dict, List, Optional

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError

from .config import Settings
from .errors import InvalidRequest, ProductNotFound, StorageError
from .models import Product, ProductUpdate

logger = logging.getLogger(__name__)

TableFactory = Callable[[], Any]


def _require_id(product_id: Optional[str]) -> str:
    if not product_id:
        raise InvalidRequest("missing_id", "product id must be non-empty")
    return product_id


class ProductStore:
    """DynamoDB access for Product items, keyed by ``id``.

    Every call resolves a fresh table through ``table_factory``; the default
    factory opens a new boto3 session per call, so nothing is shared between
    invocations.
    """

    def __init__(self, settings: Settings, table_factory: Optional[TableFactory] = None):
        self.settings = settings
        self._table_factory = table_factory or self._open_table

    def _open_table(self):
        session = boto3.session.Session(region_name=self.settings.region)
        dynamodb = session.resource("dynamodb", endpoint_url=self.settings.endpoint_url)
        return dynamodb.Table(self.settings.table_name)

    def _call(self, operation: str, fn: Callable[..., Dict[str, Any]], **kwargs) -> Dict[str, Any]:
        try:
            return fn(**kwargs)
        except (ClientError, BotoCoreError) as exc:
            logger.exception("%s on table %s failed", operation, self.settings.table_name)
            raise StorageError(str(exc), operation=operation) from exc

    def put(self, product: Product) -> Product:
        _require_id(product.id)
        table = self._table_factory()
        self._call("put_item", table.put_item, Item=product.to_item())
        return product

    def scan(self) -> List[Product]:
        table = self._table_factory()
        scan_kwargs: Dict[str, Any] = {}
        items: List[Dict[str, Any]] = []
        while True:
            res = self._call("scan", table.scan, **scan_kwargs)
            items.extend(res.get("Items", []))
            lek = res.get("LastEvaluatedKey")
            if not lek:
                break
            scan_kwargs["ExclusiveStartKey"] = lek
        logger.debug("scan returned %d items", len(items))
        return [Product.from_item(item) for item in items]

    def get_by_key(self, product_id: str) -> Optional[Product]:
        _require_id(product_id)
        table = self._table_factory()
        res = self._call("get_item", table.get_item, Key={"id": product_id})
        item = res.get("Item")
        if not item:
            return None
        return Product.from_item(item)

    def update(self, product_id: str, update: ProductUpdate) -> Product:
        """SET the fields present in ``update``; rate and image are left alone."""
        _require_id(product_id)
        changes = update.changes()
        if not changes:
            raise InvalidRequest("no_updatable_fields")

        names = {f"#{key}": key for key in changes}
        values = {f":{key}": value for key, value in changes.items()}
        expression = "SET " + ", ".join(f"#{key} = :{key}" for key in changes)

        table = self._table_factory()
        try:
            res = table.update_item(
                Key={"id": product_id},
                UpdateExpression=expression,
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ConditionExpression=Attr("id").exists(),
                ReturnValues="ALL_NEW",
            )
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                raise ProductNotFound(product_id) from exc
            logger.exception("update_item on table %s failed", self.settings.table_name)
            raise StorageError(str(exc), operation="update_item") from exc
        except BotoCoreError as exc:
            logger.exception("update_item on table %s failed", self.settings.table_name)
            raise StorageError(str(exc), operation="update_item") from exc

        return Product.from_item(res.get("Attributes") or {"id": product_id})

    def delete(self, product_id: str) -> None:
        _require_id(product_id)
        table = self._table_factory()
        # DynamoDB treats deleting an absent key as success
        self._call("delete_item", table.delete_item, Key={"id": product_id})
