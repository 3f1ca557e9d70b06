import json
import logging
from typing import Any, Dict, Optional

from .config import Settings, configure_logging
from .errors import ProductError, ProductNotFound
from .models import ProductUpdate
from .seed import fake_products
from .store import ProductStore

logger = logging.getLogger(__name__)

COLLECTION_PATH = "/products"
ITEM_RESOURCE = "/products/{id}"
SEED_MESSAGE = "Initialize DynamoDB is complete!!!"
DONE = {"message": "Done"}


def _resp(status: int, payload: Any, content_type: str = "application/json") -> Dict[str, Any]:
    body = payload if content_type.startswith("text/") else json.dumps(payload, default=str)
    return {
        "statusCode": status,
        "headers": {
            "Content-Type": content_type,
            "Access-Control-Allow-Origin": "*",
        },
        "body": body,
    }


def _method(event) -> str:
    # REST API (v1) puts it at the top level, HTTP API (v2) under requestContext
    method = event.get("httpMethod") or (event.get("requestContext") or {}).get("http", {}).get("method")
    return (method or "").upper()


def _resource(event, path: str) -> str:
    if event.get("resource"):
        return event["resource"]
    # HTTP API (v2): routeKey is "GET /products/{id}"
    route_key = event.get("routeKey") or ""
    if " " in route_key:
        return route_key.split(" ", 1)[1]
    return path


def _dispatch(event, store: ProductStore, settings: Settings) -> Optional[Dict[str, Any]]:
    method = _method(event)
    path = event.get("path") or event.get("rawPath") or ""
    resource = _resource(event, path)
    product_id = (event.get("pathParameters") or {}).get("id")
    is_collection = path == COLLECTION_PATH and not product_id
    is_item = resource == ITEM_RESOURCE and bool(product_id)

    # GET /products
    if method == "GET" and is_collection:
        return _resp(200, [p.to_dict() for p in store.scan()])

    # GET /products/{id}
    if method == "GET" and is_item:
        product = store.get_by_key(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        return _resp(200, product.to_dict())

    # POST /products: one put per synthetic product
    if method == "POST" and is_collection:
        for product in fake_products(settings.seed_count):
            store.put(product)
        logger.info("seeded %d products into %s", settings.seed_count, settings.table_name)
        return _resp(200, SEED_MESSAGE, content_type="text/plain")

    # PUT /products/{id}
    if method == "PUT" and is_item:
        store.update(product_id, ProductUpdate.from_body(event.get("body")))
        return _resp(200, DONE)

    # DELETE /products/{id}
    if method == "DELETE" and is_item:
        store.delete(product_id)
        return _resp(200, DONE)

    return None


def handle(event, store: ProductStore, settings: Settings) -> Dict[str, Any]:
    try:
        resp = _dispatch(event, store, settings)
    except ProductError as exc:
        logger.warning("%s %s failed: %s", _method(event), event.get("path") or event.get("rawPath"), exc)
        return _resp(exc.status, exc.to_payload())

    if resp is None:
        logger.debug("no route for %s %s", _method(event), event.get("path") or event.get("rawPath"))
        return _resp(404, event)
    return resp


def handler(event, context):
    settings = Settings.from_env()
    configure_logging(settings)
    return handle(event, ProductStore(settings), settings)
