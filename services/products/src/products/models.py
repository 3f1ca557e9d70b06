import json
import math
from dataclasses import asdict, dataclass, fields
from decimal import Decimal, DecimalException
from typing import Any, Dict, Optional

from boto3.dynamodb.types import DYNAMODB_CONTEXT

from .errors import InvalidRequest, MalformedItem

UPDATABLE_FIELDS = ("name", "description", "price")


def _to_decimal(value: float) -> Decimal:
    # boto3 refuses floats; go through str to keep the printed value
    return Decimal(str(value))


def _storable_number(value: Any) -> bool:
    """True when DynamoDB can hold ``value`` as a number attribute."""
    try:
        number = float(value)
        if not math.isfinite(number):
            return False
        # same context boto3 serializes with: 38 digits, exponent in [-128, 126]
        DYNAMODB_CONTEXT.create_decimal(str(number))
    except (OverflowError, DecimalException):
        return False
    return True


@dataclass
class Product:
    id: str
    name: str = ""
    description: str = ""
    price: float = 0.0
    rate: float = 0.0
    image: str = ""

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "Product":
        """Build a Product from a DynamoDB item.

        Attributes missing from the item fall back to their empty value, the
        same way a partially written record reads back. A missing ``id`` or a
        non-numeric ``price``/``rate`` is a MalformedItem.
        """
        product_id = item.get("id")
        if not isinstance(product_id, str) or not product_id:
            raise MalformedItem("item has no id", item_id=product_id)
        try:
            return cls(
                id=product_id,
                name=str(item.get("name", "")),
                description=str(item.get("description", "")),
                price=float(item.get("price", 0)),
                rate=float(item.get("rate", 0)),
                image=str(item.get("image", "")),
            )
        except (TypeError, ValueError) as exc:
            raise MalformedItem(str(exc), item_id=product_id) from exc

    def to_item(self) -> Dict[str, Any]:
        item = asdict(self)
        item["price"] = _to_decimal(self.price)
        item["rate"] = _to_decimal(self.rate)
        return item

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ProductUpdate:
    """Partial update payload; only name, description and price are applied."""

    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None

    @classmethod
    def from_body(cls, body: Optional[str]) -> "ProductUpdate":
        try:
            payload = json.loads(body or "")
        except json.JSONDecodeError as exc:
            raise InvalidRequest("invalid_json", str(exc)) from exc
        if not isinstance(payload, dict):
            raise InvalidRequest("invalid_json", "body must be a JSON object")

        update = cls()
        for name in ("name", "description"):
            if name in payload:
                value = payload[name]
                if not isinstance(value, str):
                    raise InvalidRequest("invalid_field", field=name, expected="string")
                setattr(update, name, value)

        if "price" in payload:
            price = payload["price"]
            # bool is an int subclass
            if isinstance(price, bool) or not isinstance(price, (int, float)) or not _storable_number(price):
                raise InvalidRequest("invalid_field", field="price", expected="number")
            update.price = float(price)

        if update.is_empty():
            raise InvalidRequest("no_updatable_fields", expected=list(UPDATABLE_FIELDS))
        return update

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def changes(self) -> Dict[str, Any]:
        """Fields to SET, with numbers as Decimal for DynamoDB."""
        out: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            out[f.name] = _to_decimal(value) if f.name == "price" else value
        return out
