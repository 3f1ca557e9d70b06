from typing import Any, Dict


class ProductError(Exception):
    """Base error, rendered as ``{"error": code, **details}`` with ``status``."""

    status = 500
    code = "internal_error"

    def __init__(self, message: str = "", **details: Any):
        super().__init__(message or self.code)
        self.details = details

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.code}
        payload.update(self.details)
        return payload


class InvalidRequest(ProductError):
    status = 400
    code = "invalid_request"

    def __init__(self, code: str, message: str = "", **details: Any):
        super().__init__(message or code, **details)
        self.code = code


class ProductNotFound(ProductError):
    status = 404
    code = "product_not_found"

    def __init__(self, product_id: str):
        super().__init__(f"product {product_id!r} not found", id=product_id)
        self.product_id = product_id


class MalformedItem(ProductError):
    """A stored item that does not convert to a Product."""

    code = "malformed_item"


class StorageError(ProductError):
    status = 502
    code = "storage_error"
