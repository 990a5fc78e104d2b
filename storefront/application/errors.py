"""Failures raised by order placement.

Each error knows the HTTP status it maps to and a stable machine-readable
``code``; ``details`` are merged into the JSON error body.
"""

from typing import Any, Dict


class StoreFrontError(Exception):
    status_code = 500
    code = "error"

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, **self.details}


class CartValidationError(StoreFrontError):
    """Malformed or empty cart; raised before touching the store."""

    status_code = 400
    code = "validation_error"


class ItemNotFoundError(StoreFrontError):
    status_code = 404
    code = "item_not_found"

    def __init__(self, item_id: int) -> None:
        super().__init__(f"Item {item_id} not found", itemId=item_id)
        self.item_id = item_id


class InsufficientInventoryError(StoreFrontError):
    status_code = 409
    code = "insufficient_inventory"

    def __init__(self, item_id: int, requested: int, available: int) -> None:
        shortfall = requested - available
        super().__init__(
            f"Insufficient inventory for item {item_id}: "
            f"requested {requested}, available {available} (short by {shortfall})",
            itemId=item_id,
            requested=requested,
            available=available,
            shortfall=shortfall,
        )
        self.item_id = item_id
        self.requested = requested
        self.available = available
        self.shortfall = shortfall


class StoreError(StoreFrontError):
    """The database failed underneath us. The message never carries driver details."""

    status_code = 500
    code = "store_error"

    def __init__(self, message: str = "Order could not be placed, please try again later") -> None:
        super().__init__(message)
