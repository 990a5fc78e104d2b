"""Order placement with inventory decrement.

An order, its lines and the matching stock decrements are written in one
transaction. Stock rows are read with ``SELECT ... FOR UPDATE`` (taken in id
order so two carts touching the same items cannot deadlock) and decremented
with a conditional ``UPDATE ... WHERE inventory >= :n`` whose affected-row
count is checked, so quantity on hand can never go negative even where the
store ignores row locks.
"""

from typing import Iterable, Optional, Union
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from storefront.core.logging_config import get_logger
from storefront.domain.models import GroceryItem, Order, OrderItem
from .errors import (
    CartValidationError,
    InsufficientInventoryError,
    ItemNotFoundError,
    StoreError,
    StoreFrontError,
)
from .schemas import DB_INT_MAX, CartLine

logger = get_logger(__name__)

def _is_db_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 < value <= DB_INT_MAX

def merge_cart_lines(lines: Iterable[Union[CartLine, dict]]) -> dict[int, int]:
    """Validate the cart shape and sum quantities per item, keeping first-seen order."""
    merged: dict[int, int] = {}
    for position, line in enumerate(lines):
        if isinstance(line, dict):
            item_id = line.get("item_id", line.get("itemId"))
            quantity = line.get("quantity")
        else:
            item_id, quantity = line.item_id, line.quantity
        if not _is_db_int(item_id):
            raise CartValidationError(f"Line {position}: itemId must be a positive integer", line=position)
        if not _is_db_int(quantity):
            raise CartValidationError(f"Line {position}: quantity must be a positive integer", line=position)
        merged[item_id] = merged.get(item_id, 0) + quantity
        if merged[item_id] > DB_INT_MAX:
            raise CartValidationError(f"Line {position}: quantity for item {item_id} is too large", line=position)
    if not merged:
        raise CartValidationError("Items array is required")
    return merged

class OrderService:
    def __init__(self, db: Session):
        self.db = db

    def list_for_user(self, user_id: int) -> list[Order]:
        return list(self.db.scalars(
            select(Order).where(Order.user_id == user_id).order_by(Order.created_at.desc(), Order.id.desc())
        ))

    def get(self, order_id: int) -> Optional[Order]:
        return self.db.get(Order, order_id)

    def place_order(self, user_id: int, lines: Iterable[Union[CartLine, dict]]) -> Order:
        cart = merge_cart_lines(lines)
        try:
            order = self._place(user_id, cart)
            self.db.commit()
        except StoreFrontError as e:
            self.db.rollback()
            logger.warning(
                f"Order rejected for user {user_id}: {e.message}",
                extra={'extra_fields': {'user_id': user_id, **e.to_dict()}}
            )
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                f"Order placement failed for user {user_id}",
                exc_info=True,
                extra={'extra_fields': {'user_id': user_id}}
            )
            raise StoreError() from e

        logger.info(
            f"Order {order.id} placed for user {user_id}",
            extra={'extra_fields': {
                'order_id': order.id,
                'user_id': user_id,
                'lines': [{'item_id': i, 'quantity': q} for i, q in cart.items()],
            }}
        )
        return order

    def _place(self, user_id: int, cart: dict[int, int]) -> Order:
        stock = self._lock_items(cart.keys())

        for item_id, quantity in cart.items():
            item = stock.get(item_id)
            if item is None:
                raise ItemNotFoundError(item_id)
            if item.inventory < quantity:
                raise InsufficientInventoryError(item_id, quantity, item.inventory)

        order = Order(user_id=user_id)
        self.db.add(order)
        self.db.flush()  # assign id

        for item_id, quantity in cart.items():
            order.items.append(OrderItem(
                item_id=item_id,
                quantity=quantity,
                unit_price=stock[item_id].price,
            ))
            self._decrement(item_id, quantity)

        self.db.flush()
        # Loaded rows still hold pre-decrement quantities
        for item in stock.values():
            self.db.expire(item, ["inventory", "updated_at"])
        return order

    def _lock_items(self, item_ids: Iterable[int]) -> dict[int, GroceryItem]:
        rows = self.db.scalars(
            select(GroceryItem)
            .where(GroceryItem.id.in_(sorted(item_ids)))
            .order_by(GroceryItem.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return {item.id: item for item in rows}

    def _decrement(self, item_id: int, quantity: int) -> None:
        result = self.db.execute(
            update(GroceryItem)
            .where(GroceryItem.id == item_id, GroceryItem.inventory >= quantity)
            .values(inventory=GroceryItem.inventory - quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 1:
            return
        # Lost a race with a concurrent order: report what is left now
        available = self.db.scalar(select(GroceryItem.inventory).where(GroceryItem.id == item_id))
        if available is None:
            raise ItemNotFoundError(item_id)
        raise InsufficientInventoryError(item_id, quantity, available)
