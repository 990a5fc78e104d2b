import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from storefront.application.errors import (
    CartValidationError,
    InsufficientInventoryError,
    ItemNotFoundError,
    StoreError,
)
from storefront.application.order_service import OrderService, merge_cart_lines
from storefront.application.schemas import CartLine
from storefront.domain.models import GroceryItem, Order, OrderItem
from storefront.infrastructure.db import SessionLocal

def store_state():
    """Row counts and quantities on hand, read through a separate session."""
    with SessionLocal() as s:
        return {
            "orders": s.scalar(select(func.count()).select_from(Order)),
            "order_items": s.scalar(select(func.count()).select_from(OrderItem)),
            "inventory": dict(s.execute(select(GroceryItem.id, GroceryItem.inventory)).all()),
        }

def cart(*pairs):
    return [CartLine(item_id=item_id, quantity=quantity) for item_id, quantity in pairs]

def test_place_order_decrements_stock(db, customer, make_item):
    item = make_item(inventory=10, price=2.5)

    order = OrderService(db).place_order(customer.id, cart((item.id, 2)))

    assert order.id is not None
    assert order.user_id == customer.id
    assert len(order.items) == 1
    line = order.items[0]
    assert (line.item_id, line.quantity, float(line.unit_price)) == (item.id, 2, 2.5)
    assert store_state() == {"orders": 1, "order_items": 1, "inventory": {item.id: 8}}

def test_stock_plus_ordered_equals_previous_stock(db, customer, make_item):
    items = [make_item(name=f"item-{n}", inventory=n * 10) for n in range(1, 4)]
    before = store_state()["inventory"]
    requested = {items[0].id: 3, items[1].id: 20, items[2].id: 1}

    OrderService(db).place_order(customer.id, cart(*requested.items()))

    after = store_state()["inventory"]
    for item_id, quantity in requested.items():
        assert after[item_id] + quantity == before[item_id]

def test_unit_price_is_captured_at_purchase(db, customer, make_item):
    item = make_item(price=4.0)
    order = OrderService(db).place_order(customer.id, cart((item.id, 1)))

    item.price = 9.0
    db.commit()

    db.refresh(order.items[0])
    assert float(order.items[0].unit_price) == 4.0

def test_insufficient_inventory_leaves_store_unchanged(db, customer, make_item):
    item = make_item(inventory=10)
    before = store_state()

    with pytest.raises(InsufficientInventoryError) as exc:
        OrderService(db).place_order(customer.id, cart((item.id, 11)))

    assert exc.value.item_id == item.id
    assert exc.value.requested == 11
    assert exc.value.available == 10
    assert exc.value.shortfall == 1
    assert store_state() == before

def test_one_understocked_line_aborts_whole_cart(db, customer, make_item):
    plenty = make_item(name="plenty", inventory=100)
    scarce = make_item(name="scarce", inventory=1)
    before = store_state()

    with pytest.raises(InsufficientInventoryError) as exc:
        OrderService(db).place_order(customer.id, cart((plenty.id, 5), (scarce.id, 2)))

    assert exc.value.item_id == scarce.id
    assert store_state() == before

def test_unknown_item_raises_not_found(db, customer, make_item):
    item = make_item()
    before = store_state()

    with pytest.raises(ItemNotFoundError) as exc:
        OrderService(db).place_order(customer.id, cart((item.id, 1), (9999, 1)))

    assert exc.value.item_id == 9999
    assert store_state() == before

def test_first_failing_line_in_submission_order_is_reported(db, customer, make_item):
    scarce = make_item(name="scarce", inventory=0)
    # Missing item is submitted first even though its id sorts after the scarce one
    with pytest.raises(ItemNotFoundError):
        OrderService(db).place_order(customer.id, cart((scarce.id + 100, 1), (scarce.id, 1)))

def test_failure_is_repeatable(db, customer, make_item):
    item = make_item(inventory=2)
    service = OrderService(db)

    for _ in range(3):
        with pytest.raises(InsufficientInventoryError):
            service.place_order(customer.id, cart((item.id, 5)))
    assert store_state()["inventory"] == {item.id: 2}

def test_duplicate_lines_are_merged(db, customer, make_item):
    item = make_item(inventory=10)

    order = OrderService(db).place_order(customer.id, cart((item.id, 2), (item.id, 3)))

    assert [(l.item_id, l.quantity) for l in order.items] == [(item.id, 5)]
    assert store_state()["inventory"] == {item.id: 5}

def test_duplicate_lines_checked_against_combined_quantity(db, customer, make_item):
    item = make_item(inventory=4)
    with pytest.raises(InsufficientInventoryError) as exc:
        OrderService(db).place_order(customer.id, cart((item.id, 2), (item.id, 3)))
    assert exc.value.requested == 5

def test_order_can_drain_stock_to_zero(db, customer, make_item):
    item = make_item(inventory=3)
    OrderService(db).place_order(customer.id, cart((item.id, 3)))
    assert store_state()["inventory"] == {item.id: 0}

@pytest.mark.parametrize("lines", [
    [],
    [{"itemId": 1, "quantity": 0}],
    [{"itemId": 1, "quantity": -2}],
    [{"itemId": "1", "quantity": 1}],
    [{"itemId": 1, "quantity": 1.5}],
    [{"quantity": 1}],
    [{"itemId": 0, "quantity": 1}],
    [{"itemId": 2**63, "quantity": 1}],
    [{"itemId": 1, "quantity": 2**31}],
    [{"itemId": 1, "quantity": 2**31 - 1}, {"itemId": 1, "quantity": 1}],
])
def test_malformed_cart_rejected_before_store_access(db, customer, lines):
    with pytest.raises(CartValidationError):
        OrderService(db).place_order(customer.id, lines)
    assert store_state()["orders"] == 0

def test_merge_cart_lines_keeps_first_seen_order():
    merged = merge_cart_lines([
        {"itemId": 3, "quantity": 1},
        {"item_id": 1, "quantity": 2},
        {"itemId": 3, "quantity": 4},
    ])
    assert list(merged.items()) == [(3, 5), (1, 2)]

def test_store_failure_rolls_back_and_hides_details(db, customer, make_item, monkeypatch):
    item = make_item(inventory=10)
    before = store_state()

    def broken_decrement(self, item_id, quantity):
        raise OperationalError("UPDATE grocery_items ...", {}, Exception("disk I/O error"))

    monkeypatch.setattr(OrderService, "_decrement", broken_decrement)

    with pytest.raises(StoreError) as exc:
        OrderService(db).place_order(customer.id, cart((item.id, 1)))

    assert "disk" not in exc.value.message
    assert isinstance(exc.value.__cause__, OperationalError)
    assert store_state() == before

def test_lost_race_is_reported_as_insufficient(db, customer, make_item):
    item = make_item(inventory=5)
    service = OrderService(db)
    stale_lock = service._lock_items

    def lock_then_competitor_buys(item_ids):
        stock = stale_lock(item_ids)
        with SessionLocal() as other:
            OrderService(other).place_order(customer.id, cart((item.id, 3)))
        return stock

    service._lock_items = lock_then_competitor_buys

    with pytest.raises(InsufficientInventoryError) as exc:
        service.place_order(customer.id, cart((item.id, 3)))

    assert exc.value.available == 2
    assert store_state() == {"orders": 1, "order_items": 1, "inventory": {item.id: 2}}

@pytest.mark.concurrency
def test_concurrent_orders_never_oversell(customer, make_item):
    item = make_item(inventory=5)
    barrier = threading.Barrier(2)

    def attempt():
        barrier.wait()
        with SessionLocal() as session:
            try:
                return OrderService(session).place_order(customer.id, cart((item.id, 3)))
            except InsufficientInventoryError as e:
                return e

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = list(pool.map(lambda _: attempt(), range(2)))

    successes = [r for r in results if isinstance(r, Order)]
    failures = [r for r in results if isinstance(r, InsufficientInventoryError)]
    assert len(successes) == 1
    assert len(failures) == 1
    assert store_state() == {"orders": 1, "order_items": 1, "inventory": {item.id: 2}}

def test_list_for_user_only_returns_own_orders(db, customer, make_user, make_item):
    other = make_user(email="other@example.com")
    item = make_item(inventory=10)
    service = OrderService(db)
    first = service.place_order(customer.id, cart((item.id, 1)))
    second = service.place_order(customer.id, cart((item.id, 1)))
    service.place_order(other.id, cart((item.id, 1)))

    orders = service.list_for_user(customer.id)

    assert [o.id for o in orders] == [second.id, first.id]
