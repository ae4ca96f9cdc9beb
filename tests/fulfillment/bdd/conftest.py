"""Shared BDD fixtures and step definitions for order fulfillment."""

import pytest
from fulfillment.order.events import (
    ItemPacked,
    ItemPicked,
    ItemShipped,
    OrderReceived,
    OrderStatusChanged,
)
from fulfillment.order.lifecycle import ItemStatus
from fulfillment.order.order import Order
from pytest_bdd import given, parsers, then

_ORDER_EVENT_CLASSES = {
    "OrderReceived": OrderReceived,
    "ItemPicked": ItemPicked,
    "ItemPacked": ItemPacked,
    "ItemShipped": ItemShipped,
    "OrderStatusChanged": OrderStatusChanged,
}

_DEFAULT_ITEMS = [
    {"id": "ITEM-001", "sku": "WH-001", "product_name": "Wireless Headphones", "requested_quantity": 2},
    {"id": "ITEM-002", "sku": "SF-002", "product_name": "Smartphone Case", "requested_quantity": 1},
]


@pytest.fixture()
def error():
    """Container for captured fulfillment errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
def _new_order():
    return Order.create(
        order_id="ord-bdd-001",
        customer_ref="cust-bdd",
        shipping_address="Rua Augusta 100, Lisboa",
        items_data=[dict(item) for item in _DEFAULT_ITEMS],
    )


@given("a pending order with two items", target_fixture="order")
def pending_order():
    order = _new_order()
    order._events.clear()
    return order


@given("an order with every item picked", target_fixture="order")
def picked_order():
    order = _new_order()
    for item in order.items:
        order.apply_item_transition(str(item.id), ItemStatus.PICKED, item.requested_quantity)
    order._events.clear()
    return order


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order, status):
    assert order.status == status


@then(parsers.cfparse("a {event_type} event is raised"))
def order_event_raised(order, event_type):
    event_cls = _ORDER_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in order._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in order._events]}"


@then(parsers.cfparse("the action fails with {code}"))
def action_fails_with(error, code):
    assert error["exc"] is not None, f"Expected {code} but nothing was raised"
    assert error["exc"].code == code


@then(parsers.cfparse("no {event_type} event is raised"))
def order_event_not_raised(order, event_type):
    event_cls = _ORDER_EVENT_CLASSES[event_type]
    assert not any(isinstance(e, event_cls) for e in order._events)
