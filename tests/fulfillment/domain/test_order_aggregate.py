"""Tests for the Order aggregate — intake and item transitions."""

import pytest
from fulfillment.errors import (
    IllegalTransition,
    InvalidOrder,
    NotFound,
    PartialQuantity,
    QuantityExceeded,
)
from fulfillment.order.events import (
    ItemPacked,
    ItemPicked,
    ItemShipped,
    OrderReceived,
    OrderStatusChanged,
)
from fulfillment.order.lifecycle import ItemStatus, OrderStatus
from fulfillment.order.order import Order


def _items():
    return [
        {"id": "ITEM-001", "sku": "WH-001", "product_name": "Wireless Headphones", "requested_quantity": 2},
        {"id": "ITEM-002", "sku": "SF-002", "product_name": "Smartphone Case", "requested_quantity": 1},
    ]


def _make_order(items=None):
    return Order.create(
        order_id="O1",
        customer_ref="CUST-001",
        shipping_address="Rua Augusta 100, Lisboa",
        items_data=items or _items(),
        customer_name="Maria Santos",
    )


def _picked(order):
    for item in order.items:
        order.apply_item_transition(str(item.id), ItemStatus.PICKED, item.requested_quantity)
    return order


class TestOrderCreation:
    def test_new_order_is_pending(self):
        order = _make_order()
        assert order.id == "O1"
        assert order.status == OrderStatus.PENDING.value
        assert order.revision == 0
        assert [item.status for item in order.items] == ["Pending", "Pending"]

    def test_item_ids_are_kept(self):
        order = _make_order()
        assert [str(item.id) for item in order.items] == ["ITEM-001", "ITEM-002"]

    def test_raises_order_received(self):
        order = _make_order()
        assert len(order._events) == 1
        event = order._events[0]
        assert isinstance(event, OrderReceived)
        assert event.item_count == 2

    def test_empty_item_list_is_rejected(self):
        with pytest.raises(InvalidOrder):
            _make_order(items=[])

    def test_duplicate_skus_are_rejected(self):
        items = _items()
        items[1]["sku"] = "WH-001"
        with pytest.raises(InvalidOrder) as exc:
            _make_order(items=items)
        assert "WH-001" in exc.value.message

    def test_non_positive_quantity_is_rejected(self):
        items = _items()
        items[0]["requested_quantity"] = 0
        with pytest.raises(InvalidOrder):
            _make_order(items=items)


class TestItemTransitions:
    def test_pick_sets_quantity_and_status(self):
        order = _make_order()
        item = order.apply_item_transition("ITEM-001", ItemStatus.PICKED, 2)
        assert item.status == ItemStatus.PICKED.value
        assert item.picked_quantity == 2

    def test_order_stays_pending_while_any_item_is_pending(self):
        order = _make_order()
        order.apply_item_transition("ITEM-001", ItemStatus.PICKED, 2)
        assert order.status == OrderStatus.PENDING.value
        assert order.revision == 1

    def test_all_picked_moves_order_to_packing(self):
        order = _picked(_make_order())
        assert order.status == OrderStatus.PACKING.value
        assert order.is_ready_to_ship() is False

    def test_pack_records_material(self):
        order = _picked(_make_order())
        item = order.apply_item_transition("ITEM-001", ItemStatus.PACKED, 2, material_id="BOX-002")
        assert item.packing_material == "BOX-002"
        assert item.packed_quantity == 2

    def test_ship_copies_carrier_to_order(self):
        order = _picked(_make_order())
        order.apply_item_transition("ITEM-001", ItemStatus.PACKED, 2, material_id="BOX-002")
        item = order.apply_item_transition(
            "ITEM-001", ItemStatus.SHIPPED, 2, carrier="DHL", tracking_number="TRK123"
        )
        assert item.carrier == "DHL"
        assert order.tracking_number == "TRK123"
        assert order.status == OrderStatus.PACKING.value

    def test_every_item_shipped_ships_the_order(self):
        order = _picked(_make_order())
        for item in order.items:
            order.apply_item_transition(str(item.id), ItemStatus.PACKED, item.requested_quantity, material_id="BOX-001")
        assert order.is_ready_to_ship() is True
        for item in order.items:
            order.apply_item_transition(
                str(item.id), ItemStatus.SHIPPED, item.requested_quantity, carrier="DHL", tracking_number="TRK123"
            )
        assert order.status == OrderStatus.SHIPPED.value
        assert order.revision == 6

    def test_unknown_item(self):
        with pytest.raises(NotFound):
            _make_order().apply_item_transition("ITEM-999", ItemStatus.PICKED, 1)

    def test_skipping_a_step_is_rejected(self):
        order = _make_order()
        with pytest.raises(IllegalTransition):
            order.apply_item_transition("ITEM-001", ItemStatus.PACKED, 2)
        assert order.items[0].status == ItemStatus.PENDING.value
        assert order.revision == 0

    def test_quantity_above_request_is_rejected(self):
        order = _make_order()
        with pytest.raises(QuantityExceeded):
            order.apply_item_transition("ITEM-001", ItemStatus.PICKED, 3)
        assert order.items[0].picked_quantity is None

    def test_partial_quantity_is_rejected(self):
        order = _make_order()
        with pytest.raises(PartialQuantity):
            order.apply_item_transition("ITEM-001", ItemStatus.PICKED, 1)
        assert order.items[0].status == ItemStatus.PENDING.value


class TestTransitionEvents:
    def test_first_pick_raises_only_item_picked(self):
        order = _make_order()
        order._events.clear()
        order.apply_item_transition("ITEM-001", ItemStatus.PICKED, 2)
        assert [type(e) for e in order._events] == [ItemPicked]

    def test_last_pick_raises_status_change_to_packing(self):
        order = _make_order()
        order.apply_item_transition("ITEM-001", ItemStatus.PICKED, 2)
        order._events.clear()
        order.apply_item_transition("ITEM-002", ItemStatus.PICKED, 1)

        assert [type(e) for e in order._events] == [ItemPicked, OrderStatusChanged]
        changed = order._events[1]
        assert changed.from_status == "Pending"
        assert changed.to_status == "Packing"
        assert changed.revision == 2

    def test_no_status_change_event_when_status_holds(self):
        order = _picked(_make_order())
        order._events.clear()
        order.apply_item_transition("ITEM-001", ItemStatus.PACKED, 2, material_id="BOX-002")
        assert [type(e) for e in order._events] == [ItemPacked]
        assert order._events[0].material_id == "BOX-002"

    def test_ship_event_carries_tracking(self):
        order = _picked(_make_order())
        order.apply_item_transition("ITEM-001", ItemStatus.PACKED, 2, material_id="BOX-002")
        order._events.clear()
        order.apply_item_transition("ITEM-001", ItemStatus.SHIPPED, 2, carrier="DHL", tracking_number="TRK123")
        event = order._events[0]
        assert isinstance(event, ItemShipped)
        assert event.tracking_number == "TRK123"
