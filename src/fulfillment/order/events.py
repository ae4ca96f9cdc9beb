"""Order domain events — immutable facts about fulfillment progress.

All events are past tense, versioned, and carry the order revision at which
they happened so consumers can order them without relying on clocks.
"""

from protean.fields import DateTime, Identifier, Integer, String

from fulfillment.domain import fulfillment


@fulfillment.event(part_of="Order")
class OrderReceived:
    """An order was handed over by intake and is ready for picking."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_ref = String(required=True)
    supplier_ref = String()
    item_count = Integer(required=True)
    received_at = DateTime(required=True)


@fulfillment.event(part_of="Order")
class ItemPicked:
    """A line item was taken from the shelf in full."""

    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    sku = String(required=True)
    quantity = Integer(required=True)
    revision = Integer(required=True)
    picked_at = DateTime(required=True)


@fulfillment.event(part_of="Order")
class ItemPacked:
    """A picked line item was placed into shipping material."""

    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    sku = String(required=True)
    quantity = Integer(required=True)
    material_id = String(required=True)
    revision = Integer(required=True)
    packed_at = DateTime(required=True)


@fulfillment.event(part_of="Order")
class ItemShipped:
    """A packed line item left the warehouse with a carrier."""

    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    sku = String(required=True)
    quantity = Integer(required=True)
    carrier = String(required=True)
    tracking_number = String(required=True)
    revision = Integer(required=True)
    shipped_at = DateTime(required=True)


@fulfillment.event(part_of="Order")
class OrderStatusChanged:
    """The derived order status crossed a phase boundary."""

    __version__ = 1

    order_id = Identifier(required=True)
    from_status = String(required=True)
    to_status = String(required=True)
    revision = Integer(required=True)
    changed_at = DateTime(required=True)
