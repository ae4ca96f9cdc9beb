"""Order aggregate (CQRS) — the item ledger for one customer order.

The Order aggregate owns its line items and is the only place their status
changes. The order status is recomputed from the items after every mutation
(see ``fulfillment.order.lifecycle``) and ``revision`` counts committed
changes; the audit log uses it as the per-order sequence number.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Integer,
    String,
    Text,
)

from fulfillment.domain import fulfillment
from fulfillment.errors import (
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
from fulfillment.order.lifecycle import (
    ItemStatus,
    OrderStatus,
    assert_successor,
    derive_order_status,
    is_ready_to_ship,
)

# Quantity field recorded when an item reaches each status
_QUANTITY_FIELDS = {
    ItemStatus.PICKED: "picked_quantity",
    ItemStatus.PACKED: "packed_quantity",
    ItemStatus.SHIPPED: "shipped_quantity",
}


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@fulfillment.entity(part_of="Order")
class OrderItem:
    """A single line item moving through the warehouse.

    The requested quantity is fixed at intake. Picked, packed and shipped
    quantities are only filled in when the item reaches that status and always
    equal the requested quantity.
    """

    sku = String(required=True, max_length=100)
    product_name = String(max_length=255)
    requested_quantity = Integer(required=True, min_value=1)
    unit_price = Float(min_value=0.0, default=0.0)
    is_fragile = Boolean(default=False)
    status = String(
        max_length=50,
        choices=ItemStatus,
        default=ItemStatus.PENDING.value,
    )
    picked_quantity = Integer(min_value=0)
    packed_quantity = Integer(min_value=0)
    shipped_quantity = Integer(min_value=0)
    packing_material = String(max_length=50)
    carrier = String(max_length=100)
    tracking_number = String(max_length=255)

    @invariant.post
    def quantities_cannot_exceed_request(self):
        for field_name in _QUANTITY_FIELDS.values():
            value = getattr(self, field_name)
            if value is not None and value > self.requested_quantity:
                raise ValidationError({field_name: ["Cannot exceed the requested quantity"]})


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@fulfillment.aggregate
class Order:
    customer_ref = String(required=True, max_length=100)
    customer_name = String(max_length=255)
    customer_email = String(max_length=255)
    shipping_address = Text(required=True)
    supplier_ref = String(max_length=100)
    special_instructions = Text()
    total_amount = Float(min_value=0.0)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    revision = Integer(default=0, min_value=0)
    items = HasMany(OrderItem)
    carrier = String(max_length=100)
    tracking_number = String(max_length=255)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def skus_must_be_unique(self):
        skus = [item.sku for item in self.items or []]
        if len(skus) != len(set(skus)):
            raise ValidationError({"items": ["SKUs must be unique within an order"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        order_id: str,
        customer_ref: str,
        shipping_address: str,
        items_data: list[dict],
        supplier_ref: str | None = None,
        special_instructions: str | None = None,
        customer_name: str | None = None,
        customer_email: str | None = None,
        total_amount: float | None = None,
    ):
        """Accept a new order from intake with its immutable item list."""
        if not items_data:
            raise InvalidOrder("An order must contain at least one item", order_id=order_id)

        skus = [item.get("sku") for item in items_data]
        duplicates = sorted({sku for sku in skus if skus.count(sku) > 1})
        if duplicates:
            raise InvalidOrder(
                f"Duplicate SKUs in order: {', '.join(duplicates)}",
                order_id=order_id,
            )

        for item_data in items_data:
            quantity = item_data.get("requested_quantity")
            if quantity is None or quantity < 1:
                raise InvalidOrder(
                    f"Item {item_data.get('sku')} must request a positive quantity",
                    order_id=order_id,
                )

        now = datetime.now(UTC)
        order = cls(
            id=order_id,
            customer_ref=customer_ref,
            customer_name=customer_name,
            customer_email=customer_email,
            shipping_address=shipping_address,
            supplier_ref=supplier_ref,
            special_instructions=special_instructions,
            total_amount=total_amount,
            status=OrderStatus.PENDING.value,
            revision=0,
            created_at=now,
            updated_at=now,
        )
        for item_data in items_data:
            order.add_items(OrderItem(**{k: v for k, v in item_data.items() if v is not None}))

        order.raise_(
            OrderReceived(
                order_id=str(order.id),
                customer_ref=customer_ref,
                supplier_ref=supplier_ref or "",
                item_count=len(items_data),
                received_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------
    def item(self, item_id: str) -> OrderItem:
        item = next((i for i in (self.items or []) if str(i.id) == str(item_id)), None)
        if item is None:
            raise NotFound(f"Item {item_id} not found in order {self.id}", item_id=str(item_id))
        return item

    def item_for_sku(self, sku: str) -> OrderItem | None:
        return next((i for i in (self.items or []) if i.sku == sku), None)

    def items_in(self, status: ItemStatus) -> list[OrderItem]:
        return [i for i in (self.items or []) if i.status == status.value]

    def derived_status(self) -> OrderStatus:
        return derive_order_status(i.status for i in self.items)

    def is_ready_to_ship(self) -> bool:
        return is_ready_to_ship(i.status for i in (self.items or []))

    # -------------------------------------------------------------------
    # Item transitions
    # -------------------------------------------------------------------
    def apply_item_transition(
        self,
        item_id: str,
        new_status: ItemStatus,
        quantity: int,
        material_id: str | None = None,
        carrier: str | None = None,
        tracking_number: str | None = None,
    ) -> OrderItem:
        """Move one item to its next status and recompute the order status.

        All checks run before anything is changed, so a rejected transition
        leaves the aggregate untouched.
        """
        item = self.item(item_id)
        assert_successor(item.status, new_status)

        if quantity > item.requested_quantity:
            raise QuantityExceeded(
                f"Cannot confirm {quantity} of item {item.id}; only {item.requested_quantity} requested",
                item_id=str(item.id),
                quantity=quantity,
                requested=item.requested_quantity,
            )
        if quantity < item.requested_quantity:
            raise PartialQuantity(
                f"Item {item.id} needs {item.requested_quantity}, got {quantity}",
                item_id=str(item.id),
                quantity=quantity,
                requested=item.requested_quantity,
            )

        now = datetime.now(UTC)
        previous_status = OrderStatus(self.status)

        with atomic_change(self):
            item.status = new_status.value
            setattr(item, _QUANTITY_FIELDS[new_status], quantity)
            if new_status == ItemStatus.PACKED:
                item.packing_material = material_id
            if new_status == ItemStatus.SHIPPED:
                item.carrier = carrier
                item.tracking_number = tracking_number
                self.carrier = carrier
                self.tracking_number = tracking_number

            self.status = self.derived_status().value
            self.revision = (self.revision or 0) + 1
            self.updated_at = now

        self._raise_item_event(item, new_status, quantity, now)
        if self.status != previous_status.value:
            self.raise_(
                OrderStatusChanged(
                    order_id=str(self.id),
                    from_status=previous_status.value,
                    to_status=self.status,
                    revision=self.revision,
                    changed_at=now,
                )
            )
        return item

    def _raise_item_event(self, item, new_status, quantity, now):
        common = {
            "order_id": str(self.id),
            "item_id": str(item.id),
            "sku": item.sku,
            "quantity": quantity,
            "revision": self.revision,
        }
        if new_status == ItemStatus.PICKED:
            self.raise_(ItemPicked(picked_at=now, **common))
        elif new_status == ItemStatus.PACKED:
            self.raise_(ItemPacked(material_id=item.packing_material, packed_at=now, **common))
        else:
            self.raise_(
                ItemShipped(
                    carrier=item.carrier,
                    tracking_number=item.tracking_number,
                    shipped_at=now,
                    **common,
                )
            )
