"""Item ledger — repository of orders and their line items.

The ledger is the authoritative store of per-item state. It is addressed by
order id and never hands out partially-updated orders: transitions are
validated on the aggregate before anything is written.
"""

from dataclasses import dataclass, field

from protean.core.repository import BaseRepository
from protean.exceptions import ObjectNotFoundError

from fulfillment.domain import fulfillment
from fulfillment.errors import DuplicateOrder, NotFound
from fulfillment.order.lifecycle import ItemStatus, OrderStatus
from fulfillment.order.order import Order


@dataclass
class Transition:
    """One item move. ``quantity`` and ``revision`` are filled in once applied."""

    item_id: str
    status: ItemStatus
    quantity: int | None = None
    details: dict = field(default_factory=dict)
    revision: int | None = None


def _previous_quantity(item, status: ItemStatus) -> int:
    if status == ItemStatus.PACKED and item.picked_quantity is not None:
        return item.picked_quantity
    if status == ItemStatus.SHIPPED and item.packed_quantity is not None:
        return item.packed_quantity
    return item.requested_quantity


@fulfillment.repository(part_of=Order)
class ItemLedger(BaseRepository):
    """Repository for the Order aggregate with ledger operations."""

    def get(self, identifier) -> Order:
        try:
            return BaseRepository.get(self, identifier)
        except ObjectNotFoundError as exc:
            raise NotFound(f"Order {identifier} not found", order_id=str(identifier)) from exc

    def exists(self, order_id: str) -> bool:
        return bool(self._dao.query.filter(id=str(order_id)).all().items)

    def receive(self, order: Order) -> Order:
        """Store a new order coming from intake."""
        if self.exists(order.id):
            raise DuplicateOrder(f"Order {order.id} already exists", order_id=str(order.id))
        self.add(order)
        return order

    def apply_item_transition(
        self,
        order_id: str,
        item_id: str,
        new_status: ItemStatus,
        quantity: int | None = None,
        **details,
    ) -> Order:
        """Advance one item, persist the order, and return the new snapshot.

        ``quantity`` defaults to the quantity confirmed at the previous stage.
        """
        return self.apply_item_transitions(order_id, [Transition(item_id, new_status, quantity, details)])

    def apply_item_transitions(self, order_id: str, transitions: list[Transition]) -> Order:
        """Apply ``transitions`` in order against one load of the order.

        Any rejected transition raises before the order is written, so the
        batch lands whole or not at all.
        """
        order = self.get(order_id)
        for transition in transitions:
            if transition.quantity is None:
                transition.quantity = _previous_quantity(order.item(transition.item_id), transition.status)
            order.apply_item_transition(
                transition.item_id,
                transition.status,
                transition.quantity,
                **transition.details,
            )
            transition.revision = order.revision
        self.add(order)
        return order

    def in_phase(self, *statuses: OrderStatus) -> list[Order]:
        """Orders whose derived status is one of ``statuses``, oldest first."""
        return (
            self._dao.query.filter(status__in=[status.value for status in statuses])
            .order_by("created_at")
            .all()
            .items
        )
