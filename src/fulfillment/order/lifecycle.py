"""Fulfillment state machine — item progression and derived order status.

Items move one step at a time along a fixed chain:

    Pending → Picked → Packed → Shipped

The order status is never stored on its own authority. It follows the
least-progressed item, so an order never reports a later status than any of
its items:

    any item Pending                           → Pending
    all items ≥ Picked, not all Shipped        → Packing
    all items Shipped                          → Shipped

``Picking`` and ``Completed`` are accepted order statuses but are never
derived here; ``Completed`` belongs to the delivery-confirmation collaborator.
"""

from collections.abc import Iterable
from enum import Enum

from fulfillment.errors import IllegalTransition


class ItemStatus(Enum):
    PENDING = "Pending"
    PICKED = "Picked"
    PACKED = "Packed"
    SHIPPED = "Shipped"


class OrderStatus(Enum):
    PENDING = "Pending"
    PICKING = "Picking"
    PACKING = "Packing"
    SHIPPED = "Shipped"
    COMPLETED = "Completed"


class WorkQueue(Enum):
    PICKING = "picking"
    PACKING = "packing"
    SHIPPING = "shipping"


_ITEM_CHAIN = [
    ItemStatus.PENDING,
    ItemStatus.PICKED,
    ItemStatus.PACKED,
    ItemStatus.SHIPPED,
]

_RANK = {status: rank for rank, status in enumerate(_ITEM_CHAIN)}

_QUEUE_STATUSES = {
    WorkQueue.PICKING: (OrderStatus.PENDING, OrderStatus.PICKING),
    WorkQueue.PACKING: (OrderStatus.PACKING,),
    WorkQueue.SHIPPING: (OrderStatus.SHIPPED,),
}


def _as_item_status(status) -> ItemStatus:
    return status if isinstance(status, ItemStatus) else ItemStatus(status)


def rank(status) -> int:
    """Position of an item status in the progression chain."""
    return _RANK[_as_item_status(status)]


def next_item_status(status) -> ItemStatus | None:
    """Immediate successor of ``status``, or None when it is terminal."""
    position = rank(status) + 1
    return _ITEM_CHAIN[position] if position < len(_ITEM_CHAIN) else None


def assert_successor(current, target) -> None:
    """Raise IllegalTransition unless ``target`` immediately follows ``current``."""
    current = _as_item_status(current)
    target = _as_item_status(target)
    if next_item_status(current) != target:
        raise IllegalTransition(
            f"Cannot move item from {current.value} to {target.value}",
            current=current.value,
            target=target.value,
        )


def derive_order_status(item_statuses: Iterable) -> OrderStatus:
    """Order status implied by a set of item statuses."""
    ranks = [rank(status) for status in item_statuses]
    if not ranks:
        raise ValueError("An order without items has no status")

    lowest = min(ranks)
    if lowest == rank(ItemStatus.PENDING):
        return OrderStatus.PENDING
    if lowest == rank(ItemStatus.SHIPPED):
        return OrderStatus.SHIPPED
    return OrderStatus.PACKING


def is_ready_to_ship(item_statuses: Iterable) -> bool:
    """True once every item has at least been packed."""
    ranks = [rank(status) for status in item_statuses]
    return bool(ranks) and min(ranks) >= rank(ItemStatus.PACKED)


def queue_statuses(queue) -> tuple[OrderStatus, ...]:
    """Order statuses shown in an operator work queue."""
    queue = queue if isinstance(queue, WorkQueue) else WorkQueue(queue)
    return _QUEUE_STATUSES[queue]
