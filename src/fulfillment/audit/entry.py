"""Audit entry aggregate — one immutable record of a committed order change.

Entries are written in the same unit of work as the order change they
describe. ``sequence`` equals the order revision produced by that change, so
per-order history is totally ordered by commit order even when timestamps
tie.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, Integer, String

from fulfillment.domain import fulfillment


@fulfillment.aggregate
class AuditEntry:
    order_id = Identifier(required=True)
    sequence = Integer(required=True, min_value=1)
    item_id = Identifier()
    action = String(required=True, max_length=500)
    operator_id = Identifier(required=True)
    operator_name = String(max_length=255)
    recorded_at = DateTime(required=True)

    @classmethod
    def record(
        cls,
        order,
        operator_id: str,
        operator_name: str | None,
        action: str,
        item_id: str | None = None,
        sequence: int | None = None,
    ):
        """Build the entry for one change to ``order``, by default its latest revision."""
        return cls(
            order_id=str(order.id),
            sequence=order.revision if sequence is None else sequence,
            item_id=item_id,
            action=action,
            operator_id=str(operator_id),
            operator_name=operator_name,
            recorded_at=datetime.now(UTC),
        )


def describe_transition(item, status, quantity: int, **details) -> str:
    """Human-readable action text, e.g. ``Item ITEM-001 (WH-001) picked qty 2``."""
    text = f"Item {item.id} ({item.sku}) {status.value.lower()} qty {quantity}"
    if details.get("material_id"):
        text += f" in {details['material_id']}"
    if details.get("carrier"):
        text += f" via {details['carrier']} tracking {details.get('tracking_number')}"
    return text
