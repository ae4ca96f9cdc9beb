"""Committing item transitions together with their audit entries.

Command handlers call ``record_transitions`` inside their unit of work. The
order and its audit entries are written by the same unit of work, so either
both land or neither does.
"""

import structlog
from protean.utils.globals import current_domain

from fulfillment.audit.entry import AuditEntry, describe_transition
from fulfillment.order.ledger import Transition
from fulfillment.order.order import Order

logger = structlog.get_logger(__name__)


def record_transitions(
    order_id: str,
    transitions: list[Transition],
    operator_id: str,
    operator_name: str | None,
) -> Order:
    """Apply ``transitions`` through the ledger and append one audit entry per change."""
    order = current_domain.repository_for(Order).apply_item_transitions(order_id, transitions)

    entries = []
    for transition in transitions:
        item = order.item(transition.item_id)
        entries.append(
            AuditEntry.record(
                order,
                operator_id=operator_id,
                operator_name=operator_name,
                action=describe_transition(item, transition.status, transition.quantity, **transition.details),
                item_id=str(item.id),
                sequence=transition.revision,
            )
        )
    current_domain.repository_for(AuditEntry).append_all(entries)

    logger.info(
        "order_items_advanced",
        order_id=str(order.id),
        items=[t.item_id for t in transitions],
        status=order.status,
        revision=order.revision,
        operator_id=operator_id,
    )
    return order
