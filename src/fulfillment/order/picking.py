"""Order picking — commands and handler.

``RecordPick`` commits a single pick that scan verification has already
authorized. ``PickItems`` commits several picks on one order at once, with
one audit entry per item.
"""

import json

from protean import handle
from protean.fields import Identifier, Integer, String, Text

from fulfillment.domain import fulfillment
from fulfillment.order.ledger import Transition
from fulfillment.order.lifecycle import ItemStatus
from fulfillment.order.order import Order
from fulfillment.order.recording import record_transitions


@fulfillment.command(part_of="Order")
class RecordPick:
    """Record that an item has been taken from the shelf."""

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    operator_id = Identifier(required=True)
    operator_name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)


@fulfillment.command(part_of="Order")
class PickItems:
    """Record several picks on the same order in one step."""

    order_id = Identifier(required=True)
    operator_id = Identifier(required=True)
    operator_name = String(max_length=255)
    picks = Text(required=True)  # JSON list of {"item_id", "quantity"}


@fulfillment.command_handler(part_of=Order)
class PickingHandler:
    @handle(RecordPick)
    def record_pick(self, command):
        order = record_transitions(
            command.order_id,
            [Transition(command.item_id, ItemStatus.PICKED, command.quantity)],
            operator_id=command.operator_id,
            operator_name=command.operator_name,
        )
        return order.revision

    @handle(PickItems)
    def pick_items(self, command):
        picks = json.loads(command.picks) if isinstance(command.picks, str) else command.picks
        order = record_transitions(
            command.order_id,
            [Transition(pick["item_id"], ItemStatus.PICKED, pick["quantity"]) for pick in picks],
            operator_id=command.operator_id,
            operator_name=command.operator_name,
        )
        return order.revision
