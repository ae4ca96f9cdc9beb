"""Order shipping — command and handler.

Records the carrier handoff for a packed item. This is where the engine's
responsibility ends.
"""

from protean import handle
from protean.fields import Identifier, Integer, String

from fulfillment.domain import fulfillment
from fulfillment.order.ledger import Transition
from fulfillment.order.lifecycle import ItemStatus
from fulfillment.order.order import Order
from fulfillment.order.recording import record_transitions


@fulfillment.command(part_of="Order")
class ConfirmShip:
    """Confirm a packed item has been handed to the carrier."""

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    operator_id = Identifier(required=True)
    operator_name = String(max_length=255)
    carrier = String(required=True, max_length=100)
    tracking_number = String(required=True, max_length=255)
    quantity = Integer(min_value=1)


@fulfillment.command_handler(part_of=Order)
class ShippingHandler:
    @handle(ConfirmShip)
    def confirm_ship(self, command):
        order = record_transitions(
            command.order_id,
            [
                Transition(
                    command.item_id,
                    ItemStatus.SHIPPED,
                    command.quantity,
                    details={
                        "carrier": command.carrier,
                        "tracking_number": command.tracking_number,
                    },
                )
            ],
            operator_id=command.operator_id,
            operator_name=command.operator_name,
        )
        return order.revision
