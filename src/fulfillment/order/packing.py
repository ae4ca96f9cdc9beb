"""Order packing — command and handler.

Packing confirms the picked quantity went into a box, envelope or wrap from
the packing material catalog.
"""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from fulfillment.domain import fulfillment
from fulfillment.materials import select_material_for
from fulfillment.order.ledger import Transition
from fulfillment.order.lifecycle import ItemStatus
from fulfillment.order.order import Order
from fulfillment.order.recording import record_transitions


@fulfillment.command(part_of="Order")
class ConfirmPack:
    """Confirm a picked item has been packed."""

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    operator_id = Identifier(required=True)
    operator_name = String(max_length=255)
    material_id = String(required=True, max_length=50)
    quantity = Integer(min_value=1)


@fulfillment.command_handler(part_of=Order)
class PackingHandler:
    @handle(ConfirmPack)
    def confirm_pack(self, command):
        order = current_domain.repository_for(Order).get(command.order_id)
        material = select_material_for(order.item(command.item_id), command.material_id)

        order = record_transitions(
            command.order_id,
            [
                Transition(
                    command.item_id,
                    ItemStatus.PACKED,
                    command.quantity,
                    details={"material_id": material.id},
                )
            ],
            operator_id=command.operator_id,
            operator_name=command.operator_name,
        )
        return order.revision
