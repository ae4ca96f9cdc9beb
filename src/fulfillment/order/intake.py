"""Order intake — command and handler.

Orders arrive from the upstream intake system with their item list already
fixed. The engine only stores them; it never edits the item list afterwards.
"""

import json

from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from fulfillment.domain import fulfillment
from fulfillment.order.order import Order


@fulfillment.command(part_of="Order")
class ReceiveOrder:
    """Hand a new order over from intake."""

    order_id = Identifier(required=True)
    customer_ref = String(required=True, max_length=100)
    customer_name = String(max_length=255)
    customer_email = String(max_length=255)
    shipping_address = Text(required=True)
    supplier_ref = String(max_length=100)
    special_instructions = Text()
    total_amount = Float(min_value=0.0)
    items = Text(required=True)  # JSON list of item dicts


@fulfillment.command_handler(part_of=Order)
class IntakeHandler:
    @handle(ReceiveOrder)
    def receive_order(self, command):
        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items
        order = Order.create(
            order_id=command.order_id,
            customer_ref=command.customer_ref,
            shipping_address=command.shipping_address,
            items_data=items_data,
            supplier_ref=command.supplier_ref,
            special_instructions=command.special_instructions,
            customer_name=command.customer_name,
            customer_email=command.customer_email,
            total_amount=command.total_amount,
        )
        current_domain.repository_for(Order).receive(order)
        return str(order.id)
