"""Scan verification — does a scanned barcode authorize a pick?

Verification only reads: it looks at the order and asks the stock oracle,
but never changes either. The resulting ``PickAuthorization`` is what the
picking handler commits.
"""

from dataclasses import dataclass

from fulfillment.errors import IllegalTransition, StockShortage, WrongProduct
from fulfillment.order.lifecycle import ItemStatus
from fulfillment.stock.port import StockOraclePort


@dataclass(frozen=True)
class PickAuthorization:
    order_id: str
    item_id: str
    sku: str
    quantity: int
    on_hand: int


def verify_scan(order, scanned_sku: str, stock_oracle: StockOraclePort) -> PickAuthorization:
    """Match ``scanned_sku`` to a pending item and check stock for it.

    Raises ``WrongProduct`` when no item on the order carries the SKU,
    ``IllegalTransition`` when the matching item is already past picking, and
    ``StockShortage`` when the oracle reports fewer units than requested.
    """
    item = order.item_for_sku(scanned_sku)
    if item is None:
        expected = sorted(i.sku for i in order.items_in(ItemStatus.PENDING))
        raise WrongProduct(
            f"Scanned {scanned_sku} does not belong to order {order.id}",
            order_id=str(order.id),
            scanned_sku=scanned_sku,
            expected_skus=expected,
        )

    if item.status != ItemStatus.PENDING.value:
        raise IllegalTransition(
            f"Item {item.id} ({item.sku}) is already {item.status}",
            order_id=str(order.id),
            item_id=str(item.id),
            current=item.status,
            target=ItemStatus.PICKED.value,
        )

    on_hand = stock_oracle.on_hand(scanned_sku)
    if on_hand < item.requested_quantity:
        raise StockShortage(
            f"Only {on_hand} of {scanned_sku} on hand, {item.requested_quantity} requested",
            order_id=str(order.id),
            item_id=str(item.id),
            sku=scanned_sku,
            requested=item.requested_quantity,
            on_hand=on_hand,
        )

    return PickAuthorization(
        order_id=str(order.id),
        item_id=str(item.id),
        sku=scanned_sku,
        quantity=item.requested_quantity,
        on_hand=on_hand,
    )
