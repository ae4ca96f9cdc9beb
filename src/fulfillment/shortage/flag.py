"""Stock shortage review.

When a scan finds less stock than the order needs, the pick is refused and a
flag is raised for a supervisor to look at. Flags outlive the failed pick:
they are written in their own unit of work. A supervisor resolves a flag
once the stock problem has been dealt with.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import handle
from protean.core.repository import BaseRepository
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from fulfillment.domain import fulfillment
from fulfillment.errors import IllegalTransition, NotFound


class ShortageStatus(Enum):
    OPEN = "Open"
    RESOLVED = "Resolved"


@fulfillment.aggregate
class ShortageFlag:
    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    sku = String(required=True, max_length=100)
    requested_quantity = Integer(required=True, min_value=1)
    on_hand = Integer(required=True)
    operator_id = Identifier(required=True)
    flagged_at = DateTime(required=True)
    status = String(
        max_length=20,
        choices=ShortageStatus,
        default=ShortageStatus.OPEN.value,
    )
    resolved_by = Identifier()
    resolved_at = DateTime()

    def resolve(self, operator_id: str) -> None:
        """Close the flag once a supervisor has dealt with the shortage."""
        if self.status != ShortageStatus.OPEN.value:
            raise IllegalTransition(
                f"Shortage flag {self.id} is already {self.status.lower()}",
                flag_id=str(self.id),
                status=self.status,
            )
        self.status = ShortageStatus.RESOLVED.value
        self.resolved_by = str(operator_id)
        self.resolved_at = datetime.now(UTC)


@fulfillment.command(part_of="ShortageFlag")
class FlagShortage:
    """Record that an item could not be picked for lack of stock."""

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    sku = String(required=True, max_length=100)
    requested_quantity = Integer(required=True, min_value=1)
    on_hand = Integer(required=True)
    operator_id = Identifier(required=True)


@fulfillment.command(part_of="ShortageFlag")
class ResolveShortage:
    flag_id = Identifier(required=True)
    operator_id = Identifier(required=True)


@fulfillment.repository(part_of=ShortageFlag)
class ShortageReview(BaseRepository):
    def get(self, identifier) -> ShortageFlag:
        try:
            return BaseRepository.get(self, identifier)
        except ObjectNotFoundError as exc:
            raise NotFound(f"Shortage flag {identifier} not found", flag_id=str(identifier)) from exc

    def open_for(self, order_id: str) -> list[ShortageFlag]:
        return (
            self._dao.query.filter(order_id=str(order_id), status=ShortageStatus.OPEN.value)
            .order_by("flagged_at")
            .all()
            .items
        )


@fulfillment.command_handler(part_of=ShortageFlag)
class ShortageHandler:
    @handle(FlagShortage)
    def flag_shortage(self, command):
        flag = ShortageFlag(
            order_id=command.order_id,
            item_id=command.item_id,
            sku=command.sku,
            requested_quantity=command.requested_quantity,
            on_hand=command.on_hand,
            operator_id=command.operator_id,
            flagged_at=datetime.now(UTC),
        )
        current_domain.repository_for(ShortageFlag).add(flag)
        return str(flag.id)

    @handle(ResolveShortage)
    def resolve_shortage(self, command):
        review = current_domain.repository_for(ShortageFlag)
        flag = review.get(command.flag_id)
        flag.resolve(command.operator_id)
        review.add(flag)
        return str(flag.id)
