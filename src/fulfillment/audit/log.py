"""Audit log — append-only, per-order history of committed changes."""

from protean.core.repository import BaseRepository

from fulfillment.audit.entry import AuditEntry
from fulfillment.domain import fulfillment
from fulfillment.errors import AuditSequenceError


@fulfillment.repository(part_of=AuditEntry)
class AuditLog(BaseRepository):
    """Repository for AuditEntry. Only appends and reads are offered."""

    def last_sequence(self, order_id: str) -> int:
        latest = (
            self._dao.query.filter(order_id=str(order_id))
            .order_by("-sequence")
            .limit(1)
            .all()
            .items
        )
        return latest[0].sequence if latest else 0

    def append(self, entry: AuditEntry) -> AuditEntry:
        """Append ``entry``; its sequence must directly follow the last one."""
        return self.append_all([entry])[0]

    def append_all(self, entries: list[AuditEntry]) -> list[AuditEntry]:
        """Append consecutive entries of one order in a single step."""
        if not entries:
            return entries

        order_id = entries[0].order_id
        expected = self.last_sequence(order_id) + 1
        for entry in entries:
            if str(entry.order_id) != str(order_id) or entry.sequence != expected:
                raise AuditSequenceError(
                    f"Audit entry for order {entry.order_id} has sequence {entry.sequence}, expected {expected}",
                    order_id=str(entry.order_id),
                )
            expected += 1

        for entry in entries:
            self.add(entry)
        return entries

    def history(self, order_id: str, limit: int) -> list[AuditEntry]:
        """Most recent ``limit`` entries for an order, newest first."""
        return (
            self._dao.query.filter(order_id=str(order_id))
            .order_by("-sequence")
            .limit(limit)
            .all()
            .items
        )
