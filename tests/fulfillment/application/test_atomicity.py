"""Application tests: ledger changes and audit entries commit together."""

from datetime import UTC, datetime

import pytest
from fulfillment.audit.entry import AuditEntry
from fulfillment.audit.log import AuditLog
from fulfillment.errors import AuditSequenceError
from fulfillment.order.lifecycle import ItemStatus
from protean import current_domain


class TestAuditFailureRollsBackLedger:
    def test_sequence_conflict_aborts_the_pick(self, orchestrator, receive_order):
        receive_order("O1")
        current_domain.repository_for(AuditEntry).append(
            AuditEntry(
                order_id="O1",
                sequence=1,
                action="stray entry",
                operator_id="OP003",
                recorded_at=datetime.now(UTC),
            )
        )

        with pytest.raises(AuditSequenceError):
            orchestrator.pick_by_scan("O1", "OP001", "WH-001")

        order = orchestrator.get_order("O1")
        assert order.revision == 0
        assert order.items[0].status == ItemStatus.PENDING.value

    def test_storage_failure_aborts_the_pick(self, orchestrator, receive_order, monkeypatch):
        receive_order("O1")

        def fail(self, entries):
            raise RuntimeError("audit store offline")

        monkeypatch.setattr(AuditLog, "append_all", fail)

        with pytest.raises(RuntimeError):
            orchestrator.pick_by_scan("O1", "OP001", "WH-001")

        monkeypatch.undo()
        assert orchestrator.get_order("O1").items[0].status == ItemStatus.PENDING.value
        assert orchestrator.history("O1") == []

    def test_each_success_adds_exactly_one_entry(self, orchestrator, receive_order):
        receive_order("O1")
        orchestrator.pick_by_scan("O1", "OP001", "WH-001")
        assert len(orchestrator.history("O1")) == 1
        orchestrator.mark_packed("O1", "O1-ITEM-001", "OP001", "BOX-002")
        assert len(orchestrator.history("O1")) == 2
