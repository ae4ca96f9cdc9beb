"""Application tests for per-order serialization of operator actions."""

import threading

import pytest
from fulfillment.domain import fulfillment
from fulfillment.errors import FulfillmentError, IllegalTransition, OrderBusy
from fulfillment.orchestrator import FulfillmentOrchestrator, OrderLocks
from fulfillment.order.lifecycle import ItemStatus


def _run_in_thread(fn, *args):
    outcome = {}

    def target():
        with fulfillment.domain_context():
            try:
                outcome["result"] = fn(*args)
            except FulfillmentError as exc:
                outcome["error"] = exc

    thread = threading.Thread(target=target)
    thread.start()
    return thread, outcome


class TestConcurrentScans:
    def test_two_scans_of_last_pending_item(self, stock_oracle, receive_order):
        receive_order("O1")
        stock_oracle.configure(latency=0.05)
        orchestrator = FulfillmentOrchestrator(stock_oracle=stock_oracle, lock_timeout=5.0)

        runs = [_run_in_thread(orchestrator.pick_by_scan, "O1", op, "WH-001") for op in ("OP001", "OP002")]
        for thread, _ in runs:
            thread.join()

        outcomes = [outcome for _, outcome in runs]
        assert sum("result" in outcome for outcome in outcomes) == 1
        errors = [outcome["error"] for outcome in outcomes if "error" in outcome]
        assert len(errors) == 1
        assert isinstance(errors[0], IllegalTransition)

        assert orchestrator.get_order("O1").items[0].status == ItemStatus.PICKED.value
        assert [entry.sequence for entry in orchestrator.history("O1")] == [1]


class TestOrderLocks:
    def test_busy_order_times_out(self, receive_order):
        receive_order("O1")
        orchestrator = FulfillmentOrchestrator(lock_timeout=0.05)

        with orchestrator.locks.hold("O1"):
            thread, outcome = _run_in_thread(orchestrator.pick_by_scan, "O1", "OP001", "WH-001")
            thread.join()

        assert isinstance(outcome["error"], OrderBusy)
        assert orchestrator.get_order("O1").revision == 0

    def test_other_orders_are_not_blocked(self, receive_order):
        receive_order("O1")
        receive_order("O2", items=[{"id": "O2-ITEM-001", "sku": "SF-002", "requested_quantity": 1}])
        orchestrator = FulfillmentOrchestrator(lock_timeout=0.05)

        with orchestrator.locks.hold("O1"):
            thread, outcome = _run_in_thread(orchestrator.pick_by_scan, "O2", "OP001", "SF-002")
            thread.join()

        assert "error" not in outcome
        assert outcome["result"].items[0].status == ItemStatus.PICKED.value

    def test_lock_is_reentrant(self):
        locks = OrderLocks(timeout=0.05)
        with locks.hold("O1"):
            with locks.hold("O1"):
                pass

    def test_lock_is_released_after_failure(self):
        locks = OrderLocks(timeout=0.05)
        with pytest.raises(RuntimeError):
            with locks.hold("O1"):
                raise RuntimeError("boom")

        acquired = []

        def acquire():
            with locks.hold("O1"):
                acquired.append(True)

        thread = threading.Thread(target=acquire)
        thread.start()
        thread.join()
        assert acquired == [True]

    def test_locks_are_dropped_once_released(self):
        locks = OrderLocks(timeout=0.05)
        with locks.hold("O1"):
            with locks.hold("O1"):
                assert len(locks) == 1
            assert len(locks) == 1
        assert len(locks) == 0

    def test_lock_outlives_a_timed_out_waiter(self):
        locks = OrderLocks(timeout=0.05)
        outcome = {}

        def wait():
            try:
                with locks.hold("O1"):
                    pass
            except OrderBusy as exc:
                outcome["error"] = exc

        with locks.hold("O1"):
            thread = threading.Thread(target=wait)
            thread.start()
            thread.join()
            assert isinstance(outcome["error"], OrderBusy)
            assert len(locks) == 1
        assert len(locks) == 0

    def test_no_locks_left_after_many_orders(self, orchestrator, receive_order):
        for n in range(1, 21):
            receive_order(f"O{n}")
            orchestrator.pick_by_scan(f"O{n}", "OP001", "WH-001")
        with pytest.raises(IllegalTransition):
            orchestrator.pick_by_scan("O1", "OP001", "WH-001")

        assert len(orchestrator.locks) == 0
