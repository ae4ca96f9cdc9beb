"""Fulfillment orchestrator — the entry point for operator actions.

Each mutating call holds the order's lock for its whole duration, verifies
what it can without writing, checks for cancellation, and only then dispatches
the command whose handler commits the ledger change and the audit entries in
one unit of work. Calls on different orders never wait on each other.
"""

import json
import threading
from contextlib import contextmanager

import structlog
from protean.utils.globals import current_domain

from fulfillment.audit.entry import AuditEntry
from fulfillment.errors import (
    NotFound,
    NothingToPick,
    OperationCancelled,
    OracleUnavailable,
    OrderBusy,
    StockShortage,
    WrongProduct,
)
from fulfillment.operators import get_operator_directory
from fulfillment.order.lifecycle import ItemStatus, WorkQueue, queue_statuses
from fulfillment.order.order import Order
from fulfillment.order.packing import ConfirmPack
from fulfillment.order.picking import PickItems, RecordPick
from fulfillment.order.shipping import ConfirmShip
from fulfillment.scanning.verification import verify_scan
from fulfillment.settings import history_limits, order_lock_timeout, stock_oracle_timeout, stock_oracle_workers
from fulfillment.shortage.flag import FlagShortage, ResolveShortage, ShortageFlag
from fulfillment.stock import get_stock_oracle
from fulfillment.stock.guard import BoundedStockOracle
from fulfillment.utils.logging import operation_context

logger = structlog.get_logger(__name__)


class CancellationToken:
    """Lets a caller abandon an operation that has not committed yet."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, operation: str) -> None:
        if self.cancelled:
            raise OperationCancelled(f"{operation} was cancelled before commit", operation=operation)


class _OrderLock:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.RLock()
        self.users = 0


class OrderLocks:
    """One re-entrant lock per order id, kept only while someone holds or waits on it."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        self._guard = threading.Lock()
        self._locks: dict[str, _OrderLock] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def _checkout(self, key: str) -> _OrderLock:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _OrderLock()
            entry.users += 1
            return entry

    def _checkin(self, key: str, entry: _OrderLock) -> None:
        with self._guard:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[key]

    @contextmanager
    def hold(self, order_id: str):
        key = str(order_id)
        entry = self._checkout(key)
        try:
            if not entry.lock.acquire(timeout=self.timeout):
                raise OrderBusy(
                    f"Order {order_id} is busy; try again",
                    order_id=key,
                    timeout=self.timeout,
                )
            try:
                yield
            finally:
                entry.lock.release()
        finally:
            self._checkin(key, entry)


class FulfillmentOrchestrator:
    def __init__(
        self,
        stock_oracle=None,
        operator_directory=None,
        lock_timeout: float | None = None,
        oracle_timeout: float | None = None,
    ):
        self.stock_oracle = BoundedStockOracle(
            stock_oracle or get_stock_oracle(),
            oracle_timeout if oracle_timeout is not None else stock_oracle_timeout(),
            max_workers=stock_oracle_workers(),
        )
        self.operator_directory = operator_directory or get_operator_directory()
        self.locks = OrderLocks(lock_timeout if lock_timeout is not None else order_lock_timeout())

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def pick_by_scan(
        self,
        order_id: str,
        operator_id: str,
        scanned_sku: str,
        token: CancellationToken | None = None,
    ) -> Order:
        operator = self.operator_directory.get(operator_id)
        token = token or CancellationToken()

        with operation_context("pick_by_scan", order_id, operator.id), self.locks.hold(order_id):
            token.raise_if_cancelled("pick_by_scan")
            order = self.get_order(order_id)
            try:
                authorization = verify_scan(order, scanned_sku, self.stock_oracle)
            except WrongProduct:
                logger.info("scan_rejected_wrong_product", sku=scanned_sku)
                raise
            except StockShortage as exc:
                logger.info(
                    "scan_rejected_stock_shortage",
                    sku=scanned_sku,
                    on_hand=exc.details["on_hand"],
                )
                self._flag_shortage(order, order.item(exc.details["item_id"]), exc.details["on_hand"], operator)
                raise
            except OracleUnavailable:
                logger.warning("scan_stock_lookup_unavailable", sku=scanned_sku)
                raise

            token.raise_if_cancelled("pick_by_scan")
            current_domain.process(
                RecordPick(
                    order_id=str(order_id),
                    item_id=authorization.item_id,
                    operator_id=operator.id,
                    operator_name=operator.name,
                    quantity=authorization.quantity,
                ),
                asynchronous=False,
            )
            return self.get_order(order_id)

    def pick_all_available(
        self,
        order_id: str,
        operator_id: str,
        token: CancellationToken | None = None,
    ) -> Order:
        """Pick every pending item with enough stock; flag the others."""
        operator = self.operator_directory.get(operator_id)
        token = token or CancellationToken()

        with operation_context("pick_all_available", order_id, operator.id), self.locks.hold(order_id):
            token.raise_if_cancelled("pick_all_available")
            order = self.get_order(order_id)

            picks, short = [], []
            for item in order.items_in(ItemStatus.PENDING):
                try:
                    on_hand = self.stock_oracle.on_hand(item.sku)
                except OracleUnavailable:
                    logger.warning("bulk_pick_stock_lookup_unavailable", sku=item.sku)
                    raise
                if on_hand >= item.requested_quantity:
                    picks.append({"item_id": str(item.id), "quantity": item.requested_quantity})
                else:
                    short.append((item, on_hand))

            token.raise_if_cancelled("pick_all_available")
            for item, on_hand in short:
                logger.info("bulk_pick_stock_shortage", sku=item.sku, on_hand=on_hand)
                self._flag_shortage(order, item, on_hand, operator)

            if not picks:
                raise NothingToPick(
                    f"No pending item of order {order_id} can be picked",
                    order_id=str(order_id),
                    short_skus=[item.sku for item, _ in short],
                )

            current_domain.process(
                PickItems(
                    order_id=str(order_id),
                    operator_id=operator.id,
                    operator_name=operator.name,
                    picks=json.dumps(picks),
                ),
                asynchronous=False,
            )
            return self.get_order(order_id)

    def mark_packed(
        self,
        order_id: str,
        item_id: str,
        operator_id: str,
        material_id: str,
        token: CancellationToken | None = None,
    ) -> Order:
        operator = self.operator_directory.get(operator_id)
        token = token or CancellationToken()

        with operation_context("mark_packed", order_id, operator.id), self.locks.hold(order_id):
            token.raise_if_cancelled("mark_packed")
            current_domain.process(
                ConfirmPack(
                    order_id=str(order_id),
                    item_id=str(item_id),
                    operator_id=operator.id,
                    operator_name=operator.name,
                    material_id=material_id,
                ),
                asynchronous=False,
            )
            return self.get_order(order_id)

    def mark_shipped(
        self,
        order_id: str,
        item_id: str,
        operator_id: str,
        carrier: str,
        tracking_number: str,
        token: CancellationToken | None = None,
    ) -> Order:
        operator = self.operator_directory.get(operator_id)
        token = token or CancellationToken()

        with operation_context("mark_shipped", order_id, operator.id), self.locks.hold(order_id):
            token.raise_if_cancelled("mark_shipped")
            current_domain.process(
                ConfirmShip(
                    order_id=str(order_id),
                    item_id=str(item_id),
                    operator_id=operator.id,
                    operator_name=operator.name,
                    carrier=carrier,
                    tracking_number=tracking_number,
                ),
                asynchronous=False,
            )
            return self.get_order(order_id)

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def get_order(self, order_id: str) -> Order:
        return current_domain.repository_for(Order).get(order_id)

    def history(self, order_id: str, limit: int | None = None) -> list[AuditEntry]:
        """Audit entries for an order, newest first."""
        self.get_order(order_id)
        default, maximum = history_limits()
        limit = default if limit is None else max(1, min(limit, maximum))
        return current_domain.repository_for(AuditEntry).history(order_id, limit)

    def queue(self, queue_name: str) -> list[Order]:
        try:
            queue = WorkQueue(queue_name)
        except ValueError as exc:
            raise NotFound(f"Unknown work queue {queue_name}", queue=queue_name) from exc
        return current_domain.repository_for(Order).in_phase(*queue_statuses(queue))

    def open_shortages(self, order_id: str) -> list[ShortageFlag]:
        self.get_order(order_id)
        return current_domain.repository_for(ShortageFlag).open_for(order_id)

    def resolve_shortage(self, order_id: str, flag_id: str, operator_id: str) -> ShortageFlag:
        """Close an open shortage flag raised against ``order_id``."""
        operator = self.operator_directory.get(operator_id)
        review = current_domain.repository_for(ShortageFlag)
        self.get_order(order_id)
        flag = review.get(flag_id)
        if str(flag.order_id) != str(order_id):
            raise NotFound(f"Shortage flag {flag_id} not found in order {order_id}", flag_id=str(flag_id))

        with operation_context("resolve_shortage", order_id, operator.id):
            current_domain.process(ResolveShortage(flag_id=str(flag_id), operator_id=operator.id), asynchronous=False)
            logger.info("shortage_resolved", flag_id=str(flag_id), sku=flag.sku)
        return review.get(flag_id)

    # -------------------------------------------------------------------
    def _flag_shortage(self, order, item, on_hand: int, operator) -> None:
        current_domain.process(
            FlagShortage(
                order_id=str(order.id),
                item_id=str(item.id),
                sku=item.sku,
                requested_quantity=item.requested_quantity,
                on_hand=on_hand,
                operator_id=operator.id,
            ),
            asynchronous=False,
        )


_orchestrator = None


def get_orchestrator() -> FulfillmentOrchestrator:
    """Return the process-wide orchestrator (singleton)."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = FulfillmentOrchestrator()
    return _orchestrator


def reset_orchestrator() -> None:
    """Reset the orchestrator singleton (useful for testing)."""
    global _orchestrator
    _orchestrator = None
