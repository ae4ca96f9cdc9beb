"""Bounded stock lookups.

Any adapter, however slow, is given at most ``timeout`` seconds to answer.
Timeouts and adapter failures both surface as ``OracleUnavailable``; the
lookup is not retried.

A Python thread cannot be interrupted, so a call that overruns its timeout
keeps its worker until the adapter finally returns. Each guard has a fixed
pool of workers (``STOCK_ORACLE_WORKERS``). While every worker is held by an
overrunning call, new lookups are refused at once instead of queuing behind
them, and the guard recovers as soon as those calls return. Adapters should
carry their own transport timeout so stuck calls do end; the HTTP adapter
does.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout

import structlog

from fulfillment.errors import FulfillmentError, OracleUnavailable
from fulfillment.stock.port import StockOraclePort

logger = structlog.get_logger(__name__)


class BoundedStockOracle(StockOraclePort):
    """Wraps another oracle so every lookup honours a timeout."""

    def __init__(self, oracle: StockOraclePort, timeout: float, max_workers: int = 8):
        self.oracle = oracle
        self.timeout = timeout
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="stock-oracle")
        self._slots = threading.BoundedSemaphore(max_workers)

    def _lookup(self, sku: str) -> int:
        try:
            return self.oracle.on_hand(sku)
        finally:
            self._slots.release()

    def on_hand(self, sku: str) -> int:
        if not self._slots.acquire(blocking=False):
            logger.warning("stock_lookup_workers_exhausted", sku=sku, workers=self.max_workers)
            raise OracleUnavailable(
                f"Stock lookup for {sku} refused: all {self.max_workers} lookup workers are busy",
                sku=sku,
                reason="busy",
            )
        try:
            future = self._executor.submit(self._lookup, sku)
        except RuntimeError:
            self._slots.release()
            raise

        try:
            return future.result(timeout=self.timeout)
        except FutureTimeout as exc:
            logger.warning("stock_lookup_timed_out", sku=sku, timeout=self.timeout)
            raise OracleUnavailable(
                f"Stock lookup for {sku} timed out after {self.timeout}s",
                sku=sku,
                reason="timeout",
            ) from exc
        except FulfillmentError:
            raise
        except Exception as exc:
            logger.warning("stock_lookup_failed", sku=sku, error=str(exc))
            raise OracleUnavailable(f"Stock lookup for {sku} failed", sku=sku, reason="error") from exc
