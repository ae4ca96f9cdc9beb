"""Fake stock oracle — deterministic in-memory stock for testing and development.

Seeded with the warehouse sample catalogue. Configurable failure and latency
behavior for integration testing.
"""

import threading
import time

from fulfillment.errors import OracleUnavailable
from fulfillment.stock.port import StockOraclePort

_SAMPLE_STOCK = {
    "WH-001": 245,
    "UC-003": 0,
    "SF-002": 12,
}


class FakeStockOracle(StockOraclePort):
    """Fake stock oracle that answers from a local table by default."""

    def __init__(self, stock: dict[str, int] | None = None):
        self._stock = dict(_SAMPLE_STOCK if stock is None else stock)
        self._lock = threading.Lock()
        self.should_succeed = True
        self.failure_reason = "Stock oracle unavailable"
        self.latency = 0.0
        self.lookups: list[str] = []

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Stock oracle unavailable",
        latency: float = 0.0,
    ):
        """Configure the fake oracle behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.latency = latency

    def set_stock(self, sku: str, quantity: int) -> None:
        with self._lock:
            self._stock[sku] = quantity

    def on_hand(self, sku: str) -> int:
        if self.latency:
            time.sleep(self.latency)
        with self._lock:
            self.lookups.append(sku)
            if not self.should_succeed:
                raise OracleUnavailable(self.failure_reason, sku=sku)
            return self._stock.get(sku, 0)
