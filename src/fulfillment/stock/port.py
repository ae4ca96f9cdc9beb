"""Stock oracle port — abstract interface to the inventory source of truth.

All stock oracle adapters must implement this interface. The engine programs
against the port; adapters are swapped via configuration.
"""

from abc import ABC, abstractmethod


class StockOraclePort(ABC):
    """Abstract interface for on-hand stock lookups."""

    @abstractmethod
    def on_hand(self, sku: str) -> int:
        """Return the current on-hand quantity for ``sku``.

        Must be safe to call from several threads at once. Adapters raise
        ``OracleUnavailable`` when the lookup cannot be answered.
        """
        ...
