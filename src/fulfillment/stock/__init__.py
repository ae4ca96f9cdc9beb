"""Stock oracle abstraction — pluggable on-hand stock lookups."""

from fulfillment.settings import setting, stock_oracle_timeout

_oracle_instance = None


def get_stock_oracle():
    """Return the configured stock oracle adapter (singleton).

    Uses FakeStockOracle by default. In production, configure via the
    STOCK_ORACLE_ADAPTER environment variable ("http" reads STOCK_ORACLE_URL).
    """
    global _oracle_instance
    if _oracle_instance is None:
        adapter = setting("STOCK_ORACLE_ADAPTER")
        if adapter == "fake":
            from fulfillment.stock.fake_adapter import FakeStockOracle

            _oracle_instance = FakeStockOracle()
        elif adapter == "http":
            from fulfillment.stock.http_adapter import HttpStockOracle

            _oracle_instance = HttpStockOracle(
                base_url=setting("STOCK_ORACLE_URL"),
                timeout=stock_oracle_timeout(),
            )
        else:
            raise ValueError(f"Unknown stock oracle adapter: {adapter}")
    return _oracle_instance


def reset_stock_oracle():
    """Reset the stock oracle singleton (useful for testing)."""
    global _oracle_instance
    _oracle_instance = None
