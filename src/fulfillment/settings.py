"""Runtime settings for the fulfillment engine.

Values come from environment variables first and fall back to the
``[custom]`` section of ``domain.toml``, then to the defaults below.
"""

import os

from fulfillment.domain import fulfillment

_DEFAULTS = {
    "STOCK_ORACLE_ADAPTER": "fake",
    "STOCK_ORACLE_URL": "http://localhost:8100",
    "STOCK_ORACLE_TIMEOUT": 2.0,
    "STOCK_ORACLE_WORKERS": 8,
    "OPERATOR_DIRECTORY_ADAPTER": "fake",
    "ORDER_LOCK_TIMEOUT": 5.0,
    "HISTORY_DEFAULT_LIMIT": 10,
    "HISTORY_MAX_LIMIT": 100,
}


def setting(name: str, cast=str):
    """Resolve a setting by name, casting the raw value with ``cast``."""
    raw = os.environ.get(name)
    if raw is None:
        custom = fulfillment.config.get("custom") or {}
        raw = custom.get(name, _DEFAULTS.get(name))
    if raw is None:
        return None
    return cast(raw)


def stock_oracle_timeout() -> float:
    return setting("STOCK_ORACLE_TIMEOUT", float)


def stock_oracle_workers() -> int:
    return setting("STOCK_ORACLE_WORKERS", int)


def order_lock_timeout() -> float:
    return setting("ORDER_LOCK_TIMEOUT", float)


def history_limits() -> tuple[int, int]:
    """Return ``(default, maximum)`` page sizes for history reads."""
    return setting("HISTORY_DEFAULT_LIMIT", int), setting("HISTORY_MAX_LIMIT", int)
