"""HTTP stock oracle — reads on-hand quantities from the inventory service.

Expects ``GET {base_url}/stock/{sku}`` to answer ``{"sku": ..., "on_hand": n}``.
Requests are bounded by the configured timeout and never retried here;
retrying is the caller's decision.
"""

import httpx
import structlog

from fulfillment.errors import OracleUnavailable
from fulfillment.stock.port import StockOraclePort

logger = structlog.get_logger(__name__)


class HttpStockOracle(StockOraclePort):
    def __init__(self, base_url: str, timeout: float, transport: httpx.BaseTransport | None = None):
        self.base_url = base_url
        self.timeout = timeout
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def on_hand(self, sku: str) -> int:
        try:
            response = self._client.get(f"/stock/{sku}")
        except httpx.TimeoutException as exc:
            logger.warning("stock_oracle_timeout", sku=sku, timeout=self.timeout)
            raise OracleUnavailable(f"Stock lookup for {sku} timed out", sku=sku) from exc
        except httpx.RequestError as exc:
            logger.warning("stock_oracle_request_failed", sku=sku, error=str(exc))
            raise OracleUnavailable(f"Stock lookup for {sku} failed", sku=sku) from exc

        if response.status_code == 404:
            return 0
        if response.status_code >= 400:
            logger.warning("stock_oracle_error_status", sku=sku, status_code=response.status_code)
            raise OracleUnavailable(
                f"Stock lookup for {sku} returned {response.status_code}",
                sku=sku,
            )

        try:
            return int(response.json()["on_hand"])
        except (KeyError, TypeError, ValueError) as exc:
            raise OracleUnavailable(f"Malformed stock response for {sku}", sku=sku) from exc

    def close(self) -> None:
        self._client.close()
