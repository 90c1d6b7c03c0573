"""HTTP client for the Oracle market service.

The Oracle owns the ledger; this client only reads snapshots and forwards
trade intents. Responses from ``submit_trade`` are authoritative and may
differ from a local preview.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

import requests

from ..market.lmsr import Side
from .models import Market, MarketPage, TradeRecord, TradeResult

logger = logging.getLogger(__name__)


class OracleError(Exception):
    """Raised when the Oracle cannot be reached or returns an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class OracleClient:
    def __init__(
        self,
        base_url: str = "http://localhost:3000/api",
        *,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def get_markets(
        self,
        *,
        status: Optional[str] = None,
        category: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> MarketPage:
        params = {
            key: value
            for key, value in {
                "status": status,
                "category": category,
                "limit": limit,
                "offset": offset,
            }.items()
            if value is not None
        }
        data = self._request("GET", "/markets", params=params)
        return self._parse(MarketPage.from_payload, data)

    def get_market(self, market_id: str) -> Market:
        data = self._request("GET", f"/markets/{market_id}")
        payload = data.get("market", data) if isinstance(data, dict) else data
        return self._parse(Market.from_payload, payload)

    def get_trades(self, market_id: str) -> List[TradeRecord]:
        """Trades for a market, newest first as the Oracle returns them."""
        data = self._request("GET", f"/markets/{market_id}/trades")
        items = data.get("trades", []) if isinstance(data, dict) else data
        return [self._parse(TradeRecord.from_payload, item) for item in items]

    def submit_trade(
        self,
        market_id: str,
        side: Side | str,
        amount: float,
        *,
        visitor_id: Optional[str] = None,
    ) -> TradeResult:
        payload: Dict[str, Any] = {"side": Side.parse(side).value, "amount": float(amount)}
        if visitor_id:
            payload["visitorId"] = visitor_id

        data = self._request("POST", f"/markets/{market_id}/trades", json=payload)
        result = self._parse(TradeResult.from_payload, data)
        logger.info(
            "Trade %s filled: %s %.4f shares for %.4f tokens",
            result.trade.id,
            result.trade.side.value,
            result.trade.shares_got,
            result.trade.amount_spent,
        )
        return result

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "OracleClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s %s", method, url, kwargs.get("params") or kwargs.get("json") or "")

        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error("Oracle request failed: %s %s: %s", method, url, e)
            raise OracleError(f"Could not reach Oracle at {url}: {e}") from e

        if not 200 <= response.status_code < 300:
            message = _error_message(response)
            logger.error("Oracle returned HTTP %s for %s %s: %s", response.status_code, method, url, message)
            raise OracleError(f"HTTP {response.status_code}: {message}", status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise OracleError(f"Oracle returned invalid JSON for {method} {url}", response.status_code) from e

    @staticmethod
    def _parse(parser, payload: Mapping[str, Any]):
        try:
            return parser(payload)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise OracleError(f"Malformed Oracle payload: {e}") from e


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and "error" in body:
        return str(body["error"])
    return response.text
