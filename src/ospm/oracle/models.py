"""Payload models for the Oracle market service.

The Oracle speaks camelCase JSON; these dataclasses expose snake_case
attributes and parse timestamps into aware datetimes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional

from ..market.lmsr import MarketState, Side


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp (``Z`` suffix allowed) as an aware datetime."""
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _optional_float(payload: Mapping[str, Any], key: str) -> Optional[float]:
    value = payload.get(key)
    return None if value is None else float(value)


@dataclass(slots=True)
class Market:
    id: str
    question: str
    description: Optional[str] = None
    category: str = ""
    source_url: str = ""
    status: str = ""
    betting_closes_at: Optional[datetime] = None
    resolves_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    state: Optional[MarketState] = None
    price_yes: Optional[float] = None
    price_no: Optional[float] = None
    total_trades: int = 0

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Market":
        state = None
        if all(payload.get(key) is not None for key in ("qYes", "qNo", "b")):
            state = MarketState(
                q_yes=float(payload["qYes"]),
                q_no=float(payload["qNo"]),
                b=float(payload["b"]),
            )

        return cls(
            id=str(payload["id"]),
            question=payload.get("question", ""),
            description=payload.get("description"),
            category=payload.get("category", ""),
            source_url=payload.get("sourceUrl", ""),
            status=payload.get("status", ""),
            betting_closes_at=parse_timestamp(payload.get("bettingClosesAt")),
            resolves_at=parse_timestamp(payload.get("resolvesAt")),
            created_at=parse_timestamp(payload.get("createdAt")),
            state=state,
            price_yes=_optional_float(payload, "priceYes"),
            price_no=_optional_float(payload, "priceNo"),
            total_trades=int(payload.get("totalTrades") or 0),
        )

    def current_price_yes(self) -> Optional[float]:
        """Prefer the Oracle's reported price; fall back to pricing the state locally."""
        if self.price_yes is not None:
            return self.price_yes
        if self.state is not None:
            return self.state.price().p_yes
        return None


@dataclass(slots=True)
class MarketPage:
    markets: List[Market] = field(default_factory=list)
    total: int = 0
    has_more: bool = False

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "MarketPage":
        markets = [Market.from_payload(item) for item in payload.get("markets", [])]
        return cls(
            markets=markets,
            total=int(payload.get("total", len(markets))),
            has_more=bool(payload.get("hasMore", False)),
        )


@dataclass(slots=True)
class TradeRecord:
    """One entry of the Oracle's trade ledger."""

    id: str
    side: Side
    amount_spent: float
    shares_got: float
    price_before: float
    price_after: float
    created_at: datetime
    visitor_id: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "TradeRecord":
        return cls(
            id=str(payload["id"]),
            side=Side.parse(payload["side"]),
            amount_spent=float(payload["amountSpent"]),
            shares_got=float(payload["sharesGot"]),
            price_before=float(payload["priceBefore"]),
            price_after=float(payload["priceAfter"]),
            created_at=parse_timestamp(payload["createdAt"]),
            visitor_id=payload.get("visitorId"),
        )


@dataclass(slots=True)
class TradeResult:
    """Authoritative outcome of a submitted trade."""

    trade: TradeRecord
    market: Optional[Market] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "TradeResult":
        market_payload = payload.get("market")
        return cls(
            trade=TradeRecord.from_payload(payload["trade"]),
            market=Market.from_payload(market_payload) if market_payload else None,
        )
