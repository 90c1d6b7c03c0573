"""Client for the external Oracle service that owns market state."""

from .client import OracleClient, OracleError
from .models import Market, MarketPage, TradeRecord, TradeResult, parse_timestamp

__all__ = [
    "OracleClient",
    "OracleError",
    "Market",
    "MarketPage",
    "TradeRecord",
    "TradeResult",
    "parse_timestamp",
]
