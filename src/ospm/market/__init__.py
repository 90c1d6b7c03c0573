"""LMSR pricing engine for binary YES/NO markets.

The engine is advisory: it previews trades against a snapshot of the Oracle's
market state. It owns no ledger and performs no I/O.
"""

from .lmsr import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    LMSRConvergenceError,
    LMSRDomainError,
    LMSRError,
    MarketState,
    Prices,
    Side,
    TradeIntent,
    TradePreview,
    buy_cost,
    cost,
    max_loss,
    price,
    simulate_buy,
)

__all__ = [
    # Value types
    "MarketState",
    "Prices",
    "Side",
    "TradeIntent",
    "TradePreview",
    # Pricing functions
    "cost",
    "price",
    "buy_cost",
    "simulate_buy",
    "max_loss",
    # Errors
    "LMSRError",
    "LMSRDomainError",
    "LMSRConvergenceError",
    "DEFAULT_TOLERANCE",
    "DEFAULT_MAX_ITERATIONS",
]
