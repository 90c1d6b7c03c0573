"""Client library for the OSPM LMSR prediction-market simulator."""

import logging

from .market import MarketState, Side, TradePreview, buy_cost, cost, price, simulate_buy

logger = logging.getLogger("ospm")
logger.setLevel(logging.INFO)

if not logger.hasHandlers():
    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

__all__ = [
    "MarketState",
    "Side",
    "TradePreview",
    "cost",
    "price",
    "buy_cost",
    "simulate_buy",
]
