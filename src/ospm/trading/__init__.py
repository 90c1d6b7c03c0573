"""Trade form preview flow and trade recording."""

from .logging import TradeLogger, create_trade_logger
from .preview import (
    SPEND_PRESETS,
    PreviewSequencer,
    TradeNotReadyError,
    TradePanel,
    parse_spend,
)

__all__ = [
    "TradePanel",
    "PreviewSequencer",
    "TradeNotReadyError",
    "parse_spend",
    "SPEND_PRESETS",
    "TradeLogger",
    "create_trade_logger",
]
