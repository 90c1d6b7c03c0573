"""Display data for a market's trade history and YES price series."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from .formatting import format_number, format_price_change, format_probability, format_time_ago
from .market.lmsr import Side
from .oracle.models import TradeRecord

CHART_COLUMNS = ["index", "price", "time", "side"]


@dataclass(frozen=True, slots=True)
class HistoryRow:
    trade_id: str
    side: str
    shares_text: str
    detail_text: str
    change_text: str
    after_text: str
    is_yes: bool
    price_up: bool


def history_rows(trades: Sequence[TradeRecord], now: Optional[datetime] = None) -> List[HistoryRow]:
    """Rows for the recent-trades list, in the order given (newest first)."""
    rows = []
    for trade in trades:
        rows.append(HistoryRow(
            trade_id=trade.id,
            side=trade.side.value,
            shares_text=f"+{format_number(trade.shares_got)} shares",
            detail_text=f"{format_number(trade.amount_spent)} tokens · {format_time_ago(trade.created_at, now)}",
            change_text=format_price_change(trade.price_before, trade.price_after),
            after_text=f"→ {format_probability(trade.price_after)}",
            is_yes=trade.side is Side.YES,
            price_up=trade.price_after > trade.price_before,
        ))
    return rows


def price_history_frame(trades: Sequence[TradeRecord], current_p_yes: float) -> pd.DataFrame:
    """YES probability (in percent) after each trade, oldest first, plus a final "Now" point.

    ``trades`` arrive newest first, as the Oracle lists them. With no trades
    the frame is empty.
    """
    if not trades:
        return pd.DataFrame(columns=CHART_COLUMNS)

    ordered = list(reversed(trades))
    prices = np.append([t.price_after for t in ordered], current_p_yes) * 100.0

    return pd.DataFrame({
        "index": np.arange(len(prices)),
        "price": prices,
        "time": [t.created_at.strftime("%H:%M") for t in ordered] + ["Now"],
        "side": [t.side.value for t in ordered] + [""],
    }, columns=CHART_COLUMNS)
