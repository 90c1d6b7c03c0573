"""Presentation helpers for prices, quantities and trade timestamps.

All output goes through Python's format spec mini-language, never the
``locale`` module, so strings are identical on every machine.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Optional


def _require_finite(value: float, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number, got {value!r}")
    return float(value)


def format_probability(p: float, decimals: int = 1) -> str:
    """Render a price in [0, 1] as a percentage, e.g. 0.731 -> "73.1%"."""
    p = _require_finite(p, "probability")
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"probability must be within [0, 1], got {p!r}")
    return f"{p * 100:.{decimals}f}%"


def format_number(x: float, decimals: int = 1) -> str:
    """Render a share or token quantity with grouping, e.g. 1234.5 -> "1,234.5"."""
    x = _require_finite(x, "value")
    # Avoid "-0.0" for values that round to zero.
    if round(x, decimals) == 0:
        x = 0.0
    return f"{x:,.{decimals}f}"


def format_percent_change(percent: float, decimals: int = 1) -> str:
    """Signed relative change, e.g. 46.2 -> "+46.2%"."""
    percent = _require_finite(percent, "percent")
    sign = "+" if percent > 0 else ""
    return f"{sign}{format_number(percent, decimals)}%"


def format_price_change(p_before: float, p_after: float, decimals: int = 1) -> str:
    """Arrow plus absolute move in probability points, e.g. "↑ 23.1%"."""
    change = _require_finite(p_after, "p_after") - _require_finite(p_before, "p_before")
    arrow = "↑" if change > 0 else "↓"
    return f"{arrow} {format_probability(abs(change), decimals)}"


def format_time_ago(created_at: datetime, now: Optional[datetime] = None) -> str:
    """Coarse age of a trade: "just now", "5m ago", "3h ago", "2d ago"."""
    now = _as_utc(now or datetime.now(timezone.utc))
    seconds = int((now - _as_utc(created_at)).total_seconds())

    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
