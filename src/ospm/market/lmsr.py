"""LMSR pricing engine for binary prediction markets.

Cost function: C(q) = b * log(exp(q_yes/b) + exp(q_no/b))
Price:         p_yes = exp(q_yes/b) / (exp(q_yes/b) + exp(q_no/b))

Every function here is pure: inputs in, numbers out. Market state is owned by
the Oracle service, so nothing in this module keeps or mutates a ledger.
"""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass, replace
from enum import Enum
from typing import NamedTuple, Optional

DEFAULT_TOLERANCE = 1e-9
DEFAULT_MAX_ITERATIONS = 200

_PRICE_FLOOR = sys.float_info.epsilon


class LMSRError(Exception):
    """Base class for pricing engine failures."""


class LMSRDomainError(LMSRError, ValueError):
    """Raised for inputs outside the engine's domain (b <= 0, NaN, inf...)."""


class LMSRConvergenceError(LMSRError, ArithmeticError):
    """Raised when the spend -> shares solve does not converge."""


class Side(str, Enum):
    YES = "YES"
    NO = "NO"

    @classmethod
    def parse(cls, value: "Side | str") -> "Side":
        if isinstance(value, Side):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise LMSRDomainError(f"Unknown side: {value!r}. Must be 'YES' or 'NO'") from None

    @property
    def opposite(self) -> "Side":
        return Side.NO if self is Side.YES else Side.YES


class Prices(NamedTuple):
    p_yes: float
    p_no: float

    def for_side(self, side: Side | str) -> float:
        return self.p_yes if Side.parse(side) is Side.YES else self.p_no


@dataclass(frozen=True, slots=True)
class TradeIntent:
    side: Side
    spend: float


@dataclass(frozen=True, slots=True)
class TradePreview:
    """Advisory result of buying ``delta_shares`` for ``cost`` tokens.

    Recompute whenever the market state or the intent changes; the Oracle's
    response after submission is the authoritative result.
    """

    delta_shares: float
    cost: float
    p_before: float
    p_after: float

    @property
    def average_price(self) -> float:
        return self.cost / self.delta_shares

    @property
    def price_change(self) -> float:
        return self.p_after - self.p_before

    @property
    def price_change_percent(self) -> float:
        return self.price_change / self.p_before * 100.0


@dataclass(frozen=True, slots=True)
class MarketState:
    """Snapshot of a market's outstanding shares and liquidity parameter."""

    q_yes: float
    q_no: float
    b: float

    def __post_init__(self):
        _check_state(self.q_yes, self.q_no, self.b)

    def shares(self, side: Side | str) -> float:
        return self.q_yes if Side.parse(side) is Side.YES else self.q_no

    def with_shares(self, side: Side | str, delta_shares: float) -> "MarketState":
        """Return the state after ``delta_shares`` are issued on ``side``."""
        if Side.parse(side) is Side.YES:
            return replace(self, q_yes=self.q_yes + delta_shares)
        return replace(self, q_no=self.q_no + delta_shares)

    def cost(self) -> float:
        return cost(self.q_yes, self.q_no, self.b)

    def price(self) -> Prices:
        return price(self.q_yes, self.q_no, self.b)

    def buy_cost(self, side: Side | str, delta_shares: float) -> float:
        return buy_cost(side, self.q_yes, self.q_no, self.b, delta_shares)

    def simulate_buy(self, side: Side | str, spend: float, **solver_options) -> Optional[TradePreview]:
        return simulate_buy(side, self.q_yes, self.q_no, self.b, spend, **solver_options)

    def preview(self, intent: TradeIntent, **solver_options) -> Optional[TradePreview]:
        return self.simulate_buy(intent.side, intent.spend, **solver_options)


def _is_real(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _check_state(q_yes: float, q_no: float, b: float) -> None:
    if not _is_real(b) or b <= 0:
        raise LMSRDomainError(f"Liquidity parameter b must be a positive finite number, got {b!r}")
    if not _is_real(q_yes) or not _is_real(q_no):
        raise LMSRDomainError(f"Share quantities must be finite, got q_yes={q_yes!r}, q_no={q_no!r}")


def _p_yes(q_yes: float, q_no: float, b: float) -> float:
    m = max(q_yes, q_no)
    e_yes = math.exp((q_yes - m) / b)
    e_no = math.exp((q_no - m) / b)
    p = e_yes / (e_yes + e_no)
    return min(max(p, _PRICE_FLOOR), 1.0 - _PRICE_FLOOR)


def _side_price(side: Side, q_yes: float, q_no: float, b: float) -> float:
    p = _p_yes(q_yes, q_no, b)
    return p if side is Side.YES else 1.0 - p


def _log_weight(side: Side, q_yes: float, q_no: float, b: float) -> float:
    """Natural log of the side's unclamped softmax weight.

    Exact even where the weight itself underflows a double, so it is safe to
    price trades on the underdog side of a lopsided market.
    """
    d = (q_yes - q_no) / b if side is Side.YES else (q_no - q_yes) / b
    if d >= 0:
        return -math.log1p(math.exp(-d))
    return d - math.log1p(math.exp(d))


def _log1p_exp(t: float) -> float:
    if t > 0:
        return t + math.log1p(math.exp(-t))
    return math.log1p(math.exp(t))


def cost(q_yes: float, q_no: float, b: float) -> float:
    """Evaluate C(q_yes, q_no) with the log-sum-exp shift."""
    _check_state(q_yes, q_no, b)
    m = max(q_yes, q_no)
    # One of the two shifted exponentials is exactly e^0 = 1.
    return m + b * math.log1p(math.exp(-abs(q_yes - q_no) / b))


def price(q_yes: float, q_no: float, b: float) -> Prices:
    """Marginal prices of YES and NO (softmax of q/b)."""
    _check_state(q_yes, q_no, b)
    p_yes = _p_yes(q_yes, q_no, b)
    return Prices(p_yes=p_yes, p_no=1.0 - p_yes)


def buy_cost(side: Side | str, q_yes: float, q_no: float, b: float, delta_shares: float) -> float:
    """Tokens needed to buy exactly ``delta_shares`` of ``side``.

    Equal to C(after) - C(before) = b * log(1 + w * (e^(delta/b) - 1)), where
    w is the side's softmax weight. Evaluated in log space so neither the
    cancellation of two large costs nor an underflowing w distorts it.
    """
    side = Side.parse(side)
    _check_state(q_yes, q_no, b)
    if not _is_real(delta_shares) or delta_shares <= 0:
        raise LMSRDomainError(f"delta_shares must be a positive finite number, got {delta_shares!r}")

    return _buy_cost(side, q_yes, q_no, b, delta_shares)


def _buy_cost(side: Side, q_yes: float, q_no: float, b: float, delta_shares: float) -> float:
    x = delta_shares / b
    # log(expm1(x)) written so it neither overflows nor loses precision.
    log_growth = x + math.log(-math.expm1(-x))
    return b * _log1p_exp(_log_weight(side, q_yes, q_no, b) + log_growth)


def simulate_buy(
    side: Side | str,
    q_yes: float,
    q_no: float,
    b: float,
    spend: float,
    *,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> Optional[TradePreview]:
    """Shares of ``side`` that ``spend`` tokens buy. Returns None for an invalid spend.

    Solves buy_cost(delta) == spend with Newton steps kept inside a bisection
    bracket. d(buy_cost)/d(delta) is the side's weight after the trade. No
    share costs more than 1, and buy_cost(delta) >= delta + b * log(w), so the
    root lies in [spend, spend - b * log(w)].

    Raises:
        LMSRDomainError: market state is invalid.
        LMSRConvergenceError: the solve did not reach ``tolerance``.
    """
    side = Side.parse(side)
    _check_state(q_yes, q_no, b)
    if not _is_real(spend) or spend <= 0:
        return None

    low, high = float(spend), spend - b * _log_weight(side, q_yes, q_no, b)
    if not math.isfinite(high):
        raise LMSRConvergenceError(f"Spend {spend!r} is too large to price")

    def shifted(delta: float):
        if side is Side.YES:
            return q_yes + delta, q_no
        return q_yes, q_no + delta

    delta = high
    for _ in range(max_iterations):
        paid = _buy_cost(side, q_yes, q_no, b, delta)
        f = paid - spend
        if abs(f) <= tolerance * spend:
            return TradePreview(
                delta_shares=delta,
                cost=paid,
                p_before=_side_price(side, q_yes, q_no, b),
                p_after=_side_price(side, *shifted(delta), b),
            )
        if f > 0:
            high = delta
        else:
            low = delta
        if high - low <= sys.float_info.epsilon * high:
            break

        slope = math.exp(_log_weight(side, *shifted(delta), b))
        candidate = delta - f / slope if slope > 0 else low
        if not low < candidate < high:
            candidate = 0.5 * (low + high)
        delta = candidate

    raise LMSRConvergenceError(
        f"Could not solve for shares: side={side.value}, q_yes={q_yes}, q_no={q_no}, b={b}, spend={spend}"
    )


def max_loss(b: float) -> float:
    """Worst-case market maker subsidy for a binary market: b * ln(2)."""
    if not _is_real(b) or b <= 0:
        raise LMSRDomainError(f"Liquidity parameter b must be a positive finite number, got {b!r}")
    return b * math.log(2.0)
