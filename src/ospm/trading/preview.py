"""Trade form state and preview recomputation.

The host calls ``set_side``/``set_spend``/``set_state`` when an input changes;
each call recomputes the preview explicitly. Hosts that compute previews off
the main thread use ``PreviewSequencer`` so a slow, stale result never
replaces a newer one.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Optional, TypeVar, Union

from ..market.lmsr import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    LMSRError,
    MarketState,
    Side,
    TradePreview,
)

logger = logging.getLogger(__name__)

SPEND_PRESETS = (5, 10, 25, 50, 100)

T = TypeVar("T")


class TradeNotReadyError(RuntimeError):
    """Raised when submitting a trade that has no valid preview."""


def parse_spend(value: Union[str, float, int, None]) -> Optional[float]:
    """Parse a spend amount from form input. Returns None unless it is a positive finite number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        spend = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(spend) or spend <= 0:
        return None
    return spend


class TradePanel:
    """Holds the side/spend inputs for one market and the preview they imply."""

    def __init__(
        self,
        state: MarketState,
        *,
        side: Side | str = Side.YES,
        spend: Union[str, float] = "10",
        tolerance: float = DEFAULT_TOLERANCE,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        recorder=None,
    ):
        self._state = state
        self._side = Side.parse(side)
        self._spend_input = spend
        self._tolerance = tolerance
        self._max_iterations = max_iterations
        self._recorder = recorder
        self._preview: Optional[TradePreview] = None
        self.recompute()

    @property
    def state(self) -> MarketState:
        return self._state

    @property
    def side(self) -> Side:
        return self._side

    @property
    def spend(self) -> Optional[float]:
        return parse_spend(self._spend_input)

    @property
    def preview(self) -> Optional[TradePreview]:
        return self._preview

    @property
    def current_price(self) -> float:
        return self._state.price().for_side(self._side)

    @property
    def can_submit(self) -> bool:
        return self._preview is not None and self._preview.delta_shares > 0

    def set_state(self, state: MarketState) -> Optional[TradePreview]:
        self._state = state
        return self.recompute()

    def set_side(self, side: Side | str) -> Optional[TradePreview]:
        self._side = Side.parse(side)
        return self.recompute()

    def set_spend(self, value: Union[str, float]) -> Optional[TradePreview]:
        self._spend_input = value
        return self.recompute()

    def recompute(self) -> Optional[TradePreview]:
        spend = self.spend
        if spend is None:
            self._preview = None
            return None

        try:
            self._preview = self._state.simulate_buy(
                self._side,
                spend,
                tolerance=self._tolerance,
                max_iterations=self._max_iterations,
            )
        except LMSRError as e:
            logger.warning("No preview for %s %.4f on %s: %s", self._side.value, spend, self._state, e)
            self._preview = None

        if self._recorder is not None:
            self._recorder.log_preview(self._state, self._side, spend, self._preview)
        return self._preview

    def submit(self, submitter: Callable[[Side, float], T]) -> T:
        """Hand the current intent to ``submitter`` and return its authoritative response."""
        if not self.can_submit:
            raise TradeNotReadyError("No valid trade preview; enter a positive amount to spend")
        return submitter(self._side, self.spend)


class PreviewSequencer:
    """Keeps the preview of the most recently *issued* request.

    Tickets are handed out in issuance order. A result is accepted only if its
    ticket is newer than the last accepted one, so completion order does not
    matter.
    """

    def __init__(self):
        self._issued = 0
        self._accepted = 0
        self._latest: Optional[TradePreview] = None

    @property
    def latest(self) -> Optional[TradePreview]:
        return self._latest

    @property
    def pending(self) -> bool:
        return self._accepted < self._issued

    def issue(self) -> int:
        self._issued += 1
        return self._issued

    def offer(self, ticket: int, preview: Optional[TradePreview]) -> bool:
        if ticket > self._issued:
            raise ValueError(f"Ticket {ticket} was never issued")
        if ticket <= self._accepted:
            logger.debug("Discarding stale preview for ticket %d (latest accepted %d)", ticket, self._accepted)
            return False
        self._accepted = ticket
        self._latest = preview
        return True

    def reset(self) -> None:
        self._accepted = self._issued
        self._latest = None
