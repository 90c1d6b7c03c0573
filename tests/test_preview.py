import logging

import pytest

from ospm.market import LMSRDomainError, MarketState, Side, simulate_buy
from ospm.trading import (
    SPEND_PRESETS,
    PreviewSequencer,
    TradeLogger,
    TradeNotReadyError,
    TradePanel,
    parse_spend,
)


@pytest.mark.parametrize("value,expected", [
    ("10", 10.0),
    (" 6.20 ", 6.2),
    (25, 25.0),
    (0.5, 0.5),
    ("", None),
    ("   ", None),
    ("abc", None),
    ("0", None),
    ("-5", None),
    ("nan", None),
    ("inf", None),
    (None, None),
    (True, None),
])
def test_parse_spend(value, expected):
    assert parse_spend(value) == expected


def test_panel_defaults(fresh_state):
    panel = TradePanel(fresh_state)
    assert panel.side is Side.YES
    assert panel.spend == 10.0
    assert panel.preview == simulate_buy(Side.YES, 0.0, 0.0, 10.0, 10.0)
    assert panel.current_price == pytest.approx(0.5)
    assert panel.can_submit
    assert 10 in SPEND_PRESETS


def test_panel_recomputes_on_every_input(fresh_state):
    panel = TradePanel(fresh_state, spend="5")
    first = panel.preview

    panel.set_spend("25")
    assert panel.preview.delta_shares > first.delta_shares

    panel.set_side("no")
    assert panel.side is Side.NO
    assert panel.preview == simulate_buy(Side.NO, 0.0, 0.0, 10.0, 25.0)

    moved = MarketState(q_yes=0.0, q_no=30.0, b=10.0)
    panel.set_state(moved)
    assert panel.state is moved
    assert panel.preview == simulate_buy(Side.NO, 0.0, 30.0, 10.0, 25.0)
    assert panel.current_price == pytest.approx(moved.price().p_no)


def test_invalid_spend_clears_preview(fresh_state):
    panel = TradePanel(fresh_state)
    assert panel.set_spend("oops") is None
    assert panel.preview is None
    assert not panel.can_submit

    panel.set_spend("0")
    assert panel.preview is None


def test_engine_failure_clears_preview_and_logs(fresh_state, caplog):
    panel = TradePanel(fresh_state, tolerance=0.0, max_iterations=1)
    with caplog.at_level(logging.WARNING, logger="ospm.trading.preview"):
        assert panel.recompute() is None
    assert not panel.can_submit
    assert "No preview" in caplog.text


def test_unknown_side_rejected(fresh_state):
    panel = TradePanel(fresh_state)
    with pytest.raises(LMSRDomainError):
        panel.set_side("maybe")


def test_submit_passes_intent_and_returns_response(fresh_state):
    panel = TradePanel(fresh_state, side="NO", spend="12.5")
    calls = []

    def submitter(side, spend):
        calls.append((side, spend))
        return {"authoritative": True}

    assert panel.submit(submitter) == {"authoritative": True}
    assert calls == [(Side.NO, 12.5)]


def test_submit_without_preview_is_refused(fresh_state):
    panel = TradePanel(fresh_state, spend="")
    submitter_called = []
    with pytest.raises(TradeNotReadyError):
        panel.submit(lambda side, spend: submitter_called.append(True))
    assert not submitter_called


def test_panel_records_previews(fresh_state, tmp_path):
    recorder = TradeLogger(log_dir=tmp_path, run_id="panel")
    panel = TradePanel(fresh_state, recorder=recorder)
    panel.set_spend("")
    panel.set_spend("50")

    # Initial preview and the "50" recompute; blank input is not a preview request.
    assert len(recorder.preview_records) == 2
    assert recorder.preview_records[-1]["spend"] == 50.0
    assert recorder.preview_records[-1]["has_preview"] is True


class TestPreviewSequencer:
    def test_latest_issued_wins_regardless_of_completion_order(self, fresh_state):
        sequencer = PreviewSequencer()
        slow = sequencer.issue()
        fast = sequencer.issue()
        fast_preview = fresh_state.simulate_buy(Side.YES, 20.0)
        slow_preview = fresh_state.simulate_buy(Side.YES, 5.0)

        assert sequencer.pending
        assert sequencer.offer(fast, fast_preview)
        assert not sequencer.offer(slow, slow_preview)
        assert sequencer.latest == fast_preview
        assert not sequencer.pending

    def test_in_order_results_are_all_accepted(self, fresh_state):
        sequencer = PreviewSequencer()
        first = sequencer.issue()
        assert sequencer.offer(first, fresh_state.simulate_buy(Side.YES, 1.0))
        second = sequencer.issue()
        assert sequencer.offer(second, None)
        assert sequencer.latest is None

    def test_unknown_ticket_rejected(self):
        sequencer = PreviewSequencer()
        with pytest.raises(ValueError):
            sequencer.offer(1, None)

    def test_reset_discards_in_flight(self, fresh_state):
        sequencer = PreviewSequencer()
        ticket = sequencer.issue()
        sequencer.reset()
        assert not sequencer.offer(ticket, fresh_state.simulate_buy(Side.YES, 1.0))
        assert sequencer.latest is None
