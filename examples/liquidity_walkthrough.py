"""Walk through the LMSR worked example and the effect of the liquidity parameter.

Run with:
    PYTHONPATH=src python examples/liquidity_walkthrough.py

No Oracle is needed: every number below is a local, advisory preview.
"""

from __future__ import annotations

from ospm.formatting import format_number, format_percent_change, format_probability
from ospm.market import MarketState, Side, max_loss
from ospm.trading import SPEND_PRESETS, PreviewSequencer, TradePanel


def worked_example() -> None:
    state = MarketState(q_yes=0.0, q_no=0.0, b=10.0)
    print(f"Initial price: pYes = {format_probability(state.price().p_yes)}")

    cost_of_ten = state.buy_cost(Side.YES, 10.0)
    print(f"Buying 10 YES shares costs {cost_of_ten:.2f} tokens")

    after = state.with_shares(Side.YES, 10.0)
    print(f"New state: qYes = {after.q_yes:g}, qNo = {after.q_no:g}")
    print(f"New price: pYes = {format_probability(after.price().p_yes)}")
    print(f"Average price paid: {cost_of_ten / 10.0:.3f} per share")


def liquidity_table(spend: float = 25.0) -> None:
    print(f"\nSpending {format_number(spend)} tokens on YES from 50/50:")
    print(f"{'b':>8} {'shares':>10} {'price after':>12} {'max loss':>10}")
    for b in (5.0, 10.0, 50.0, 100.0, 500.0):
        preview = MarketState(0.0, 0.0, b).simulate_buy(Side.YES, spend)
        print(f"{b:>8g} {format_number(preview.delta_shares):>10} "
              f"{format_probability(preview.p_after):>12} {format_number(max_loss(b)):>10}")


def presets(state: MarketState) -> None:
    print("\nTrade panel presets (NO side, b=10):")
    panel = TradePanel(state, side=Side.NO)
    sequencer = PreviewSequencer()
    for amount in SPEND_PRESETS:
        ticket = sequencer.issue()
        sequencer.offer(ticket, panel.set_spend(amount))
        preview = sequencer.latest
        print(f"  {amount:>4} tokens -> {format_number(preview.delta_shares):>6} NO shares, "
              f"price {format_probability(preview.p_before)} -> {format_probability(preview.p_after)} "
              f"({format_percent_change(preview.price_change_percent)})")


if __name__ == "__main__":
    worked_example()
    liquidity_table()
    presets(MarketState(0.0, 0.0, 10.0))
