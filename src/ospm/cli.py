"""Command-line entry point: price, quote and preview trades, and talk to the Oracle.

Examples:
    ospm price --q-yes 10 --q-no 0 -b 10
    ospm preview --side YES --spend 6.20 -b 10
    ospm markets --status open
    ospm trade <market-id> --side NO --spend 25
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .formatting import format_number, format_percent_change, format_probability
from .history import history_rows
from .market.lmsr import LMSRError, MarketState, Side, buy_cost, max_loss
from .oracle import OracleError
from .trading import TradeLogger, TradeNotReadyError, TradePanel
from .utils.config import ClientConfig, create_client_from_config


def _add_state_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--q-yes', type=float, default=0.0, help='Outstanding YES shares')
    parser.add_argument('--q-no', type=float, default=0.0, help='Outstanding NO shares')
    parser.add_argument('-b', '--liquidity', type=float, default=10.0, help='LMSR liquidity parameter b')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='ospm', description='LMSR prediction market client')
    parser.add_argument('--config', type=str, default=None, help='Path to config.env')
    subparsers = parser.add_subparsers(dest='command', required=True)

    price_parser = subparsers.add_parser('price', help='Show YES/NO probabilities for a market state')
    _add_state_arguments(price_parser)

    quote_parser = subparsers.add_parser('quote', help='Cost to buy an exact number of shares')
    _add_state_arguments(quote_parser)
    quote_parser.add_argument('--side', type=str, default='YES', help='YES or NO')
    quote_parser.add_argument('--shares', type=float, required=True, help='Shares to buy')

    preview_parser = subparsers.add_parser('preview', help='Shares received for spending tokens')
    _add_state_arguments(preview_parser)
    preview_parser.add_argument('--side', type=str, default='YES', help='YES or NO')
    preview_parser.add_argument('--spend', type=str, default=None, help='Tokens to spend')

    markets_parser = subparsers.add_parser('markets', help='List Oracle markets')
    markets_parser.add_argument('--status', type=str, default=None)
    markets_parser.add_argument('--category', type=str, default=None)
    markets_parser.add_argument('--limit', type=int, default=None)
    markets_parser.add_argument('--offset', type=int, default=None)

    market_parser = subparsers.add_parser('market', help='Show one market with recent trades')
    market_parser.add_argument('market_id', type=str)
    market_parser.add_argument('--trades', type=int, default=10, help='Number of recent trades to show')

    trade_parser = subparsers.add_parser('trade', help='Preview and submit a trade')
    trade_parser.add_argument('market_id', type=str)
    trade_parser.add_argument('--side', type=str, default='YES', help='YES or NO')
    trade_parser.add_argument('--spend', type=str, default=None, help='Tokens to spend')
    trade_parser.add_argument('--visitor', type=str, default=None, help='Visitor identifier')

    return parser


def _print_preview(panel: TradePanel, decimals: int) -> None:
    preview = panel.preview
    side = panel.side.value
    print(f"You spend:     {format_number(preview.cost, decimals)} tokens")
    print(f"You receive:   {format_number(preview.delta_shares, decimals)} {side} shares")
    print(f"Average price: {preview.average_price:.4f} per share")
    print(f"Current price: {format_probability(preview.p_before, decimals)}")
    print(f"Price after:   {format_probability(preview.p_after, decimals)} "
          f"({format_percent_change(preview.price_change_percent, decimals)})")


def _save_logs(recorder: TradeLogger, config: ClientConfig) -> None:
    if config.save_logs_csv:
        recorder.save_to_csv()
    if config.save_logs_json:
        recorder.save_to_json()


def cmd_price(args, config: ClientConfig) -> int:
    state = MarketState(args.q_yes, args.q_no, args.liquidity)
    prices = state.price()
    decimals = config.display_decimals
    print(f"YES: {format_probability(prices.p_yes, decimals)}")
    print(f"NO:  {format_probability(prices.p_no, decimals)}")
    print(f"Max market maker loss: {format_number(max_loss(state.b), decimals)} tokens")
    return 0


def cmd_quote(args, config: ClientConfig) -> int:
    side = Side.parse(args.side)
    amount = buy_cost(side, args.q_yes, args.q_no, args.liquidity, args.shares)
    print(f"{format_number(args.shares, config.display_decimals)} {side.value} shares cost "
          f"{amount:.4f} tokens")
    return 0


def cmd_preview(args, config: ClientConfig) -> int:
    state = MarketState(args.q_yes, args.q_no, args.liquidity)
    panel = TradePanel(
        state,
        side=args.side,
        spend=args.spend if args.spend is not None else config.default_spend,
        tolerance=config.lmsr_tolerance,
        max_iterations=config.lmsr_max_iterations,
    )
    if not panel.can_submit:
        print("No preview available: enter a positive amount to spend")
        return 1
    _print_preview(panel, config.display_decimals)
    return 0


def cmd_markets(args, config: ClientConfig) -> int:
    decimals = config.display_decimals
    with create_client_from_config(config) as client:
        page = client.get_markets(
            status=args.status, category=args.category, limit=args.limit, offset=args.offset
        )

    if not page.markets:
        print("No markets found")
        return 0

    for market in page.markets:
        p_yes = market.current_price_yes()
        price_text = format_probability(p_yes, decimals) if p_yes is not None else "n/a"
        print(f"[{market.status or '?'}] {market.id}  {market.question}  YES {price_text}  "
              f"({market.total_trades} trades)")
    suffix = " (more available)" if page.has_more else ""
    print(f"\n{len(page.markets)} of {page.total} markets{suffix}")
    return 0


def cmd_market(args, config: ClientConfig) -> int:
    decimals = config.display_decimals
    with create_client_from_config(config) as client:
        market = client.get_market(args.market_id)
        trades = client.get_trades(args.market_id)[: args.trades]

    print(market.question)
    if market.description:
        print(market.description)
    print(f"Status: {market.status}  Category: {market.category}")
    p_yes = market.current_price_yes()
    if p_yes is not None:
        p_no = market.price_no if market.price_yes is not None and market.price_no is not None else 1.0 - p_yes
        liquidity = f"  (b={format_number(market.state.b, decimals)})" if market.state is not None else ""
        print(f"YES {format_probability(p_yes, decimals)} / NO {format_probability(p_no, decimals)}{liquidity}")

    print(f"\nRecent Trades ({len(trades)})")
    if not trades:
        print("No trades yet. Be the first!")
    for row in history_rows(trades):
        print(f"  {row.side:<3} {row.shares_text:<18} {row.detail_text:<32} {row.change_text:>8} {row.after_text}")
    return 0


def cmd_trade(args, config: ClientConfig) -> int:
    recorder = TradeLogger(log_dir=config.log_dir, run_id=args.market_id) if config.enable_logging else None

    with create_client_from_config(config) as client:
        market = client.get_market(args.market_id)
        if market.state is None:
            print(f"Market {market.id} does not expose its LMSR state; cannot preview")
            return 1

        panel = TradePanel(
            market.state,
            side=args.side,
            spend=args.spend if args.spend is not None else config.default_spend,
            tolerance=config.lmsr_tolerance,
            max_iterations=config.lmsr_max_iterations,
            recorder=recorder,
        )
        if panel.can_submit:
            print("Trade Preview")
            _print_preview(panel, config.display_decimals)

        def submit(side: Side, spend: float):
            return client.submit_trade(market.id, side, spend, visitor_id=args.visitor)

        try:
            result = panel.submit(submit)
        except OracleError:
            # Failed submissions are recorded without a fill.
            if recorder is not None:
                recorder.log_submission(market.id, panel.side, panel.spend, panel.preview)
                _save_logs(recorder, config)
            raise

    if recorder is not None:
        recorder.log_submission(market.id, panel.side, panel.spend, panel.preview, result)
        _save_logs(recorder, config)

    trade = result.trade
    print(f"\nFilled: {format_number(trade.shares_got, config.display_decimals)} {trade.side.value} shares "
          f"for {format_number(trade.amount_spent, config.display_decimals)} tokens")
    print(f"Price now: {format_probability(trade.price_after, config.display_decimals)}")
    return 0


COMMANDS = {
    'price': cmd_price,
    'quote': cmd_quote,
    'preview': cmd_preview,
    'markets': cmd_markets,
    'market': cmd_market,
    'trade': cmd_trade,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = ClientConfig(args.config)
    logging.getLogger("ospm").setLevel(config.log_level)

    try:
        return COMMANDS[args.command](args, config)
    except TradeNotReadyError as e:
        print(f"No preview available: {e}")
    except LMSRError as e:
        print(f"Pricing error: {e}")
    except OracleError as e:
        print(f"Oracle error: {e}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
