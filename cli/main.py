"""Stock trading simulator CLI.

Provides commands for:
- market: Show (or export) current prices
- buy / sell: Trade shares against the saved portfolio
- portfolio: Show cash, positions and total value
- history: Show (or export) the transaction history
- reset: Start over with the configured starting cash

Each invocation loads the user's saved portfolio (or starts a fresh one),
optionally advances the market with --ticks, runs one command and saves
after any change.
"""
from __future__ import annotations

import argparse
from typing import Optional

from common.config_loader import SimulatorConfig, load_config
from common.logging_setup import setup_logging
from engine.session import Command, CommandResult, Session
from portfolio.portfolio import Portfolio
from reporting.summary import history_frame, market_frame
from storage.store import PortfolioStore, StorageError


def build_session(args, cfg: SimulatorConfig) -> Session:
    """Build a session for the requested user, restoring any saved portfolio."""
    store = PortfolioStore(args.data_dir or cfg.data_dir)
    session = Session.start(args.user, cfg, store=store, seed=args.seed)

    if store.exists(session.user.save_key):
        session.user.portfolio = store.load(session.user.save_key)

    for _ in range(max(0, args.ticks)):
        session.market.tick()
    return session


def emit(result: CommandResult) -> int:
    print(result.message)
    return 0 if result.ok else 1


def save_after(session: Session, result: CommandResult) -> int:
    """Print a trade result and persist the portfolio if the trade went through."""
    code = emit(result)
    if code == 0:
        code = emit(session.execute(Command.SAVE))
    return code


def cmd_market(args, session: Session) -> int:
    if args.export:
        df = market_frame(session.market)
        df.to_csv(args.export, index=False)
        print(f"Exported {len(df)} prices to {args.export}")
        return 0
    return emit(session.execute(Command.MARKET))


def cmd_buy(args, session: Session) -> int:
    return save_after(session, session.execute(Command.BUY, args.symbol, args.qty))


def cmd_sell(args, session: Session) -> int:
    return save_after(session, session.execute(Command.SELL, args.symbol, args.qty))


def cmd_portfolio(args, session: Session) -> int:
    return emit(session.execute(Command.PORTFOLIO))


def cmd_history(args, session: Session) -> int:
    """Handle history command: print, or export to CSV with --export."""
    if args.export:
        df = history_frame(session.portfolio)
        df.to_csv(args.export, index=False)
        print(f"Exported {len(df)} transactions to {args.export}")
        return 0
    return emit(session.execute(Command.HISTORY))


def cmd_reset(args, session: Session) -> int:
    session.user.portfolio = Portfolio(cash=args.cfg.starting_cash)
    return emit(session.execute(Command.SAVE))


def main(argv: Optional[list[str]] = None):
    """Main entry point."""
    p = argparse.ArgumentParser(
        prog="cli.main",
        description="Stock trading simulator: trade a random-walk market from a saved portfolio",
    )
    p.add_argument("--config", default=None, help="Simulator config file (default: config/simulator.yaml)")
    p.add_argument("--user", default="Trader", help="Username; selects the saved portfolio")
    p.add_argument("--data-dir", default=None, help="Directory for saved portfolios")
    p.add_argument("--seed", type=int, default=None, help="Random seed for market moves")
    p.add_argument("--ticks", type=int, default=0, help="Advance the market this many ticks first")
    p.add_argument("--log-level", default=None, help="Log level (default from config)")
    sub = p.add_subparsers(dest="cmd", required=True)

    market_p = sub.add_parser("market", help="Show market prices")
    market_p.add_argument("--export", default=None, help="Write prices to this CSV file instead")
    market_p.set_defaults(func=cmd_market)

    buy_p = sub.add_parser("buy", help="Buy shares")
    buy_p.add_argument("symbol", help="Ticker symbol")
    buy_p.add_argument("qty", help="Number of shares")
    buy_p.set_defaults(func=cmd_buy)

    sell_p = sub.add_parser("sell", help="Sell shares")
    sell_p.add_argument("symbol", help="Ticker symbol")
    sell_p.add_argument("qty", help="Number of shares")
    sell_p.set_defaults(func=cmd_sell)

    sub.add_parser("portfolio", help="Show portfolio").set_defaults(func=cmd_portfolio)

    hist_p = sub.add_parser("history", help="Show transaction history")
    hist_p.add_argument("--export", default=None, help="Write history to this CSV file instead")
    hist_p.set_defaults(func=cmd_history)

    sub.add_parser("reset", help="Start a fresh portfolio").set_defaults(func=cmd_reset)

    args = p.parse_args(argv)

    try:
        cfg = load_config(args.config)
    except FileNotFoundError as e:
        print(f"Error: config file not found: {e.filename}")
        raise SystemExit(1)
    except ValueError as e:
        print(f"Error: invalid config: {e}")
        raise SystemExit(1)
    args.cfg = cfg
    setup_logging(args.log_level or cfg.log_level)

    try:
        session = build_session(args, cfg)
    except StorageError as e:
        print(f"Error: {e}")
        raise SystemExit(1)

    raise SystemExit(args.func(args, session))


if __name__ == "__main__":
    main()
