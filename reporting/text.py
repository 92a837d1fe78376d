"""Fixed-width text renderings of market, portfolio and history reports."""
from __future__ import annotations

from typing import List

from market.market import Market
from portfolio.portfolio import Portfolio
from portfolio.transaction import Transaction
from reporting.summary import market_rows, portfolio_summary


def format_transaction(t: Transaction) -> str:
    return str(t)


def format_market(market: Market) -> List[str]:
    lines = ["--- MARKET DATA ---"]
    for row in market_rows(market):
        lines.append(f"{row['symbol']:>6} | {row['name']:>20} | {row['price']:>8}")
    return lines


def format_portfolio(portfolio: Portfolio, market: Market) -> List[str]:
    summary = portfolio_summary(portfolio, market)
    lines = ["--- PORTFOLIO ---", f"Cash: {summary['cash']}", "Holdings:"]
    if not summary["positions"]:
        lines.append("  (no positions)")
    else:
        lines.append(f"{'SYM':>6} | {'QTY':>8} | {'Price':>10} | {'Value':>10}")
        for p in summary["positions"]:
            lines.append(f"{p['symbol']:>6} | {p['quantity']:>8} | {p['price']:>10} | {p['value']:>10}")
    lines.append(f"Total portfolio value (cash + positions): {summary['total_value']}")
    return lines


def format_history(portfolio: Portfolio) -> List[str]:
    lines = ["--- TRANSACTION HISTORY ---"]
    if not portfolio.history:
        lines.append("  (none)")
    else:
        lines.extend(format_transaction(t) for t in portfolio.history)
    return lines
