from __future__ import annotations
from typing import Any, Dict, List

import pandas as pd

from market.market import Market
from portfolio.portfolio import Portfolio


def market_rows(market: Market) -> List[Dict[str, Any]]:
    return [{"symbol": s.symbol, "name": s.name, "price": s.price} for s in market.sorted_stocks()]


def portfolio_summary(portfolio: Portfolio, market: Market) -> Dict[str, Any]:
    return {
        "cash": portfolio.cash,
        "positions": [
            {"symbol": sym, "quantity": qty, "price": price, "value": value}
            for sym, qty, price, value in portfolio.positions(market)
        ],
        "total_value": portfolio.market_value(market),
    }


def history_rows(portfolio: Portfolio) -> List[Dict[str, Any]]:
    return [
        {
            "timestamp": t.timestamp,
            "side": t.side.value,
            "symbol": t.symbol,
            "quantity": t.quantity,
            "price": t.price,
        }
        for t in portfolio.history
    ]


def market_frame(market: Market) -> pd.DataFrame:
    return pd.DataFrame(market_rows(market), columns=["symbol", "name", "price"])


def history_frame(portfolio: Portfolio) -> pd.DataFrame:
    """Transaction history as a DataFrame, one row per trade in execution order."""
    cols = ["timestamp", "side", "symbol", "quantity", "price"]
    return pd.DataFrame(history_rows(portfolio), columns=cols)
