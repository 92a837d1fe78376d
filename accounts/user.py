from __future__ import annotations
import re
from dataclasses import dataclass
from decimal import Decimal

from portfolio.portfolio import Portfolio

DEFAULT_USERNAME = "Trader"


def save_key(username: str) -> str:
    """Filesystem-safe storage key for a user's portfolio."""
    return "portfolio_" + re.sub(r"\W+", "_", username)


@dataclass
class User:
    username: str
    portfolio: Portfolio

    @classmethod
    def new(cls, username: str, initial_cash: Decimal) -> "User":
        name = username.strip() or DEFAULT_USERNAME
        return cls(username=name, portfolio=Portfolio(cash=initial_cash))

    @property
    def save_key(self) -> str:
        return save_key(self.username)
