"""File-backed portfolio persistence.

Each portfolio is one YAML document at ``<base_dir>/<key>.yaml``. Money is
written as strings and timestamps as ISO-8601 so that a load reproduces
the saved portfolio exactly.
"""
from __future__ import annotations

import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict

import yaml
from loguru import logger

from portfolio.portfolio import Portfolio
from portfolio.transaction import Side, Transaction

FORMAT_VERSION = 1
_KEY_RE = re.compile(r"^\w+$")


class StorageError(OSError):
    """Raised when a portfolio cannot be written or read back."""

    pass


class PortfolioNotFoundError(FileNotFoundError):
    """Raised when no portfolio has been saved under a key."""

    pass


def portfolio_to_dict(portfolio: Portfolio) -> Dict[str, Any]:
    return {
        "version": FORMAT_VERSION,
        "cash": str(portfolio.cash),
        "holdings": {sym: int(qty) for sym, qty in sorted(portfolio.holdings.items())},
        "history": [
            {
                "timestamp": t.timestamp.isoformat(),
                "side": t.side.value,
                "symbol": t.symbol,
                "quantity": t.quantity,
                "price": str(t.price),
            }
            for t in portfolio.history
        ],
    }


def portfolio_from_dict(raw: Dict[str, Any]) -> Portfolio:
    """Rebuild a Portfolio from its stored form.

    Raises:
        ValueError: Missing fields or values that do not parse.
    """
    if not isinstance(raw, dict):
        raise ValueError("Portfolio document must be a mapping")
    version = raw.get("version", FORMAT_VERSION)
    if version != FORMAT_VERSION:
        raise ValueError(f"Unsupported portfolio format version: {version}")
    holdings = raw.get("holdings") or {}
    if not isinstance(holdings, dict):
        raise ValueError("Portfolio holdings must be a mapping")
    try:
        history = [
            Transaction(
                side=Side(t["side"]),
                symbol=str(t["symbol"]),
                quantity=int(t["quantity"]),
                price=Decimal(str(t["price"])),
                timestamp=datetime.fromisoformat(str(t["timestamp"])),
            )
            for t in raw.get("history") or []
        ]
        return Portfolio(
            cash=Decimal(str(raw["cash"])),
            holdings={str(k): int(v) for k, v in holdings.items()},
            history=history,
        )
    except (KeyError, TypeError, InvalidOperation) as e:
        raise ValueError(f"Malformed portfolio document: {e!r}") from e


class PortfolioStore:
    def __init__(self, base_dir: str | Path = "data") -> None:
        self.base_dir = Path(base_dir)

    def path_for(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.base_dir / f"{key}.yaml"

    def exists(self, key: str) -> bool:
        return self.path_for(key).is_file()

    def save(self, portfolio: Portfolio, key: str) -> Path:
        path = self.path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                yaml.safe_dump(portfolio_to_dict(portfolio), f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            raise StorageError(f"Could not save portfolio to {path}: {e}") from e
        logger.info(f"Saved portfolio to {path}")
        return path

    def load(self, key: str) -> Portfolio:
        path = self.path_for(key)
        if not path.is_file():
            raise PortfolioNotFoundError(f"No saved portfolio found ({path})")
        try:
            with path.open("r", encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise StorageError(f"Could not read portfolio from {path}: {e}") from e
        try:
            portfolio = portfolio_from_dict(raw)
        except ValueError as e:
            raise StorageError(f"Could not read portfolio from {path}: {e}") from e
        logger.info(f"Loaded portfolio from {path}")
        return portfolio
