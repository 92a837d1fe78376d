"""Command dispatch for a single trading session.

A Session owns the market, the user and the portfolio store for its
lifetime and maps each command of the menu surface onto one core
operation. Every command returns a CommandResult; failures become
messages and never leave a partial state change behind.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

import numpy as np
from loguru import logger

from accounts.user import User
from common.config_loader import SimulatorConfig
from market.market import Market
from portfolio.portfolio import TradeError
from reporting.text import format_history, format_market, format_portfolio, format_transaction
from storage.store import PortfolioNotFoundError, PortfolioStore, StorageError


class Command(str, Enum):
    MARKET = "market"
    BUY = "buy"
    SELL = "sell"
    PORTFOLIO = "portfolio"
    HISTORY = "history"
    TICK = "tick"
    SAVE = "save"
    LOAD = "load"
    EXIT = "exit"

    @classmethod
    def parse(cls, token: str) -> Optional["Command"]:
        """Accept a command name or its menu number (1-9)."""
        token = token.strip().lower()
        if token.isdecimal():
            idx = int(token) - 1
            members = list(cls)
            return members[idx] if 0 <= idx < len(members) else None
        try:
            return cls(token)
        except ValueError:
            return None


@dataclass(frozen=True)
class CommandResult:
    ok: bool
    message: str
    done: bool = False


class Session:
    def __init__(self, user: User, market: Market, store: PortfolioStore) -> None:
        self.user = user
        self.market = market
        self.store = store

    @classmethod
    def start(
        cls,
        username: str,
        cfg: SimulatorConfig,
        store: Optional[PortfolioStore] = None,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ) -> "Session":
        user = User.new(username, cfg.starting_cash)
        market = Market.from_config(cfg, rng=rng, seed=seed)
        return cls(user, market, store or PortfolioStore(cfg.data_dir))

    @property
    def portfolio(self):
        return self.user.portfolio

    def execute(self, command: str | Command, *args: str) -> CommandResult:
        cmd = command if isinstance(command, Command) else Command.parse(command)
        if cmd is None:
            return CommandResult(False, "Unknown option. Try again.")
        handler = getattr(self, f"_do_{cmd.value}")
        try:
            return handler(args)
        except TradeError as e:
            return CommandResult(False, f"Error: {e}")
        except PortfolioNotFoundError:
            return CommandResult(False, f"No saved portfolio found ({self.user.save_key})")
        except StorageError as e:
            logger.error(str(e))
            return CommandResult(False, f"Storage error: {e}")

    def _do_market(self, args: Sequence[str]) -> CommandResult:
        return CommandResult(True, "\n".join(format_market(self.market)))

    def _trade_args(self, args: Sequence[str]) -> tuple[str, int]:
        if len(args) != 2:
            raise TradeError("Expected SYMBOL QTY")
        symbol, raw_qty = args
        try:
            qty = int(raw_qty.strip())
        except ValueError:
            raise TradeError(f"Quantity must be a whole number of shares, got {raw_qty!r}") from None
        return symbol.strip().upper(), qty

    def _do_buy(self, args: Sequence[str]) -> CommandResult:
        symbol, qty = self._trade_args(args)
        t = self.portfolio.buy(self.market, symbol, qty)
        return CommandResult(True, f"Executed: {format_transaction(t)}")

    def _do_sell(self, args: Sequence[str]) -> CommandResult:
        symbol, qty = self._trade_args(args)
        t = self.portfolio.sell(self.market, symbol, qty)
        return CommandResult(True, f"Executed: {format_transaction(t)}")

    def _do_portfolio(self, args: Sequence[str]) -> CommandResult:
        return CommandResult(True, "\n".join(format_portfolio(self.portfolio, self.market)))

    def _do_history(self, args: Sequence[str]) -> CommandResult:
        return CommandResult(True, "\n".join(format_history(self.portfolio)))

    def _do_tick(self, args: Sequence[str]) -> CommandResult:
        self.market.tick()
        lines = ["Market advanced (random tick). New prices:"] + format_market(self.market)
        return CommandResult(True, "\n".join(lines))

    def _do_save(self, args: Sequence[str]) -> CommandResult:
        path = self.store.save(self.portfolio, self.user.save_key)
        return CommandResult(True, f"Saved portfolio to {path}")

    def _do_load(self, args: Sequence[str]) -> CommandResult:
        self.user.portfolio = self.store.load(self.user.save_key)
        return CommandResult(True, f"Loaded portfolio from {self.store.path_for(self.user.save_key)}")

    def _do_exit(self, args: Sequence[str]) -> CommandResult:
        return CommandResult(True, "Goodbye!", done=True)
