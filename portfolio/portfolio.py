"""User portfolio: cash, share holdings and trade history.

Buy and sell validate everything before touching state, so a rejected
trade leaves cash, holdings and history exactly as they were.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Tuple

from loguru import logger

from common.money import ZERO, to_money
from market.market import Market
from market.stock import Stock
from portfolio.transaction import Side, Transaction


class TradeError(ValueError):
    """Raised when a buy or sell request is invalid."""

    pass


@dataclass
class Portfolio:
    cash: Decimal
    holdings: Dict[str, int] = field(default_factory=dict)  # symbol -> shares
    history: List[Transaction] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.cash = to_money(self.cash)
        if self.cash < ZERO:
            raise ValueError(f"Cash must be non-negative, got {self.cash}")
        holdings: Dict[str, int] = {}
        for sym, qty in self.holdings.items():
            if int(qty) <= 0:
                raise ValueError(f"Holding for {sym} must be positive, got {qty}")
            holdings[sym.upper()] = int(qty)
        self.holdings = holdings
        self.history = list(self.history)

    def get_qty(self, symbol: str) -> int:
        return self.holdings.get(symbol.strip().upper(), 0)

    def _resolve(self, market: Market, symbol: str, qty: int) -> Stock:
        if isinstance(qty, bool) or not isinstance(qty, int):
            raise TradeError(f"Quantity must be a whole number of shares, got {qty!r}")
        if qty <= 0:
            raise TradeError("Quantity must be positive")
        stock = market.get(symbol)
        if stock is None:
            raise TradeError(f"Unknown stock: {symbol}")
        return stock

    def buy(self, market: Market, symbol: str, qty: int) -> Transaction:
        """Buy ``qty`` shares at the current market price.

        Raises:
            TradeError: Non-positive quantity, unknown symbol or insufficient cash.
        """
        try:
            stock = self._resolve(market, symbol, qty)
            # exact at two decimals; check before quantize, which overflows on huge qty
            cost = stock.price * qty
            if self.cash < cost:
                raise TradeError(f"Insufficient cash. Need {cost} available {self.cash}")
            cost = to_money(cost)
        except TradeError as e:
            logger.warning(f"Rejected BUY {qty} {symbol}: {e}")
            raise

        self.cash = to_money(self.cash - cost)
        self.holdings[stock.symbol] = self.get_qty(stock.symbol) + qty
        t = Transaction(Side.BUY, stock.symbol, qty, stock.price)
        self.history.append(t)
        logger.info(f"Executed: {t}")
        return t

    def sell(self, market: Market, symbol: str, qty: int) -> Transaction:
        """Sell ``qty`` held shares at the current market price.

        Raises:
            TradeError: Non-positive quantity, unknown symbol or not enough shares.
        """
        try:
            stock = self._resolve(market, symbol, qty)
            have = self.get_qty(stock.symbol)
            if have < qty:
                raise TradeError(f"Not enough shares to sell. Have {have}")
        except TradeError as e:
            logger.warning(f"Rejected SELL {qty} {symbol}: {e}")
            raise

        proceeds = to_money(stock.price * qty)
        self.cash = to_money(self.cash + proceeds)
        remain = have - qty
        if remain == 0:
            del self.holdings[stock.symbol]
        else:
            self.holdings[stock.symbol] = remain
        t = Transaction(Side.SELL, stock.symbol, qty, stock.price)
        self.history.append(t)
        logger.info(f"Executed: {t}")
        return t

    def market_value(self, market: Market) -> Decimal:
        """Cash plus the value of every position still listed in ``market``.

        Symbols no longer in the market contribute nothing.
        """
        value = self.cash
        for sym, qty in self.holdings.items():
            price = market.price(sym)
            if price is not None:
                value += price * qty
        return to_money(value)

    def positions(self, market: Market) -> List[Tuple[str, int, Decimal, Decimal]]:
        """(symbol, qty, price, value) per holding, sorted by symbol."""
        rows = []
        for sym in sorted(self.holdings):
            qty = self.holdings[sym]
            price = market.price(sym)
            price = price if price is not None else ZERO
            rows.append((sym, qty, price, to_money(price * qty)))
        return rows
