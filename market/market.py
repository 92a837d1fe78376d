"""In-memory market of equities with randomly fluctuating prices.

Each tick moves every price by a percentage drawn uniformly from
[-max_move_pct, +max_move_pct]. The random source is passed in explicitly
so that runs can be reproduced.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

import numpy as np
from loguru import logger

from common.money import MIN_PRICE, dec, to_money
from market.stock import Stock

# (symbol, name, starting price)
SEED_STOCKS = (
    ("AAPL", "Apple Inc.", "170.00"),
    ("GOOG", "Alphabet Inc.", "145.50"),
    ("TSLA", "Tesla Inc.", "240.00"),
    ("INFY", "Infosys Ltd.", "18.50"),
    ("RELI", "Reliance Industries", "90.00"),
)


def seed_stocks() -> List[Stock]:
    """Fresh Stock objects for the default roster."""
    return [Stock(symbol, name, Decimal(price)) for symbol, name, price in SEED_STOCKS]


def stocks_from_config(entries: Iterable[Dict[str, Any]]) -> List[Stock]:
    return [Stock(str(e["symbol"]), str(e.get("name", e["symbol"])), dec(e["price"])) for e in entries]


class Market:
    """Owns the Stock instances for a session.

    Args:
        stocks: Initial roster. Defaults to the five seed equities.
        rng: numpy Generator used by tick(). Built from ``seed`` when omitted.
        seed: Seed for the default generator.
        max_move_pct: Largest absolute percentage move per tick.
        min_price: Floor applied after every move.
    """

    def __init__(
        self,
        stocks: Optional[Iterable[Stock]] = None,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
        max_move_pct: float = 3.0,
        min_price: Decimal = MIN_PRICE,
    ) -> None:
        if max_move_pct < 0:
            raise ValueError(f"max_move_pct must be non-negative, got {max_move_pct}")
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.max_move_pct = float(max_move_pct)
        self.min_price = to_money(min_price)
        self._stocks: Dict[str, Stock] = {}
        for s in (seed_stocks() if stocks is None else stocks):
            self.add_stock(s)

    @classmethod
    def from_config(cls, cfg, rng: Optional[np.random.Generator] = None, seed: Optional[int] = None) -> "Market":
        stocks = stocks_from_config(cfg.stocks) if cfg.stocks else None
        return cls(stocks=stocks, rng=rng, seed=seed, max_move_pct=cfg.max_move_pct, min_price=cfg.min_price)

    def add_stock(self, stock: Stock) -> None:
        # Same symbol replaces the existing listing.
        self._stocks[stock.symbol] = stock

    def get(self, symbol: str) -> Optional[Stock]:
        """Case-insensitive lookup. Returns None for unknown symbols."""
        return self._stocks.get(symbol.strip().upper())

    def price(self, symbol: str) -> Optional[Decimal]:
        s = self.get(symbol)
        return s.price if s is not None else None

    def all(self) -> List[Stock]:
        return list(self._stocks.values())

    def sorted_stocks(self) -> List[Stock]:
        return sorted(self._stocks.values(), key=lambda s: s.symbol)

    def symbols(self) -> List[str]:
        return sorted(self._stocks)

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and self.get(symbol) is not None

    def __len__(self) -> int:
        return len(self._stocks)

    def tick(self) -> None:
        """Apply one random price move to every stock."""
        for s in self._stocks.values():
            pct = float(self.rng.uniform(-self.max_move_pct, self.max_move_pct))
            factor = dec(1 + pct / 100.0)
            new_price = to_money(s.price * factor)
            if new_price < self.min_price:
                new_price = self.min_price
            logger.debug(f"tick {s.symbol}: {s.price} -> {new_price} ({pct:+.3f}%)")
            s.price = new_price
