from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal

from common.money import MIN_PRICE, to_money


@dataclass(eq=False)
class Stock:
    """A listed equity. Symbol and name are fixed; price moves with the market."""

    symbol: str
    name: str
    price: Decimal

    def __post_init__(self) -> None:
        self.symbol = self.symbol.strip().upper()
        if not self.symbol:
            raise ValueError("Stock symbol must not be empty")
        self.price = to_money(self.price)
        if self.price < MIN_PRICE:
            raise ValueError(f"Price for {self.symbol} must be at least {MIN_PRICE}, got {self.price}")

    def __str__(self) -> str:
        return f"{self.symbol} ({self.name}): {self.price}"
