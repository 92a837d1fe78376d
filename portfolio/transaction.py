from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum

from common.money import to_money


class Side(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True)
class Transaction:
    """One executed trade."""

    side: Side
    symbol: str
    quantity: int
    price: Decimal
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "side", Side(self.side))
        object.__setattr__(self, "symbol", self.symbol.upper())
        object.__setattr__(self, "price", to_money(self.price))
        if self.quantity <= 0:
            raise ValueError(f"Transaction quantity must be positive, got {self.quantity}")

    @property
    def amount(self) -> Decimal:
        """Cash moved by this trade."""
        return to_money(self.price * self.quantity)

    def __str__(self) -> str:
        return f"{self.timestamp.isoformat()} | {self.side.value} {self.symbol} {self.quantity} @ {self.price}"
