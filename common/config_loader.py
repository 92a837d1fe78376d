from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List
import yaml

from common.money import MIN_PRICE, to_money

DEFAULT_CONFIG_PATH = "config/simulator.yaml"
DEFAULT_STARTING_CASH = Decimal("10000.00")
DEFAULT_MAX_MOVE_PCT = 3.0


def load_yaml(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@dataclass(frozen=True)
class SimulatorConfig:
    starting_cash: Decimal = DEFAULT_STARTING_CASH
    max_move_pct: float = DEFAULT_MAX_MOVE_PCT
    min_price: Decimal = MIN_PRICE
    data_dir: str = "data"
    log_level: str = "INFO"
    stocks: List[Dict[str, Any]] = field(default_factory=list)  # empty -> built-in seed set

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "SimulatorConfig":
        if not isinstance(raw, dict):
            raise ValueError("Config document must be a mapping")
        market = raw.get("market") or {}
        if not isinstance(market, dict):
            raise ValueError("Config 'market' section must be a mapping")
        return cls(
            starting_cash=to_money(raw.get("starting_cash", DEFAULT_STARTING_CASH)),
            max_move_pct=float(market.get("max_move_pct", DEFAULT_MAX_MOVE_PCT)),
            min_price=to_money(market.get("min_price", MIN_PRICE)),
            data_dir=str(raw.get("data_dir", "data")),
            log_level=str(raw.get("log_level", "INFO")).upper(),
            stocks=list(market.get("stocks") or []),
        )


def load_config(path: str | Path | None = None) -> SimulatorConfig:
    """Load simulator settings.

    With no explicit path, a missing default file yields the built-in
    defaults. An explicitly requested file must exist.
    """
    if path is None:
        p = Path(DEFAULT_CONFIG_PATH)
        if not p.exists():
            return SimulatorConfig()
        return SimulatorConfig.from_dict(load_yaml(p))
    return SimulatorConfig.from_dict(load_yaml(path))
