"""Tests for simulator configuration loading."""
from __future__ import annotations

from decimal import Decimal

import pytest

from common.config_loader import SimulatorConfig, load_config
from market.market import Market


def test_defaults():
    cfg = SimulatorConfig()
    assert cfg.starting_cash == Decimal("10000.00")
    assert cfg.max_move_pct == 3.0
    assert cfg.min_price == Decimal("0.01")


def test_shipped_config_matches_defaults():
    cfg = load_config("config/simulator.yaml")
    assert cfg.starting_cash == Decimal("10000.00")
    assert [s["symbol"] for s in cfg.stocks] == ["AAPL", "GOOG", "TSLA", "INFY", "RELI"]
    m = Market.from_config(cfg, seed=1)
    assert m.price("GOOG") == Decimal("145.50")


def test_partial_file_falls_back(tmp_path):
    path = tmp_path / "sim.yaml"
    path.write_text("starting_cash: 500\nmarket:\n  max_move_pct: 1.5\n", encoding="utf-8")
    cfg = load_config(path)
    assert cfg.starting_cash == Decimal("500.00")
    assert cfg.max_move_pct == 1.5
    assert cfg.stocks == []
    assert len(Market.from_config(cfg, seed=1)) == 5


def test_custom_roster(tmp_path):
    path = tmp_path / "sim.yaml"
    path.write_text(
        "market:\n  stocks:\n    - {symbol: abc, name: ABC Corp, price: '12.345'}\n",
        encoding="utf-8",
    )
    m = Market.from_config(load_config(path), seed=1)
    assert m.symbols() == ["ABC"]
    assert m.price("abc") == Decimal("12.35")


def test_explicit_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_default_path_missing_gives_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert load_config() == SimulatorConfig()


@pytest.mark.parametrize(
    "text",
    ["- starting_cash: 1\n", "market:\n  - max_move_pct: 1\n"],
)
def test_non_mapping_sections_rejected(tmp_path, text):
    path = tmp_path / "sim.yaml"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)
