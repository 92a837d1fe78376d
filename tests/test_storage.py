"""Tests for portfolio persistence.

Covers:
- Exact save/load round trip
- Missing and malformed files
- Key validation
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import numpy as np
import pytest

from accounts.user import User, save_key
from market.market import Market
from portfolio.portfolio import Portfolio
from storage.store import (
    PortfolioNotFoundError,
    PortfolioStore,
    StorageError,
    portfolio_from_dict,
    portfolio_to_dict,
)


def make_traded_portfolio() -> Portfolio:
    """Portfolio with a few trades at non-round prices."""
    m = Market(rng=np.random.default_rng(11))
    p = Portfolio(cash=Decimal("10000.00"))
    p.buy(m, "AAPL", 10)
    m.tick()
    p.buy(m, "INFY", 33)
    m.tick()
    p.sell(m, "AAPL", 4)
    return p


class TestRoundTrip:
    """Tests for save then load."""

    def test_round_trip_is_exact(self, tmp_path):
        store = PortfolioStore(tmp_path)
        p = make_traded_portfolio()
        store.save(p, "portfolio_alice")

        loaded = store.load("portfolio_alice")

        assert loaded.cash == p.cash
        assert str(loaded.cash) == str(p.cash)
        assert loaded.holdings == p.holdings
        assert loaded.history == p.history

    def test_empty_portfolio_round_trip(self, tmp_path):
        store = PortfolioStore(tmp_path)
        store.save(Portfolio(cash=Decimal("0.10")), "k")
        loaded = store.load("k")
        assert loaded.cash == Decimal("0.10")
        assert loaded.holdings == {}
        assert loaded.history == []

    def test_save_creates_directory(self, tmp_path):
        store = PortfolioStore(tmp_path / "nested" / "dir")
        path = store.save(Portfolio(cash=Decimal("1.00")), "k")
        assert path.is_file()
        assert store.exists("k")

    def test_save_overwrites(self, tmp_path):
        store = PortfolioStore(tmp_path)
        store.save(Portfolio(cash=Decimal("1.00")), "k")
        store.save(Portfolio(cash=Decimal("2.00")), "k")
        assert store.load("k").cash == Decimal("2.00")

    def test_dict_form_uses_strings_for_money(self):
        raw = portfolio_to_dict(make_traded_portfolio())
        assert raw["version"] == 1
        assert isinstance(raw["cash"], str)
        assert all(isinstance(t["price"], str) for t in raw["history"])
        assert portfolio_from_dict(raw).cash == Decimal(raw["cash"])


class TestFailures:
    """Tests for load failures."""

    def test_missing_key_not_found(self, tmp_path):
        store = PortfolioStore(tmp_path)
        with pytest.raises(PortfolioNotFoundError):
            store.load("portfolio_nobody")
        assert not store.exists("portfolio_nobody")

    def test_not_found_is_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PortfolioStore(tmp_path).load("missing")

    def test_garbage_file_is_storage_error(self, tmp_path):
        (tmp_path / "bad.yaml").write_text("cash: [unterminated", encoding="utf-8")
        with pytest.raises(StorageError):
            PortfolioStore(tmp_path).load("bad")

    def test_missing_field_is_storage_error(self, tmp_path):
        (tmp_path / "bad.yaml").write_text("holdings: {}\n", encoding="utf-8")
        with pytest.raises(StorageError):
            PortfolioStore(tmp_path).load("bad")

    def test_wrong_version_is_storage_error(self, tmp_path):
        (tmp_path / "old.yaml").write_text("version: 99\ncash: '1.00'\n", encoding="utf-8")
        with pytest.raises(StorageError):
            PortfolioStore(tmp_path).load("old")

    def test_holdings_list_is_storage_error(self, tmp_path):
        (tmp_path / "bad.yaml").write_text("cash: '1.00'\nholdings: [AAPL, 10]\n", encoding="utf-8")
        with pytest.raises(StorageError):
            PortfolioStore(tmp_path).load("bad")

    def test_document_list_is_storage_error(self, tmp_path):
        (tmp_path / "bad.yaml").write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(StorageError):
            PortfolioStore(tmp_path).load("bad")

    def test_storage_error_is_not_trade_error(self):
        assert not issubclass(StorageError, ValueError)

    @pytest.mark.parametrize("key", ["../escape", "a/b", "", "has space"])
    def test_unsafe_keys_rejected(self, tmp_path, key):
        with pytest.raises(ValueError):
            PortfolioStore(tmp_path).path_for(key)


class TestUser:
    """Tests for user naming and storage keys."""

    def test_save_key_sanitised(self):
        assert save_key("Jane Doe!") == "portfolio_Jane_Doe_"
        assert save_key("bob") == "portfolio_bob"

    def test_blank_name_defaults(self):
        u = User.new("   ", Decimal("10000"))
        assert u.username == "Trader"
        assert u.save_key == "portfolio_Trader"
        assert u.portfolio.cash == Decimal("10000.00")

    def test_loaded_history_keeps_timestamps(self, tmp_path):
        store = PortfolioStore(tmp_path)
        p = make_traded_portfolio()
        store.save(p, save_key("Jane Doe"))
        loaded = store.load(save_key("Jane Doe"))
        assert all(isinstance(t.timestamp, datetime) for t in loaded.history)
        assert [t.timestamp for t in loaded.history] == [t.timestamp for t in p.history]
