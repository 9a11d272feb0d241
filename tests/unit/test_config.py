"""Tests for core.config loading and saving."""

import json
from decimal import Decimal

import pytest

from investment_tracker.core.config import AppConfig, get_config, reset_config_cache, save_config


class TestGetConfig:
    def test_defaults_without_file(self):
        cfg = get_config()
        assert cfg.currency == "INR"
        assert cfg.show_currency_symbol is True
        assert cfg.privacy_mode is False
        assert cfg.forecast_years == 15
        assert cfg.inflation_rate == Decimal("0.06")
        assert cfg.fallback_return_rate == Decimal("0.12")

    def test_reads_file(self, isolated_config):
        isolated_config.write_text(json.dumps({
            "currency_symbol": "$",
            "privacy_mode": True,
            "forecast_years": 10,
            "inflation_rate": 0.05,
        }))
        cfg = get_config()
        assert cfg.currency_symbol == "$"
        assert cfg.privacy_mode is True
        assert cfg.forecast_years == 10
        assert cfg.inflation_rate == Decimal("0.05")
        assert cfg.fallback_return_rate == Decimal("0.12")

    def test_cached_until_reset(self, isolated_config):
        assert get_config().forecast_years == 15
        isolated_config.write_text(json.dumps({"forecast_years": 5}))
        assert get_config().forecast_years == 15
        reset_config_cache()
        assert get_config().forecast_years == 5

    def test_invalid_json_falls_back_to_defaults(self, isolated_config):
        isolated_config.write_text("{not json")
        assert get_config() == AppConfig()

    def test_non_positive_years_falls_back_to_defaults(self, isolated_config):
        isolated_config.write_text(json.dumps({"forecast_years": 0}))
        assert get_config().forecast_years == 15


class TestSaveConfig:
    def test_round_trip_through_file(self, isolated_config):
        save_config(AppConfig(user_name="Asha", privacy_mode=True, tickers_url="https://example.org/exec"))
        reset_config_cache()
        cfg = get_config()
        assert cfg.user_name == "Asha"
        assert cfg.privacy_mode is True
        assert cfg.tickers_url == "https://example.org/exec"
        assert json.loads(isolated_config.read_text())["forecast_years"] == 15

    def test_rejects_non_positive_years(self, isolated_config):
        with pytest.raises(ValueError, match="forecast_years"):
            save_config(AppConfig(forecast_years=-1))
        assert not isolated_config.exists()
