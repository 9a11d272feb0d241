"""Application configuration, loaded from config.json at project root.

Display toggles (currency symbol, privacy mode) only change how numbers are
printed; the forecast settings feed the projection calculator.
"""

import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Optional

from .finance.projection import DEFAULT_FALLBACK_RETURN, DEFAULT_INFLATION_RATE

logger = logging.getLogger(__name__)


@dataclass
class AppConfig:
    currency: str = "INR"
    currency_symbol: str = "₹"
    show_currency_symbol: bool = True
    privacy_mode: bool = False
    forecast_years: int = 15
    inflation_rate: Decimal = DEFAULT_INFLATION_RATE
    fallback_return_rate: Decimal = DEFAULT_FALLBACK_RETURN
    tickers_url: str = ""
    user_name: str = ""


_DEFAULTS = AppConfig()
_cached: Optional[AppConfig] = None


def _config_path() -> Path:
    from ..data.database import _find_project_root
    return _find_project_root() / "config.json"


def _positive_years(value) -> int:
    years = int(value)
    if years <= 0:
        raise ValueError(f"forecast_years must be a positive integer, got {value}")
    return years


def get_config() -> AppConfig:
    global _cached
    if _cached is not None:
        return _cached
    path = _config_path()
    if not path.exists():
        _cached = AppConfig()
        return _cached
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        _cached = AppConfig(
            currency=data.get("currency", _DEFAULTS.currency),
            currency_symbol=data.get("currency_symbol", _DEFAULTS.currency_symbol),
            show_currency_symbol=bool(data.get("show_currency_symbol", True)),
            privacy_mode=bool(data.get("privacy_mode", False)),
            forecast_years=_positive_years(data.get("forecast_years", _DEFAULTS.forecast_years)),
            inflation_rate=Decimal(str(data.get("inflation_rate", _DEFAULTS.inflation_rate))),
            fallback_return_rate=Decimal(
                str(data.get("fallback_return_rate", _DEFAULTS.fallback_return_rate))
            ),
            tickers_url=data.get("tickers_url", ""),
            user_name=data.get("user_name", ""),
        )
    except (ValueError, ArithmeticError, OSError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        _cached = AppConfig()
    return _cached


def save_config(cfg: AppConfig) -> None:
    global _cached
    _positive_years(cfg.forecast_years)
    _cached = cfg
    data = {
        "currency": cfg.currency,
        "currency_symbol": cfg.currency_symbol,
        "show_currency_symbol": cfg.show_currency_symbol,
        "privacy_mode": cfg.privacy_mode,
        "forecast_years": cfg.forecast_years,
        "inflation_rate": float(cfg.inflation_rate),
        "fallback_return_rate": float(cfg.fallback_return_rate),
        "tickers_url": cfg.tickers_url,
        "user_name": cfg.user_name,
    }
    _config_path().write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def reset_config_cache() -> None:
    global _cached
    _cached = None
