"""Display helpers: currency symbol toggle and privacy masking.

These only shape strings. Computed values are never altered, so toggling
a display setting cannot change any number the core produces.
"""

from decimal import Decimal

from ..core.config import AppConfig

MASK = "****"


def format_money(value: Decimal, cfg: AppConfig, decimals: int = 2) -> str:
    if cfg.privacy_mode:
        return MASK
    symbol = cfg.currency_symbol if cfg.show_currency_symbol else ""
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.{decimals}f}"


def format_percent(value, cfg: AppConfig, signed: bool = False) -> str:
    if cfg.privacy_mode:
        return MASK
    return f"{value:+.2f}%" if signed else f"{value:.2f}%"


def pnl_color(value) -> str:
    return "green" if value >= 0 else "red"
