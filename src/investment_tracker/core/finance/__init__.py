"""Portfolio finance calculations.

Pure functions for money-weighted returns, projections and win/loss
statistics. No database access or I/O.

Usage:
    from investment_tracker.core.finance import calculate_xirr, calculate_projection
"""

from .projection import (
    DEFAULT_FALLBACK_RETURN,
    DEFAULT_INFLATION_RATE,
    calculate_projection,
    effective_annual_return,
)
from .returns import top_movers, win_loss_stats
from .xirr import calculate_xirr

__all__ = [
    "calculate_xirr",
    "calculate_projection",
    "effective_annual_return",
    "DEFAULT_FALLBACK_RETURN",
    "DEFAULT_INFLATION_RATE",
    "win_loss_stats",
    "top_movers",
]
