"""Tests for core.finance.returns.

Tests the module-level functions directly (not via PortfolioCalculator).
"""

from decimal import Decimal

from investment_tracker.core.finance.returns import top_movers, win_loss_stats
from investment_tracker.core.models import Holding


def _holding(symbol, pnl, day_change_pct=0):
    return Holding(
        symbol=symbol,
        company_name=symbol,
        quantity=Decimal("1"),
        avg_price=Decimal("100"),
        current_price=Decimal("100") + Decimal(str(pnl)),
        invested_value=Decimal("100"),
        current_value=Decimal("100") + Decimal(str(pnl)),
        pnl=Decimal(str(pnl)),
        pnl_percentage=Decimal(str(pnl)),
        day_change_percentage=Decimal(str(day_change_pct)),
    )


class TestWinLossStats:
    def test_mixed(self):
        holdings = [
            _holding("A", 50),   # winner
            _holding("B", 0),    # flat counts as a winner
            _holding("C", -20),  # loser
            _holding("D", 10),   # winner
        ]
        stats = win_loss_stats(holdings)
        assert stats.winners == 3
        assert stats.losers == 1
        assert stats.winners_profit == Decimal("60")
        assert stats.losers_loss == Decimal("-20")
        assert stats.total == 4
        assert stats.win_rate == Decimal("75")

    def test_all_losers(self):
        stats = win_loss_stats([_holding("A", -5), _holding("B", -1)])
        assert stats.winners == 0
        assert stats.win_rate == 0

    def test_empty(self):
        stats = win_loss_stats([])
        assert stats.total == 0
        assert stats.win_rate == Decimal("0")


class TestTopMovers:
    def test_ranked_by_absolute_change(self):
        holdings = [
            _holding("UP", 0, day_change_pct=2.5),
            _holding("DOWN", 0, day_change_pct=-4),
            _holding("FLAT", 0, day_change_pct=0),
        ]
        assert [h.symbol for h in top_movers(holdings)] == ["DOWN", "UP", "FLAT"]

    def test_limit(self):
        holdings = [_holding(f"S{i}", 0, day_change_pct=i) for i in range(12)]
        movers = top_movers(holdings, limit=3)
        assert [h.symbol for h in movers] == ["S11", "S10", "S9"]

    def test_default_limit_is_eight(self):
        holdings = [_holding(f"S{i}", 0, day_change_pct=i) for i in range(12)]
        assert len(top_movers(holdings)) == 8
