"""Tests for core.insights."""

from decimal import Decimal

from investment_tracker.core.insights import count_by_category, generate_insights
from investment_tracker.core.models import Holding, InsightCategory


def _holding(symbol, pnl_pct=0, weight=10, sector=None, price=100, low=None, high=None):
    return Holding(
        symbol=symbol,
        company_name=f"{symbol} Ltd",
        quantity=Decimal("1"),
        avg_price=Decimal("100"),
        current_price=Decimal(str(price)),
        invested_value=Decimal("100"),
        current_value=Decimal(str(price)),
        pnl=Decimal("0"),
        pnl_percentage=Decimal(str(pnl_pct)),
        contribution_percentage=Decimal(str(weight)),
        sector=sector or f"Sector-{symbol}",
        low_52=Decimal(str(low)) if low is not None else None,
        high_52=Decimal(str(high)) if high is not None else None,
    )


def _ids(insights):
    return {i.id for i in insights}


class TestSellHold:
    def test_concentration(self):
        [insight] = generate_insights([_holding("BIG", weight=28)])
        assert insight.id == "concentration-BIG"
        assert insight.category == InsightCategory.SELL_HOLD
        assert insight.title == "BIG Ltd"
        assert insight.value == "28.0% holding"

    def test_concentration_beats_profit_taking(self):
        insights = generate_insights([_holding("BIG", pnl_pct=45, weight=26)])
        assert _ids(insights) == {"concentration-BIG"}

    def test_profit_taking(self):
        assert _ids(generate_insights([_holding("WIN", pnl_pct=31)])) == {"profit-WIN"}

    def test_tax_loss_only_for_small_positions(self):
        small = generate_insights([_holding("LOSS", pnl_pct=-20, weight=5)])
        assert "tax-loss-LOSS" in _ids(small)
        large = generate_insights([_holding("LOSS", pnl_pct=-20, weight=20)])
        assert "tax-loss-LOSS" not in _ids(large)

    def test_thresholds_are_strict(self):
        assert generate_insights([_holding("EDGE", pnl_pct=30, weight=25)]) == []


class TestBuy:
    def test_dca_below_average_cost(self):
        insights = generate_insights([_holding("DIP", pnl_pct=-12, weight=20)])
        assert _ids(insights) == {"dca-DIP"}
        assert insights[0].category == InsightCategory.BUY
        assert insights[0].severity == Decimal("12")

    def test_near_52_week_low(self):
        insights = generate_insights([_holding("LOWY", price=101, low=100)])
        assert _ids(insights) == {"low52-LOWY"}
        assert insights[0].value == "1.0% above low"

    def test_dca_takes_precedence_over_low(self):
        insights = generate_insights([_holding("DIP", pnl_pct=-12, weight=20, price=100, low=100)])
        assert _ids(insights) == {"dca-DIP"}

    def test_missing_low_is_skipped(self):
        assert generate_insights([_holding("X", price=100)]) == []


class TestObserve:
    def test_near_52_week_high(self):
        insights = generate_insights([_holding("HI", price=99, high=100)])
        assert _ids(insights) == {"high52-HI"}
        assert insights[0].category == InsightCategory.OBSERVE

    def test_sector_concentration(self):
        book = [
            _holding("A", weight=20, sector="IT"),
            _holding("B", weight=15, sector="IT"),
            _holding("C", weight=20, sector="Banking"),
        ]
        [insight] = generate_insights(book)
        assert insight.id == "sector-concentration-IT"
        assert insight.title == "IT Sector"
        assert insight.symbol is None
        assert insight.severity == Decimal("35")


class TestOrdering:
    def test_sorted_by_severity(self):
        book = [
            _holding("A", pnl_pct=40, weight=10),
            _holding("B", weight=60),
            _holding("C", pnl_pct=-11, weight=10),
        ]
        severities = [i.severity for i in generate_insights(book)]
        assert severities == sorted(severities, reverse=True)
        assert generate_insights(book)[0].id == "concentration-B"

    def test_empty(self):
        assert generate_insights([]) == []


class TestCountByCategory:
    def test_counts_every_category(self):
        book = [_holding("A", pnl_pct=40), _holding("B", pnl_pct=-12), _holding("C", price=99, high=100)]
        counts = count_by_category(generate_insights(book))
        assert counts == {
            InsightCategory.BUY: 1,
            InsightCategory.SELL_HOLD: 1,
            InsightCategory.OBSERVE: 1,
        }

    def test_no_insights(self):
        assert set(count_by_category([]).values()) == {0}
