"""Tests for PortfolioCalculator."""

from datetime import datetime
from decimal import Decimal

import pytest

from investment_tracker.core.calculator import PortfolioCalculator
from investment_tracker.core.models import AllocationDimension, Ticker, Transaction, TransactionType


def _tx(symbol, tx_type, quantity, price, date):
    return Transaction(
        symbol=symbol,
        quantity=Decimal(str(quantity)),
        price=Decimal(str(price)),
        transaction_date=datetime.fromisoformat(date),
        transaction_type=TransactionType(tx_type),
    )


def _calculator(price, **kwargs):
    # 12 × 100 = 1200 invested in 2023, i.e. 100 a month
    txs = [_tx("INFY", "BUY", 12, 100, "2023-01-01")]
    tickers = [Ticker(symbol="INFY", current_price=Decimal(str(price)), sector="IT", asset_type="Stock")]
    return PortfolioCalculator(txs, tickers, as_of=datetime(2024, 1, 1), **kwargs)


class TestFacade:
    def test_holdings_and_summary_agree(self):
        calc = _calculator(110)
        [h] = calc.holdings()
        summary = calc.summary()
        assert summary.total_value == h.current_value == Decimal("1320")
        assert summary.total_cost == h.invested_value == Decimal("1200")
        assert summary.xirr == pytest.approx(10.0, abs=1e-4)

    def test_allocation(self):
        [item] = _calculator(110).allocation(AllocationDimension.SECTOR)
        assert item.name == "IT"
        assert item.percentage == Decimal("100")

    def test_analysis(self):
        calc = _calculator(110)
        [year] = calc.yearly_analysis()
        [month] = calc.monthly_analysis()
        assert year.average_monthly_investment == Decimal("100")
        assert month.month_key == "2023-01"
        assert year.asset_distribution[0].name == "Stock"

    def test_health_not_empty(self):
        health = _calculator(110).health()
        assert not health.is_empty
        assert health.total_score == sum(d.score for d in health.dimensions)

    def test_inputs_are_copied(self):
        txs = [_tx("INFY", "BUY", 1, 100, "2023-01-01")]
        calc = PortfolioCalculator(txs, [])
        txs.append(_tx("TCS", "BUY", 1, 100, "2023-01-01"))
        assert [h.symbol for h in calc.holdings()] == ["INFY"]

    def test_empty_ledger(self):
        calc = PortfolioCalculator([], [])
        assert calc.holdings() == []
        assert calc.health().is_empty
        assert calc.insights() == []
        assert calc.win_loss().total == 0


class TestProjection:
    def test_negative_xirr_falls_back_to_default(self):
        p = _calculator(90).projection(1, monthly_contribution=Decimal("0"))
        assert p.annual_return == Decimal("0.12")
        assert p.total_future_value == Decimal("1080") * Decimal("1.12")

    def test_configured_fallback(self):
        p = _calculator(90, fallback_return=Decimal("0.08")).projection(1, Decimal("0"))
        assert p.annual_return == Decimal("0.08")

    def test_positive_xirr_is_used(self):
        p = _calculator(110).projection(1, monthly_contribution=Decimal("0"))
        assert float(p.annual_return) == pytest.approx(0.10, abs=1e-6)

    def test_default_contribution_is_recent_monthly_average(self):
        p = _calculator(90).projection(1)
        assert p.total_invested == Decimal("1080") + Decimal("100") * 12

    def test_inflation_rate_passed_through(self):
        p = _calculator(90, inflation_rate=Decimal("0.12")).projection(1, Decimal("0"))
        assert p.present_value == Decimal("1080")


class TestSignals:
    def test_win_loss_and_movers(self):
        txs = [
            _tx("A", "BUY", 1, 100, "2023-01-01"),
            _tx("B", "BUY", 1, 100, "2023-01-01"),
        ]
        tickers = [
            Ticker(symbol="A", current_price=Decimal("120"), previous_close=Decimal("100")),
            Ticker(symbol="B", current_price=Decimal("95"), previous_close=Decimal("100")),
        ]
        calc = PortfolioCalculator(txs, tickers)
        stats = calc.win_loss()
        assert (stats.winners, stats.losers) == (1, 1)
        assert [h.symbol for h in calc.top_movers(limit=1)] == ["A"]

    def test_insights(self):
        calc = _calculator(140)
        ids = {i.id for i in calc.insights()}
        assert "concentration-INFY" in ids
        assert "sector-concentration-IT" in ids
