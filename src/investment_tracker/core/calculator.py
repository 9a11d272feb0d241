"""Portfolio analytics over an explicit (transactions, tickers) state."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from .allocation import allocation_by
from .analysis import monthly_analysis, recent_monthly_investment, yearly_analysis
from .finance.projection import (
    DEFAULT_FALLBACK_RETURN,
    DEFAULT_INFLATION_RATE,
    calculate_projection,
    effective_annual_return,
)
from .finance.returns import top_movers, win_loss_stats
from .health import score_portfolio_health
from .holdings import build_holdings
from .insights import generate_insights
from .models import (
    AllocationDimension,
    AllocationItem,
    Holding,
    Insight,
    MonthlyAnalysis,
    PortfolioHealth,
    PortfolioSummary,
    Projection,
    Ticker,
    Transaction,
    WinLossStats,
    YearlyAnalysis,
)
from .summary import calculate_summary


class PortfolioCalculator:
    """Every getter recomputes from the inputs; nothing is cached.

    The calculator holds no mutable state of its own, so it is safe to share
    between threads. Build a new one when the ledger or quotes change.
    """

    def __init__(
        self,
        transactions: list[Transaction],
        tickers: list[Ticker],
        as_of: Optional[datetime] = None,
        inflation_rate: Decimal = DEFAULT_INFLATION_RATE,
        fallback_return: Decimal = DEFAULT_FALLBACK_RETURN,
    ):
        self.transactions = list(transactions)
        self.tickers = list(tickers)
        self.as_of = as_of
        self.inflation_rate = inflation_rate
        self.fallback_return = fallback_return

    def holdings(self) -> list[Holding]:
        return build_holdings(self.transactions, self.tickers)

    def summary(self) -> PortfolioSummary:
        return calculate_summary(self.transactions, self.tickers, as_of=self.as_of)

    def allocation(self, dimension: AllocationDimension) -> list[AllocationItem]:
        return allocation_by(self.holdings(), dimension)

    def yearly_analysis(
        self, dimension: AllocationDimension = AllocationDimension.ASSET_TYPE
    ) -> list[YearlyAnalysis]:
        return yearly_analysis(self.transactions, self.tickers, dimension)

    def monthly_analysis(
        self, dimension: AllocationDimension = AllocationDimension.ASSET_TYPE
    ) -> list[MonthlyAnalysis]:
        return monthly_analysis(self.transactions, self.tickers, dimension)

    def health(self) -> PortfolioHealth:
        return score_portfolio_health(self.holdings(), self.summary())

    def projection(
        self, years: int, monthly_contribution: Optional[Decimal] = None
    ) -> Projection:
        """Project today's value forward at the measured XIRR.

        Falls back to the configured default return when XIRR is not
        positive. Without an explicit contribution, the most recent year's
        average monthly investment is assumed to continue.
        """
        summary = self.summary()
        if monthly_contribution is None:
            monthly_contribution = recent_monthly_investment(self.yearly_analysis())
        return calculate_projection(
            summary.total_value,
            effective_annual_return(summary.xirr, self.fallback_return),
            monthly_contribution,
            years,
            inflation_rate=self.inflation_rate,
        )

    def insights(self) -> list[Insight]:
        return generate_insights(self.holdings())

    def win_loss(self) -> WinLossStats:
        return win_loss_stats(self.holdings())

    def top_movers(self, limit: int = 8) -> list[Holding]:
        return top_movers(self.holdings(), limit)
