"""Yearly and monthly investment analysis of the ledger.

Only BUY transactions count as investment here: the view measures new
capital put to work, so sales are ignored. Periods without purchases are
left out entirely and results are ordered newest first.
"""

from datetime import date
from decimal import Decimal

from .holdings import sort_transactions, ticker_map
from .models import (
    OTHER,
    AllocationDimension,
    DistributionItem,
    MonthlyAnalysis,
    Ticker,
    Transaction,
    TransactionType,
    YearlyAnalysis,
)

ZERO = Decimal("0")
# Fixed divisor: the yearly figure reads as "if this pace continued all year"
MONTHS_PER_YEAR = 12


def _growth(current: Decimal, previous: Decimal) -> Decimal:
    if previous == 0:
        return ZERO
    return (current - previous) / previous * 100


def _distribution_name(tx: Transaction, quotes: dict[str, Ticker], dimension: AllocationDimension) -> str:
    ticker = quotes.get(tx.key)
    if ticker is None:
        return OTHER
    if dimension == AllocationDimension.SECTOR:
        return ticker.sector or OTHER
    return ticker.asset_type or OTHER


def _distribution(
    buys: list[Transaction], quotes: dict[str, Ticker], dimension: AllocationDimension
) -> list[DistributionItem]:
    totals: dict[str, Decimal] = {}
    for tx in buys:
        name = _distribution_name(tx, quotes, dimension)
        totals[name] = totals.get(name, ZERO) + tx.total_value
    invested = sum(totals.values(), ZERO)
    items = [
        DistributionItem(
            name=name,
            value=value,
            percentage=value / invested * 100 if invested > 0 else ZERO,
        )
        for name, value in sorted(totals.items())
    ]
    return sorted(items, key=lambda i: i.value, reverse=True)


def _group_buys(transactions: list[Transaction], key) -> dict:
    groups: dict = {}
    for tx in sort_transactions(transactions):
        if tx.transaction_type != TransactionType.BUY:
            continue
        groups.setdefault(key(tx), []).append(tx)
    return groups


def yearly_analysis(
    transactions: list[Transaction],
    tickers: list[Ticker],
    dimension: AllocationDimension = AllocationDimension.ASSET_TYPE,
) -> list[YearlyAnalysis]:
    """Per calendar year: investment, average monthly investment and growth.

    average_monthly_investment is the year's investment / 12 regardless of
    how many months saw purchases. percentage_increase compares it with the
    previous reported year (0 for the first year).

    Args:
        transactions: Full ledger, any order.
        tickers: Quote snapshot used to classify the distribution.
        dimension: SECTOR or ASSET_TYPE for asset_distribution.
    """
    quotes = ticker_map(tickers)
    groups = _group_buys(transactions, lambda tx: tx.transaction_date.year)

    analysis: list[YearlyAnalysis] = []
    previous = ZERO
    for year in sorted(groups):
        buys = groups[year]
        investment = sum((tx.total_value for tx in buys), ZERO)
        average = investment / MONTHS_PER_YEAR
        analysis.append(YearlyAnalysis(
            year=year,
            investment=investment,
            average_monthly_investment=average,
            percentage_increase=_growth(average, previous),
            asset_distribution=_distribution(buys, quotes, dimension),
        ))
        previous = average

    analysis.reverse()
    return analysis


def monthly_analysis(
    transactions: list[Transaction],
    tickers: list[Ticker],
    dimension: AllocationDimension = AllocationDimension.ASSET_TYPE,
) -> list[MonthlyAnalysis]:
    """Per calendar month: investment and growth versus the previous month with purchases."""
    quotes = ticker_map(tickers)
    groups = _group_buys(transactions, lambda tx: tx.transaction_date.strftime("%Y-%m"))

    analysis: list[MonthlyAnalysis] = []
    previous = ZERO
    for month_key in sorted(groups):
        buys = groups[month_key]
        investment = sum((tx.total_value for tx in buys), ZERO)
        year, month = (int(part) for part in month_key.split("-"))
        analysis.append(MonthlyAnalysis(
            month=date(year, month, 1).strftime("%b %Y"),
            month_key=month_key,
            investment=investment,
            percentage_increase=_growth(investment, previous),
            asset_distribution=_distribution(buys, quotes, dimension),
        ))
        previous = investment

    analysis.reverse()
    return analysis


def recent_monthly_investment(yearly: list[YearlyAnalysis]) -> Decimal:
    """Average monthly investment of the most recent year, 0 without history."""
    if not yearly:
        return ZERO
    return yearly[0].average_monthly_investment
