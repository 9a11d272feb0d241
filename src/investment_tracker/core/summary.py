"""Portfolio-level totals and money-weighted return."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from .finance.xirr import calculate_xirr
from .holdings import build_holdings, sort_transactions, total_value
from .models import CashFlow, Holding, PortfolioSummary, Ticker, Transaction, TransactionType


def average_cost_returns(
    transactions: list[Transaction],
    holdings: list[Holding],
) -> tuple[Decimal, Decimal]:
    """Realised and unrealised return against a running average buy price.

    A SELL realises (price - average buy price) x quantity. Open quantity
    never goes below zero, and the average resets once a position is closed.
    Unrealised return is the market value of what is still held minus its
    average-cost basis. Both are informational and independent of the
    net-invested total_cost.
    """
    quantities: dict[str, Decimal] = {}
    averages: dict[str, Decimal] = {}
    realized = Decimal("0")
    for tx in sort_transactions(transactions):
        qty = quantities.get(tx.key, Decimal("0"))
        avg = averages.get(tx.key, Decimal("0"))
        if tx.transaction_type == TransactionType.BUY:
            new_qty = qty + tx.quantity
            averages[tx.key] = (qty * avg + tx.total_value) / new_qty
            quantities[tx.key] = new_qty
        else:
            realized += (tx.price - avg) * tx.quantity
            quantities[tx.key] = max(Decimal("0"), qty - tx.quantity)
            if qty - tx.quantity <= 0:
                averages[tx.key] = Decimal("0")

    prices = {h.symbol: h.current_price for h in holdings}
    unrealized = Decimal("0")
    for symbol, qty in quantities.items():
        if qty > 0:
            avg = averages[symbol]
            unrealized += qty * (prices.get(symbol, avg) - avg)
    return realized, unrealized


def calculate_summary(
    transactions: list[Transaction],
    tickers: list[Ticker],
    as_of: Optional[datetime] = None,
) -> PortfolioSummary:
    """Total value, net invested capital, profit and XIRR.

    total_cost is net capital invested (BUY notional minus SELL notional at
    transaction price). total_value is the market value of open holdings.
    For XIRR, each BUY is an outflow and each SELL an inflow on its date;
    a synthetic inflow of total_value dated `as_of` (default: now) stands for
    liquidating everything today. That flow is never part of the ledger.
    Realised and unrealised return come from average_cost_returns.
    """
    holdings = build_holdings(transactions, tickers)
    value = total_value(holdings)

    cost = Decimal("0")
    flows: list[CashFlow] = []
    for tx in sort_transactions(transactions):
        if tx.transaction_type == TransactionType.BUY:
            cost += tx.total_value
            flows.append(CashFlow(amount=-float(tx.total_value), date=tx.transaction_date))
        else:
            cost -= tx.total_value
            flows.append(CashFlow(amount=float(tx.total_value), date=tx.transaction_date))

    if value > 0:
        flows.append(CashFlow(amount=float(value), date=as_of or datetime.now()))

    profit = value - cost
    profit_pct = profit / cost * 100 if cost > 0 else Decimal("0")

    day_change = sum((h.day_change for h in holdings), Decimal("0"))
    prior_value = value - day_change
    day_change_pct = day_change / prior_value * 100 if prior_value > 0 else Decimal("0")
    realized, unrealized = average_cost_returns(transactions, holdings)

    return PortfolioSummary(
        total_value=value,
        total_cost=cost,
        profit_amount=profit,
        profit_percentage=profit_pct,
        xirr=calculate_xirr(flows),
        day_change=day_change,
        day_change_percentage=day_change_pct,
        realized_return=realized,
        unrealized_return=unrealized,
    )
