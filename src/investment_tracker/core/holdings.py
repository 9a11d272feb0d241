"""Fold the transaction ledger into per-instrument positions."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .models import OTHER, Holding, Ticker, Transaction, TransactionType

ZERO = Decimal("0")


def sort_transactions(transactions: list[Transaction]) -> list[Transaction]:
    """Chronological order. Stable: equal timestamps keep insertion order."""
    return sorted(transactions, key=lambda t: t.transaction_date)


def ticker_map(tickers: list[Ticker]) -> dict[str, Ticker]:
    """Index tickers by normalised (stripped, uppercased) symbol."""
    return {t.key: t for t in tickers}


def _pct(part: Decimal, whole: Decimal) -> Decimal:
    if whole <= 0:
        return ZERO
    return part / whole * 100


@dataclass
class _Position:
    symbol: str
    quantity: Decimal = ZERO
    invested: Decimal = ZERO
    last_price: Decimal = ZERO
    broker: str = ""


def _fold(transactions: list[Transaction]) -> dict[str, _Position]:
    positions: dict[str, _Position] = {}
    for tx in sort_transactions(transactions):
        pos = positions.setdefault(tx.key, _Position(symbol=tx.key))
        if tx.transaction_type == TransactionType.BUY:
            pos.quantity += tx.quantity
            pos.invested += tx.total_value
        else:
            # Net capital invested, not lot accounting: a sale takes its
            # proceeds at transaction price out of the invested amount.
            pos.quantity -= tx.quantity
            pos.invested -= tx.total_value
        pos.last_price = tx.price
        pos.broker = tx.broker
    return positions


def _build(pos: _Position, ticker: Optional[Ticker]) -> Holding:
    current_price = ticker.current_price if ticker is not None else pos.last_price
    previous_close = ticker.previous_close if ticker is not None else None
    close = previous_close if previous_close else current_price

    avg_price = pos.invested / pos.quantity
    current_value = pos.quantity * current_price
    pnl = current_value - pos.invested
    day_change = pos.quantity * (current_price - close)

    return Holding(
        symbol=pos.symbol,
        company_name=(ticker.company_name if ticker else "") or pos.symbol,
        quantity=pos.quantity,
        avg_price=avg_price,
        current_price=current_price,
        invested_value=pos.invested,
        current_value=current_value,
        pnl=pnl,
        pnl_percentage=_pct(pnl, pos.invested),
        day_change=day_change,
        day_change_percentage=_pct(day_change, pos.quantity * close),
        asset_type=(ticker.asset_type if ticker else "") or OTHER,
        sector=(ticker.sector if ticker else "") or OTHER,
        broker=pos.broker or OTHER,
        previous_close=previous_close,
        high_52=ticker.high_52 if ticker else None,
        low_52=ticker.low_52 if ticker else None,
        logo=ticker.logo if ticker else None,
    )


def build_holdings(transactions: list[Transaction], tickers: list[Ticker]) -> list[Holding]:
    """Derive one Holding per symbol that is still held.

    Symbols whose net quantity is zero or negative (fully exited or
    oversold) are excluded, so every consumer of this list (allocation,
    health, insights) only ever sees open positions.

    Cost basis is the net capital invested: BUY adds quantity × price, SELL
    subtracts quantity × price. This is simpler than brokerage lot
    accounting, and pnl on partially sold positions differs from it.

    A symbol with no ticker is valued at its last transaction price, so it
    reports flat P&L. A missing or zero previous close reports no day change.

    Args:
        transactions: Full ledger, any order.
        tickers: Latest quote snapshot.

    Returns:
        Holdings sorted by current value, largest first (symbol on ties).
    """
    quotes = ticker_map(tickers)
    holdings = [
        _build(pos, quotes.get(key))
        for key, pos in _fold(transactions).items()
        if pos.quantity > 0
    ]

    total = sum((h.current_value for h in holdings), ZERO)
    for h in holdings:
        h.contribution_percentage = _pct(h.current_value, total)

    holdings.sort(key=lambda h: h.symbol)
    holdings.sort(key=lambda h: h.current_value, reverse=True)
    return holdings


def total_value(holdings: list[Holding]) -> Decimal:
    return sum((h.current_value for h in holdings), ZERO)
