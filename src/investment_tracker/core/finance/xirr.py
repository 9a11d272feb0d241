"""Money-weighted annualized return (XIRR) via Newton-Raphson.

Works on floats: the discount factor needs fractional powers, and the
result is an estimate anyway. Callers convert Decimal amounts on the way in.
"""

import math

from ..models import CashFlow

MAX_ITERATIONS = 100
PRECISION = 1e-6
INITIAL_GUESS = 0.1
DAYS_PER_YEAR = 365


def _year_fraction(flow: CashFlow, origin: CashFlow) -> float:
    return (flow.date - origin.date).total_seconds() / 86400 / DAYS_PER_YEAR


def calculate_xirr(cash_flows: list[CashFlow]) -> float:
    """Annualized internal rate of return of dated cash flows.

    Negative amounts are money invested, positive amounts money returned.
    The first flow's date is the time origin; flows are NOT re-sorted, so
    callers must pass them in chronological order.

    Newton-Raphson starting at 10%, stopping when successive rates differ by
    less than 1e-6 or after 100 iterations (best effort, the last rate is
    returned). A zero derivative, a rate at or below -100% or a non-finite
    iterate stops the search and yields the last finite rate.

    Args:
        cash_flows: CashFlow records in chronological order.

    Returns:
        Rate as a percentage (e.g. 10.0 for 10% p.a.). 0.0 for fewer than
        two flows.
    """
    if len(cash_flows) < 2:
        return 0.0

    origin = cash_flows[0]
    fractions = [_year_fraction(cf, origin) for cf in cash_flows]
    rate = INITIAL_GUESS

    for _ in range(MAX_ITERATIONS):
        f = 0.0
        df = 0.0
        try:
            for cf, t in zip(cash_flows, fractions):
                term = (1 + rate) ** t
                f += cf.amount / term
                df -= cf.amount * t / (term * (1 + rate))
        except (OverflowError, ZeroDivisionError):
            break

        if df == 0 or not math.isfinite(f) or not math.isfinite(df):
            break

        next_rate = rate - f / df
        if not math.isfinite(next_rate) or next_rate <= -1:
            break
        if abs(next_rate - rate) < PRECISION:
            return next_rate * 100
        rate = next_rate

    return rate * 100
