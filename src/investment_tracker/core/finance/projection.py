"""Compounding projection of the current portfolio plus a monthly contribution."""

from decimal import Decimal

from ..models import Projection

# Assumed yearly inflation used to express the projection in today's money
DEFAULT_INFLATION_RATE = Decimal("0.06")
# Used instead of a measured return that is zero or negative. This is a
# product decision: projections never show flat or shrinking wealth.
DEFAULT_FALLBACK_RETURN = Decimal("0.12")

MONTHS_PER_YEAR = 12


def effective_annual_return(
    xirr_pct: float, fallback: Decimal = DEFAULT_FALLBACK_RETURN
) -> Decimal:
    """Turn a measured XIRR (percent) into the fraction used for projecting.

    Returns the fallback rate when the XIRR is zero or negative.
    """
    if xirr_pct <= 0:
        return fallback
    return Decimal(str(xirr_pct)) / 100


def calculate_projection(
    current_value: Decimal,
    annual_return: Decimal,
    monthly_contribution: Decimal,
    years: int,
    inflation_rate: Decimal = DEFAULT_INFLATION_RATE,
) -> Projection:
    """Project the portfolio value after `years` years.

    Compounding convention:
      - the current value compounds annually: V0 × (1 + r)^N
      - contributions are paid at the end of each month and grow at the
        equivalent monthly rate i = (1 + r)^(1/12) − 1, so both legs earn the
        same effective annual rate r:
            M × ((1 + i)^(12N) − 1) / i     (M × 12N when i is 0)

    Args:
        current_value: Portfolio value today (V0).
        annual_return: Annual rate as a fraction (0.12 = 12%).
        monthly_contribution: Amount invested every month (M).
        years: Horizon in whole years (N).
        inflation_rate: Yearly inflation used for present_value.

    Returns:
        Projection. multiplier is FV / V0, or 0 when V0 is 0.
    """
    one = Decimal("1")
    months = years * MONTHS_PER_YEAR
    growth = (one + annual_return) ** years

    principal_fv = current_value * growth

    monthly_rate = (one + annual_return) ** (one / MONTHS_PER_YEAR) - one
    if monthly_contribution <= 0:
        contributions_fv = Decimal("0")
    elif monthly_rate == 0:
        contributions_fv = monthly_contribution * months
    else:
        contributions_fv = (
            monthly_contribution * ((one + monthly_rate) ** months - one) / monthly_rate
        )

    total_fv = principal_fv + contributions_fv
    total_invested = current_value + monthly_contribution * months
    multiplier = total_fv / current_value if current_value > 0 else Decimal("0")
    present_value = total_fv / (one + inflation_rate) ** years

    return Projection(
        total_future_value=total_fv,
        total_invested=total_invested,
        estimated_gains=total_fv - total_invested,
        multiplier=multiplier,
        present_value=present_value,
        annual_return=annual_return,
        years=years,
    )
