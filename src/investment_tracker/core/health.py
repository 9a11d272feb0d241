"""Portfolio health score: four 25-point dimensions summed to 0-100."""

from decimal import Decimal

from .models import OTHER, HealthDimension, Holding, PortfolioHealth, PortfolioSummary

# (lower bound, points); the first bound the metric reaches wins
CONCENTRATION_POINTS = [(Decimal("40"), 3), (Decimal("25"), 10), (Decimal("15"), 18)]
HOLDING_COUNT_POINTS = [(15, 15), (8, 12), (4, 8)]
SECTOR_COUNT_POINTS = [(5, 10), (3, 7), (2, 4)]
PROFIT_POINTS = [(30, 25), (15, 20), (5, 14), (0, 8)]
XIRR_POINTS = [(20, 25), (12, 20), (8, 14), (0, 7)]

GRADES = [(80, "Excellent"), (60, "Good"), (40, "Fair")]

MAX_DIMENSION_SCORE = 25


def _points(metric, table, default: int) -> int:
    for bound, points in table:
        if metric >= bound:
            return points
    return default


def grade_for(score: int) -> str:
    return next((grade for bound, grade in GRADES if score >= bound), "Poor")


def _concentration(holdings: list[Holding]) -> HealthDimension:
    top = max(h.contribution_percentage for h in holdings)
    score = _points(top, CONCENTRATION_POINTS, MAX_DIMENSION_SCORE)
    if score == MAX_DIMENSION_SCORE:
        desc = f"No single stock dominates; largest position is {top:.0f}%."
    elif score == 18:
        desc = f"Largest position is {top:.0f}%. Acceptable."
    elif score == 10:
        desc = f"{top:.0f}% in one stock. Consider trimming."
    else:
        desc = f"{top:.0f}% in one stock. High risk."
    return HealthDimension(label="Concentration", score=score, description=desc)


def _diversification(holdings: list[Holding]) -> HealthDimension:
    holding_count = len(holdings)
    sector_count = len({h.sector or OTHER for h in holdings})
    score = min(
        MAX_DIMENSION_SCORE,
        _points(holding_count, HOLDING_COUNT_POINTS, 3) + _points(sector_count, SECTOR_COUNT_POINTS, 1),
    )
    plural = "" if sector_count == 1 else "s"
    desc = f"{holding_count} stocks across {sector_count} sector{plural}."
    return HealthDimension(label="Diversification", score=score, description=desc)


def _profitability(profit_pct: Decimal) -> HealthDimension:
    score = _points(profit_pct, PROFIT_POINTS, 2)
    descriptions = {
        25: f"Outstanding {profit_pct:.1f}% overall return.",
        20: f"Strong {profit_pct:.1f}% overall return.",
        14: f"Decent {profit_pct:.1f}% overall return.",
        8: f"Slightly positive at {profit_pct:.1f}%.",
        2: f"Portfolio is {profit_pct:.1f}% in the red.",
    }
    return HealthDimension(label="Profitability", score=score, description=descriptions[score])


def _xirr_quality(xirr: float) -> HealthDimension:
    score = _points(xirr, XIRR_POINTS, 1)
    descriptions = {
        25: f"Exceptional XIRR of {xirr:.1f}%.",
        20: f"Great XIRR of {xirr:.1f}%, beating most benchmarks.",
        14: f"Solid XIRR of {xirr:.1f}%.",
        7: f"Low XIRR of {xirr:.1f}%. Room to improve.",
        1: f"Negative XIRR of {xirr:.1f}%.",
    }
    return HealthDimension(label="XIRR Quality", score=score, description=descriptions[score])


def score_portfolio_health(holdings: list[Holding], summary: PortfolioSummary) -> PortfolioHealth:
    """Score concentration, diversification, profitability and XIRR.

    Thresholds are inclusive of the lower bound of the better bucket.
    With no holdings the result is the empty sentinel (is_empty=True,
    score 0, grade "Poor"); check is_empty before treating 0 as a real score.
    """
    if not holdings:
        return PortfolioHealth()

    dimensions = [
        _concentration(holdings),
        _diversification(holdings),
        _profitability(summary.profit_percentage),
        _xirr_quality(summary.xirr),
    ]
    total = sum(d.score for d in dimensions)
    return PortfolioHealth(
        total_score=total,
        grade=grade_for(total),
        dimensions=dimensions,
        is_empty=False,
    )
