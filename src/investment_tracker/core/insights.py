"""Rule-based buy / sell-hold / observe signals over open holdings."""

from decimal import Decimal

from .models import OTHER, Holding, Insight, InsightCategory

CONCENTRATION_LIMIT = Decimal("25")
PROFIT_TAKING_PCT = Decimal("30")
TAX_LOSS_PCT = Decimal("-15")
TAX_LOSS_MAX_WEIGHT = Decimal("15")
DCA_PCT = Decimal("-10")
NEAR_LOW_FACTOR = Decimal("1.02")
NEAR_HIGH_FACTOR = Decimal("0.98")
SECTOR_LIMIT = Decimal("30")


class _InsightList:
    """Collects insights, allowing a symbol once per category."""

    def __init__(self):
        self.items: list[Insight] = []
        self._seen: set[tuple[InsightCategory, str]] = set()

    def can_add(self, category: InsightCategory, symbol: str) -> bool:
        return (category, symbol) not in self._seen

    def add(self, insight: Insight) -> None:
        self.items.append(insight)
        if insight.symbol:
            self._seen.add((insight.category, insight.symbol))


def _title(h: Holding) -> str:
    return h.company_name or h.symbol


def _sell_hold(h: Holding, out: _InsightList) -> None:
    cat = InsightCategory.SELL_HOLD
    weight = h.contribution_percentage
    if weight > CONCENTRATION_LIMIT:
        out.add(Insight(
            id=f"concentration-{h.symbol}", category=cat, title=_title(h),
            reason=f"This stock makes up {weight:.1f}% of your portfolio. "
                   "Consider trimming to reduce concentration risk.",
            badge="High Concentration", value=f"{weight:.1f}% holding",
            severity=weight, symbol=h.symbol, pnl_percentage=h.pnl_percentage,
        ))
    if h.pnl_percentage > PROFIT_TAKING_PCT and out.can_add(cat, h.symbol):
        out.add(Insight(
            id=f"profit-{h.symbol}", category=cat, title=_title(h),
            reason=f"Up {h.pnl_percentage:.1f}% from your average buy price. "
                   "Consider booking partial profits.",
            badge="Profit Taking", value=f"+{h.pnl_percentage:.1f}% gain",
            severity=h.pnl_percentage, symbol=h.symbol, pnl_percentage=h.pnl_percentage,
        ))
    if (h.pnl_percentage < TAX_LOSS_PCT and weight < TAX_LOSS_MAX_WEIGHT
            and out.can_add(cat, h.symbol)):
        out.add(Insight(
            id=f"tax-loss-{h.symbol}", category=cat, title=_title(h),
            reason=f"Down {abs(h.pnl_percentage):.1f}% overall. Selling may let you "
                   "harvest a tax loss to offset gains elsewhere.",
            badge="Tax-Loss Harvest", value=f"{h.pnl_percentage:.1f}% loss",
            severity=abs(h.pnl_percentage), symbol=h.symbol, pnl_percentage=h.pnl_percentage,
        ))


def _buy(h: Holding, out: _InsightList) -> None:
    cat = InsightCategory.BUY
    if h.pnl_percentage < DCA_PCT and out.can_add(cat, h.symbol):
        below = abs(h.pnl_percentage)
        out.add(Insight(
            id=f"dca-{h.symbol}", category=cat, title=_title(h),
            reason=f"Trading {below:.1f}% below your average cost. "
                   "Averaging down can reduce your cost basis.",
            badge="DCA Opportunity", value=f"{h.pnl_percentage:.1f}% below avg",
            severity=below, symbol=h.symbol, pnl_percentage=h.pnl_percentage,
        ))
    if h.low_52 and h.current_price <= h.low_52 * NEAR_LOW_FACTOR and out.can_add(cat, h.symbol):
        above_low = (h.current_price - h.low_52) / h.low_52 * 100
        out.add(Insight(
            id=f"low52-{h.symbol}", category=cat, title=_title(h),
            reason=f"Only {above_low:.1f}% above its 52-week low, "
                   "a potential long-term entry point.",
            badge="Near 52W Low", value=f"{above_low:.1f}% above low",
            severity=2 - above_low, symbol=h.symbol, pnl_percentage=h.pnl_percentage,
        ))


def _observe(h: Holding, out: _InsightList) -> None:
    if h.high_52 and h.current_price >= h.high_52 * NEAR_HIGH_FACTOR:
        below_high = (h.high_52 - h.current_price) / h.high_52 * 100
        out.add(Insight(
            id=f"high52-{h.symbol}", category=InsightCategory.OBSERVE, title=_title(h),
            reason=f"Just {below_high:.1f}% below its 52-week high. "
                   "Watch for a breakout or potential pullback.",
            badge="Near 52W High", value=f"{below_high:.1f}% below high",
            severity=2 - below_high, symbol=h.symbol, pnl_percentage=h.pnl_percentage,
        ))


def _sector_concentration(holdings: list[Holding], out: _InsightList) -> None:
    totals: dict[str, Decimal] = {}
    for h in holdings:
        sector = h.sector or OTHER
        totals[sector] = totals.get(sector, Decimal("0")) + h.contribution_percentage
    for sector, pct in sorted(totals.items()):
        if pct > SECTOR_LIMIT:
            out.add(Insight(
                id=f"sector-concentration-{sector}", category=InsightCategory.OBSERVE,
                title=f"{sector} Sector",
                reason=f"{pct:.1f}% of your portfolio is in {sector}. "
                       "Consider diversifying to reduce sector-specific risk.",
                badge="Sector Risk", value=f"{pct:.1f}% of portfolio", severity=pct,
            ))


def generate_insights(holdings: list[Holding]) -> list[Insight]:
    """Build actionable insights, most urgent (highest severity) first.

    A symbol appears at most once per category; within Sell/Hold the
    concentration rule takes precedence over profit taking, which takes
    precedence over tax-loss harvesting.
    """
    out = _InsightList()
    if not holdings:
        return out.items

    for h in holdings:
        _sell_hold(h, out)
    for h in holdings:
        _buy(h, out)
    for h in holdings:
        _observe(h, out)
    _sector_concentration(holdings, out)

    return sorted(out.items, key=lambda i: i.severity, reverse=True)


def count_by_category(insights: list[Insight]) -> dict[InsightCategory, int]:
    counts = {category: 0 for category in InsightCategory}
    for insight in insights:
        counts[insight.category] += 1
    return counts
