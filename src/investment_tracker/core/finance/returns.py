"""Win/loss and daily-mover statistics over open holdings.

All functions are pure: they accept Holding objects and return new values.
"""

from decimal import Decimal

from ..models import Holding, WinLossStats


def win_loss_stats(holdings: list[Holding]) -> WinLossStats:
    """Count winning (pnl >= 0) and losing positions and sum their P&L.

    Args:
        holdings: Output of build_holdings.

    Returns:
        WinLossStats with win_rate in percent (0 for no holdings).
    """
    winners = [h for h in holdings if h.pnl >= 0]
    losers = [h for h in holdings if h.pnl < 0]
    total = len(holdings)
    return WinLossStats(
        winners=len(winners),
        losers=len(losers),
        winners_profit=sum((h.pnl for h in winners), Decimal("0")),
        losers_loss=sum((h.pnl for h in losers), Decimal("0")),
        total=total,
        win_rate=Decimal(len(winners)) / total * 100 if total else Decimal("0"),
    )


def top_movers(holdings: list[Holding], limit: int = 8) -> list[Holding]:
    """Holdings with the largest absolute day change percentage, biggest first."""
    return sorted(holdings, key=lambda h: abs(h.day_change_percentage), reverse=True)[:limit]
