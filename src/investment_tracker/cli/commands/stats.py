"""Statistics commands."""

from decimal import Decimal, InvalidOperation

import typer
from rich.console import Console
from rich.table import Table

from ...core.allocation import SORT_KEYS, sort_allocation
from ...core.calculator import PortfolioCalculator
from ...core.config import get_config
from ...core.insights import count_by_category
from ...core.models import AllocationDimension, InsightCategory
from ...data.repositories.tickers_repo import TickersRepository
from ...data.repositories.transactions_repo import TransactionsRepository
from ..formatting import MASK, format_money, format_percent, pnl_color

app = typer.Typer(help="Portfolio statistics")
console = Console()
tickers_repo = TickersRepository()
tx_repo = TransactionsRepository()

DIMENSIONS = {
    "sector": AllocationDimension.SECTOR,
    "company": AllocationDimension.COMPANY,
    "type": AllocationDimension.ASSET_TYPE,
    "broker": AllocationDimension.BROKER,
}


def _calculator() -> PortfolioCalculator:
    cfg = get_config()
    return PortfolioCalculator(
        tx_repo.list_all(),
        tickers_repo.list_all(),
        inflation_rate=cfg.inflation_rate,
        fallback_return=cfg.fallback_return_rate,
    )


def _dimension(name: str) -> AllocationDimension:
    if name not in DIMENSIONS:
        console.print(f"[red]Invalid dimension. Choose from: {', '.join(DIMENSIONS)}[/red]")
        raise typer.Exit(1)
    return DIMENSIONS[name]


@app.command("summary")
def summary():
    """Show portfolio value, invested capital, profit and XIRR."""
    cfg = get_config()
    calc = _calculator()
    if not calc.transactions:
        console.print("[yellow]No transactions. Add some first.[/yellow]")
        return
    s = calc.summary()

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Label", style="dim")
    table.add_column("Value", justify="right")

    color = pnl_color(s.profit_amount)
    day_color = pnl_color(s.day_change)
    table.add_row("Invested (net)", format_money(s.total_cost, cfg))
    table.add_row("[bold]Current Value[/bold]", f"[bold]{format_money(s.total_value, cfg)}[/bold]")
    table.add_row(
        "Profit",
        f"[{color}]{format_money(s.profit_amount, cfg)} "
        f"({format_percent(s.profit_percentage, cfg, signed=True)})[/{color}]",
    )
    table.add_row("XIRR", format_percent(Decimal(str(s.xirr)), cfg, signed=True))
    table.add_row(
        "Day Change",
        f"[{day_color}]{format_money(s.day_change, cfg)} "
        f"({format_percent(s.day_change_percentage, cfg, signed=True)})[/{day_color}]",
    )
    table.add_row("Realized", f"[{pnl_color(s.realized_return)}]{format_money(s.realized_return, cfg)}[/]")
    table.add_row("Unrealized", f"[{pnl_color(s.unrealized_return)}]{format_money(s.unrealized_return, cfg)}[/]")

    console.print("\n[bold]Portfolio Summary[/bold]\n")
    console.print(table)
    console.print()


@app.command("holdings")
def holdings():
    """Show open positions with P&L and weight."""
    cfg = get_config()
    rows = _calculator().holdings()
    if not rows:
        console.print("[yellow]No open positions.[/yellow]")
        return

    table = Table(title="Holdings")
    table.add_column("Symbol", style="bold")
    table.add_column("Name")
    table.add_column("Qty", justify="right")
    table.add_column("Avg", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Invested", justify="right")
    table.add_column("Value", justify="right")
    table.add_column("P&L", justify="right")
    table.add_column("Day", justify="right")
    table.add_column("Weight", justify="right")

    for h in rows:
        color = pnl_color(h.pnl)
        table.add_row(
            h.symbol,
            h.company_name,
            MASK if cfg.privacy_mode else f"{h.quantity:,.4f}",
            format_money(h.avg_price, cfg),
            format_money(h.current_price, cfg),
            format_money(h.invested_value, cfg),
            format_money(h.current_value, cfg),
            f"[{color}]{format_money(h.pnl, cfg)} ({format_percent(h.pnl_percentage, cfg, signed=True)})[/{color}]",
            format_percent(h.day_change_percentage, cfg, signed=True),
            format_percent(h.contribution_percentage, cfg),
        )
    console.print(table)


@app.command("allocation")
def allocation(
    dimension: str = typer.Argument("sector", help=f"Group by: {', '.join(DIMENSIONS)}"),
    sort_by: str = typer.Option("value", "--sort", help=f"Sort by: {', '.join(SORT_KEYS)}"),
):
    """Show allocation by sector, company, asset type or broker."""
    cfg = get_config()
    dim = _dimension(dimension)
    if sort_by not in SORT_KEYS:
        console.print(f"[red]Invalid sort key. Choose from: {', '.join(SORT_KEYS)}[/red]")
        raise typer.Exit(1)
    items = sort_allocation(_calculator().allocation(dim), by=sort_by)
    if not items:
        console.print("[yellow]No open positions.[/yellow]")
        return

    table = Table(title=f"Allocation by {dim.value}")
    table.add_column(dim.value, style="bold")
    table.add_column("Value", justify="right")
    table.add_column("Invested", justify="right")
    table.add_column("P&L", justify="right")
    table.add_column("Alloc %", justify="right")

    for item in items:
        color = pnl_color(item.pnl)
        table.add_row(
            item.name,
            format_money(item.value, cfg),
            format_money(item.total_cost, cfg),
            f"[{color}]{format_money(item.pnl, cfg)} "
            f"({format_percent(item.pnl_percentage, cfg, signed=True)})[/{color}]",
            format_percent(item.percentage, cfg),
        )
    console.print(table)


def _distribution_text(items, cfg) -> str:
    return ", ".join(f"{d.name} {format_percent(d.percentage, cfg)}" for d in items[:3])


@app.command("yearly")
def yearly(
    dimension: str = typer.Option("type", "--by", help="Distribution by: sector, type"),
):
    """Show investment per year, newest first."""
    cfg = get_config()
    dim = _dimension(dimension)
    rows = _calculator().yearly_analysis(dim)
    if not rows:
        console.print("[yellow]No purchases yet.[/yellow]")
        return

    table = Table(title="Yearly Investment")
    table.add_column("Year", style="bold")
    table.add_column("Invested", justify="right")
    table.add_column("Avg / Month", justify="right")
    table.add_column("Change", justify="right")
    table.add_column("Distribution")
    for y in rows:
        table.add_row(
            str(y.year),
            format_money(y.investment, cfg),
            format_money(y.average_monthly_investment, cfg),
            format_percent(y.percentage_increase, cfg, signed=True),
            _distribution_text(y.asset_distribution, cfg),
        )
    console.print(table)


@app.command("monthly")
def monthly(
    dimension: str = typer.Option("type", "--by", help="Distribution by: sector, type"),
):
    """Show investment per month, newest first."""
    cfg = get_config()
    dim = _dimension(dimension)
    rows = _calculator().monthly_analysis(dim)
    if not rows:
        console.print("[yellow]No purchases yet.[/yellow]")
        return

    table = Table(title="Monthly Investment")
    table.add_column("Month", style="bold")
    table.add_column("Invested", justify="right")
    table.add_column("Change", justify="right")
    table.add_column("Distribution")
    for m in rows:
        table.add_row(
            m.month,
            format_money(m.investment, cfg),
            format_percent(m.percentage_increase, cfg, signed=True),
            _distribution_text(m.asset_distribution, cfg),
        )
    console.print(table)


@app.command("health")
def health():
    """Show the 0–100 portfolio health score."""
    result = _calculator().health()
    if result.is_empty:
        console.print("[yellow]No open positions to score.[/yellow]")
        return

    colors = {"Excellent": "green", "Good": "cyan", "Fair": "yellow", "Poor": "red"}
    color = colors[result.grade]
    console.print(
        f"\n[bold]Portfolio Health:[/bold] [{color}]{result.total_score}/100 ({result.grade})[/{color}]\n"
    )
    table = Table()
    table.add_column("Dimension", style="bold")
    table.add_column("Score", justify="right")
    table.add_column("Why")
    for d in result.dimensions:
        table.add_row(d.label, f"{d.score}/{d.max_score}", d.description)
    console.print(table)


@app.command("forecast")
def forecast(
    years: int = typer.Option(None, "--years", "-y", help="Horizon in years (default from settings)"),
    monthly: str = typer.Option(None, "--monthly", "-m", help="Monthly contribution (default: recent pace)"),
):
    """Project the portfolio forward at the measured XIRR."""
    cfg = get_config()
    years = years or cfg.forecast_years
    if years <= 0:
        console.print("[red]Years must be a positive integer[/red]")
        raise typer.Exit(1)
    contribution = None
    if monthly is not None:
        try:
            contribution = Decimal(monthly)
        except InvalidOperation:
            console.print(f"[red]Invalid monthly contribution: {monthly}[/red]")
            raise typer.Exit(1)

    p = _calculator().projection(years, contribution)

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Label", style="dim")
    table.add_column("Value", justify="right")
    table.add_row("Assumed return", format_percent(p.annual_return * 100, cfg))
    table.add_row("Invested", format_money(p.total_invested, cfg, decimals=0))
    table.add_row("[bold]Future value[/bold]", f"[bold]{format_money(p.total_future_value, cfg, decimals=0)}[/bold]")
    table.add_row("Gains", format_money(p.estimated_gains, cfg, decimals=0))
    table.add_row("Multiplier", f"{p.multiplier:.2f}×")
    table.add_row(
        f"In today's money ({format_percent(cfg.inflation_rate * 100, cfg)} inflation)",
        format_money(p.present_value, cfg, decimals=0),
    )
    console.print(f"\n[bold]Forecast ({years}Y)[/bold]\n")
    console.print(table)
    console.print()


@app.command("insights")
def insights(
    category: str = typer.Option(None, "--category", "-c", help="Buy, Sell/Hold or Observe"),
):
    """Show actionable insights, most urgent first."""
    items = _calculator().insights()
    if category:
        try:
            wanted = InsightCategory(category)
        except ValueError:
            console.print("[red]Category must be one of: Buy, Sell/Hold, Observe[/red]")
            raise typer.Exit(1)
        items = [i for i in items if i.category == wanted]
    if not items:
        console.print("[green]Nothing to act on.[/green]")
        return

    counts = count_by_category(items)
    console.print(
        "  ".join(f"[bold]{c.value}[/bold]: {n}" for c, n in counts.items() if n)
    )
    table = Table()
    table.add_column("Category")
    table.add_column("Badge", style="bold")
    table.add_column("Name")
    table.add_column("Metric", justify="right")
    table.add_column("Why")
    for i in items:
        table.add_row(i.category.value, i.badge, i.title, i.value, i.reason)
    console.print(table)


@app.command("winloss")
def winloss():
    """Show how many positions are in profit versus loss."""
    cfg = get_config()
    stats = _calculator().win_loss()
    if stats.total == 0:
        console.print("[yellow]No open positions.[/yellow]")
        return
    console.print(f"\n[bold]Win rate:[/bold] {format_percent(stats.win_rate, cfg)}")
    console.print(f"  [green]{stats.winners} winners  {format_money(stats.winners_profit, cfg)}[/green]")
    console.print(f"  [red]{stats.losers} losers   {format_money(stats.losers_loss, cfg)}[/red]\n")


@app.command("movers")
def movers(limit: int = typer.Option(8, "--limit", "-n", help="Number of holdings")):
    """Show today's biggest movers."""
    cfg = get_config()
    rows = _calculator().top_movers(limit)
    if not rows:
        console.print("[yellow]No open positions.[/yellow]")
        return
    table = Table(title="Top Movers")
    table.add_column("Symbol", style="bold")
    table.add_column("Name")
    table.add_column("Day %", justify="right")
    table.add_column("Day", justify="right")
    for h in rows:
        color = pnl_color(h.day_change)
        table.add_row(
            h.symbol, h.company_name,
            f"[{color}]{format_percent(h.day_change_percentage, cfg, signed=True)}[/{color}]",
            format_money(h.day_change, cfg),
        )
    console.print(table)
