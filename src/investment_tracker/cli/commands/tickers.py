"""Ticker (quote) commands: fetch and list."""

import typer
from rich.console import Console
from rich.table import Table

from ...core.config import get_config
from ...data.repositories.tickers_repo import TickersRepository
from ...data.repositories.transactions_repo import TransactionsRepository
from ...external.quote_fetcher import QuoteFetcher
from ...external.refresh import refresh_tickers
from ...external.sheet_source import SheetTickerSource

app = typer.Typer(help="Refresh and view quotes")
console = Console()
tickers_repo = TickersRepository()
tx_repo = TransactionsRepository()

SOURCES = ("sheet", "yahoo")


@app.command("fetch")
def fetch(
    source: str = typer.Option("sheet", "--source", "-s", help=f"Quote source: {', '.join(SOURCES)}"),
):
    """Refresh the quote snapshot. On failure the previous snapshot is kept."""
    if source not in SOURCES:
        console.print(f"[red]Invalid source. Choose from: {', '.join(SOURCES)}[/red]")
        raise typer.Exit(1)

    if source == "sheet":
        cfg = get_config()
        if not cfg.tickers_url:
            console.print("[red]No tickers URL. Run: itrack settings set tickers_url <url>[/red]")
            raise typer.Exit(1)
        fetcher = SheetTickerSource(cfg.tickers_url).fetch
    else:
        symbols = sorted({tx.key for tx in tx_repo.list_all()})
        if not symbols:
            console.print("[yellow]No transactions, nothing to quote[/yellow]")
            return
        console.print(f"Fetching quotes for {len(symbols)} symbols...")

        def fetcher():
            return QuoteFetcher.fetch_batch(symbols)

    snapshot, refreshed = refresh_tickers(fetcher, tickers_repo)
    if refreshed:
        console.print(f"[green]Stored {len(snapshot)} tickers[/green]")
    else:
        console.print(
            f"[yellow]Refresh failed; keeping previous snapshot ({len(snapshot)} tickers)[/yellow]"
        )


@app.command("list")
def list_tickers():
    """Show the stored quote snapshot."""
    tickers = tickers_repo.list_all()
    if not tickers:
        console.print("[yellow]No quotes. Run: itrack tickers fetch[/yellow]")
        return

    table = Table(title="Quotes")
    table.add_column("Symbol", style="bold")
    table.add_column("Name")
    table.add_column("Sector")
    table.add_column("Type")
    table.add_column("Price", justify="right")
    table.add_column("Prev Close", justify="right")
    table.add_column("52W Low", justify="right")
    table.add_column("52W High", justify="right")

    def opt(v):
        return f"{v:,.2f}" if v is not None else "—"

    for t in tickers:
        table.add_row(
            t.symbol, t.company_name or "—", t.sector or "—", t.asset_type or "—",
            f"{t.current_price:,.2f}", opt(t.previous_close), opt(t.low_52), opt(t.high_52),
        )
    console.print(table)
