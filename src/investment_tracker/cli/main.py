"""Investment Tracker CLI: main entry point."""

import logging

import typer

from ..data.database import get_db
from .commands import settings, stats, tickers, transactions

app = typer.Typer(
    name="itrack",
    help="Personal investment tracker: valuation, XIRR, allocation and portfolio health",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

app.add_typer(transactions.app, name="tx", help="Add, edit, remove and import transactions")
app.add_typer(tickers.app, name="tickers", help="Refresh & view quotes")
app.add_typer(stats.app, name="stats", help="Portfolio analytics")
app.add_typer(settings.app, name="settings", help="Display and forecast settings")


@app.callback()
def startup(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output")):
    """Initialize logging and the database on first run."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    get_db()


if __name__ == "__main__":
    app()
