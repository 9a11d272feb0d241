"""Transaction commands: add, edit, remove, list, import."""

import csv
import dataclasses
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ...core.exceptions import InvalidTransactionError, TransactionNotFoundError
from ...core.models import Transaction, TransactionType
from ...data.repositories.transactions_repo import TransactionsRepository

app = typer.Typer(help="Record transactions")
console = Console()
tx_repo = TransactionsRepository()

CSV_COLUMNS = ("symbol", "quantity", "price", "date", "type")


def _decimal(raw: str, label: str) -> Decimal:
    try:
        return Decimal(raw)
    except InvalidOperation:
        console.print(f"[red]Invalid number for {label}: {raw}[/red]")
        raise typer.Exit(1)


def _date(raw: Optional[str]) -> datetime:
    if not raw:
        return datetime.now()
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        console.print("[red]Invalid date format. Use YYYY-MM-DD[/red]")
        raise typer.Exit(1)


def _tx_type(raw: str) -> TransactionType:
    try:
        return TransactionType(raw.upper())
    except ValueError:
        console.print("[red]Type must be BUY or SELL[/red]")
        raise typer.Exit(1)


@app.command("add")
def add(
    symbol: str = typer.Argument(..., help="Instrument symbol (e.g. INFY)"),
    quantity: str = typer.Argument(..., help="Number of units"),
    price: str = typer.Argument(..., help="Price per unit"),
    tx_type: str = typer.Option("BUY", "--type", "-t", help="BUY or SELL"),
    date: str = typer.Option(None, "--date", "-d", help="Transaction date (YYYY-MM-DD)"),
    broker: str = typer.Option("", "--broker", "-b", help="Broker label"),
    currency: str = typer.Option("INR", "--currency", "-c", help="Currency code"),
):
    """Record a buy or sell transaction."""
    tx = Transaction(
        symbol=symbol,
        quantity=_decimal(quantity, "quantity"),
        price=_decimal(price, "price"),
        transaction_date=_date(date),
        transaction_type=_tx_type(tx_type),
        currency=currency.upper(),
        broker=broker,
    )
    try:
        tx = tx_repo.create(tx)
    except InvalidTransactionError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    action = "Bought" if tx.transaction_type == TransactionType.BUY else "Sold"
    console.print(
        f"[green]{action} {tx.quantity} × {tx.symbol} @ {tx.price:,.2f} = "
        f"{tx.total_value:,.2f} {tx.currency}[/green] (ID: {tx.id})"
    )


@app.command("edit")
def edit(
    tx_id: int = typer.Argument(..., help="Transaction ID"),
    symbol: str = typer.Option(None, "--symbol", "-s", help="New symbol"),
    quantity: str = typer.Option(None, "--quantity", "-q", help="New quantity"),
    price: str = typer.Option(None, "--price", "-p", help="New price"),
    tx_type: str = typer.Option(None, "--type", "-t", help="BUY or SELL"),
    date: str = typer.Option(None, "--date", "-d", help="New date (YYYY-MM-DD)"),
    broker: str = typer.Option(None, "--broker", "-b", help="New broker label"),
):
    """Edit a transaction. Unspecified fields keep their current value."""
    tx = tx_repo.get_by_id(tx_id)
    if not tx:
        console.print(f"[red]Transaction {tx_id} not found[/red]")
        raise typer.Exit(1)

    changes: dict = {}
    if symbol is not None:
        changes["symbol"] = symbol
    if quantity is not None:
        changes["quantity"] = _decimal(quantity, "quantity")
    if price is not None:
        changes["price"] = _decimal(price, "price")
    if tx_type is not None:
        changes["transaction_type"] = _tx_type(tx_type)
    if date is not None:
        changes["transaction_date"] = _date(date)
    if broker is not None:
        changes["broker"] = broker

    try:
        tx = tx_repo.update(dataclasses.replace(tx, **changes))
    except (InvalidTransactionError, TransactionNotFoundError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Updated transaction {tx.id}[/green]")


@app.command("remove")
def remove(tx_id: int = typer.Argument(..., help="Transaction ID")):
    """Delete a transaction."""
    if not tx_repo.delete(tx_id):
        console.print(f"[red]Transaction {tx_id} not found[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Removed transaction {tx_id}[/green]")


@app.command("list")
def list_transactions(
    symbol: str = typer.Option(None, "--symbol", "-s", help="Only this symbol"),
):
    """List transactions, oldest first."""
    txs = tx_repo.list_by_symbol(symbol) if symbol else tx_repo.list_all()
    if not txs:
        console.print("[yellow]No transactions. Add one with: itrack tx add[/yellow]")
        return

    table = Table(title="Transactions")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Date")
    table.add_column("Type")
    table.add_column("Symbol", style="bold")
    table.add_column("Qty", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Broker")

    for tx in txs:
        color = "green" if tx.transaction_type == TransactionType.BUY else "red"
        table.add_row(
            str(tx.id),
            tx.transaction_date.strftime("%Y-%m-%d"),
            f"[{color}]{tx.transaction_type.value}[/{color}]",
            tx.symbol,
            f"{tx.quantity:,.4f}",
            f"{tx.price:,.2f}",
            f"{tx.total_value:,.2f}",
            tx.broker or "—",
        )

    console.print(table)


def read_transactions_csv(path: Path) -> list[Transaction]:
    """Parse a CSV with columns symbol, quantity, price, date, type[, currency, broker]."""
    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        missing = [c for c in CSV_COLUMNS if c not in (reader.fieldnames or [])]
        if missing:
            raise ValueError(f"Missing CSV columns: {', '.join(missing)}")
        rows = []
        for line_no, row in enumerate(reader, start=2):
            try:
                rows.append(Transaction(
                    symbol=row["symbol"],
                    quantity=Decimal(row["quantity"]),
                    price=Decimal(row["price"]),
                    transaction_date=datetime.fromisoformat(row["date"]),
                    transaction_type=TransactionType(row["type"].strip().upper()),
                    currency=(row.get("currency") or "INR").upper(),
                    broker=row.get("broker") or "",
                ))
            except (InvalidOperation, ValueError) as e:
                raise ValueError(f"Line {line_no}: {e}") from e
    return rows


@app.command("import")
def import_csv(
    path: Path = typer.Argument(..., help="CSV file: symbol,quantity,price,date,type[,currency,broker]"),
):
    """Append transactions from a CSV file. Nothing is stored if any row is invalid."""
    if not path.exists():
        console.print(f"[red]Error:[/red] File not found: {path}")
        raise typer.Exit(1)
    try:
        count = tx_repo.import_many(read_transactions_csv(path))
    except (ValueError, InvalidTransactionError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    console.print(f"[green]Imported {count} transactions from {path.name}[/green]")
