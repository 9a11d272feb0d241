"""Settings commands: show and change config.json values."""

import dataclasses
from decimal import Decimal, InvalidOperation

import typer
from rich.console import Console
from rich.table import Table

from ...core.config import AppConfig, get_config, save_config

app = typer.Typer(help="Display and forecast settings")
console = Console()

_BOOL_VALUES = {"true": True, "on": True, "1": True, "false": False, "off": False, "0": False}


def _parse(field: dataclasses.Field, raw: str):
    current = getattr(AppConfig(), field.name)
    if isinstance(current, bool):
        if raw.lower() not in _BOOL_VALUES:
            raise ValueError(f"{field.name} expects on/off")
        return _BOOL_VALUES[raw.lower()]
    if isinstance(current, int):
        value = int(raw)
        if value <= 0:
            raise ValueError(f"{field.name} must be a positive integer")
        return value
    if isinstance(current, Decimal):
        try:
            return Decimal(raw)
        except InvalidOperation:
            raise ValueError(f"{field.name} expects a number, got {raw}")
    return raw


@app.command("show")
def show():
    """Print the current settings."""
    cfg = get_config()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="dim")
    table.add_column("Value")
    for f in dataclasses.fields(cfg):
        table.add_row(f.name, str(getattr(cfg, f.name)))
    console.print(table)


@app.command("set")
def set_value(
    key: str = typer.Argument(..., help="Setting name (see: itrack settings show)"),
    value: str = typer.Argument(..., help="New value"),
):
    """Change one setting."""
    fields = {f.name: f for f in dataclasses.fields(AppConfig)}
    if key not in fields:
        console.print(f"[red]Unknown setting {key}. Choose from: {', '.join(fields)}[/red]")
        raise typer.Exit(1)
    try:
        parsed = _parse(fields[key], value)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    save_config(dataclasses.replace(get_config(), **{key: parsed}))
    console.print(f"[green]{key} = {parsed}[/green]")
