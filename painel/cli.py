"""CLI entry point for painel."""

import sys
import tomllib
from pathlib import Path

import typer
from rich.console import Console

from painel.commands.admin import init_command
from painel.commands.dashboard import dashboard_command
from painel.commands.importing import import_command
from painel.commands.transactions import add_command, list_command
from painel.config import Settings, get_config_path, load_settings
from painel.domain.models import DEFAULT_PAYMENT_METHOD, PeriodFilter
from painel.logging_setup import configure_logging

app = typer.Typer(
    name="painel",
    help="Painel financeiro - revenue and expense dashboard",
    add_completion=False,
)

console = Console()


def get_settings(ctx: typer.Context) -> Settings:
    """Settings loaded by the main callback."""
    return ctx.obj["settings"]


@app.callback()
def main(
    ctx: typer.Context,
    config: Path = typer.Option(None, "--config", help="Config file (default: XDG config dir)"),
    log_level: str = typer.Option(None, "--log-level", help="Logging level (e.g. INFO, DEBUG)"),
) -> None:
    """Painel financeiro - revenue and expense dashboard."""
    config_path = config or get_config_path()
    try:
        settings = load_settings(config_path)
    except (tomllib.TOMLDecodeError, ValueError) as e:
        console.print(f"[red]Invalid config {config_path}: {e}[/red]", style="bold")
        sys.exit(1)

    configure_logging(log_level, fallback=settings.log_level)
    ctx.obj = {"settings": settings, "config_path": config_path}


@app.command(name="init")
def init(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing database and config"),
) -> None:
    """Initialize painel database and configuration."""
    init_command(get_settings(ctx).db_path, force, ctx.obj["config_path"])


@app.command()
def add(
    ctx: typer.Context,
    date: str,
    type: str = typer.Argument(..., help="receita or despesa"),
    category: str = typer.Argument(..., help="Category, e.g. Dízimo or Aluguel"),
    value: float = typer.Argument(..., help="Amount in R$"),
    description: str = typer.Option("", "--description", "-d", help="Description"),
    payment_method: str = typer.Option(DEFAULT_PAYMENT_METHOD, "--payment-method", "-p", help="Payment method"),
    attach: str = typer.Option(None, "--attach", help="Receipt file to reference (only its name is kept)"),
) -> None:
    """Record a transaction manually."""
    add_command(get_settings(ctx), date, type, category, value, description, payment_method, attach)


@app.command(name="import")
def import_csv(
    ctx: typer.Context,
    file: str,
    type: str = typer.Option(..., "--type", "-t", help="Type of every row in the file: receita or despesa"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show parsed and skipped rows"),
) -> None:
    """Import transactions from a data_lançamento;Categoria;Valor em R$;descrição CSV."""
    import_command(get_settings(ctx), file, type, verbose)


@app.command()
def dashboard(
    ctx: typer.Context,
    period: PeriodFilter = typer.Option(None, "--period", help="Period (default from config)"),
    histogram: bool = typer.Option(True, help="Show histogram bars"),
) -> None:
    """Show totals, the monthly series and revenue by category."""
    dashboard_command(get_settings(ctx), period, histogram)


@app.command(name="list")
def list_transactions(
    ctx: typer.Context,
    limit: int = typer.Option(50, help="Maximum transactions to show"),
    all: bool = typer.Option(False, "--all", "-a", help="Show all your transactions"),
) -> None:
    """List your transactions, newest first."""
    list_command(get_settings(ctx), limit, all)


if __name__ == "__main__":
    app()
