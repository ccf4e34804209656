"""Transaction commands (manual add, list)."""

import sqlite3
import sys

import pandas as pd
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from painel.config import Settings
from painel.dates import format_br_date, format_brl
from painel.domain.models import DEFAULT_PAYMENT_METHOD, Transaction, TransactionType, build_manual_transaction
from painel.store.queries import get_all_transactions, insert_transaction

console = Console()


def format_value_display(txn: Transaction) -> str:
    """Format a transaction value, green for revenue and red for expense."""
    color = "green" if txn.type is TransactionType.REVENUE else "red"
    return f"[{color}]{format_brl(txn.value)}[/{color}]"


def add_command(
    settings: Settings,
    date: str,
    type: str,
    category: str,
    value: float,
    description: str = "",
    payment_method: str = DEFAULT_PAYMENT_METHOD,
    attach: str | None = None,
) -> None:
    """Add a transaction manually.

    Args:
        settings: Application settings.
        date: Transaction date (YYYY-MM-DD, DD/MM/YYYY, or other formats).
        type: receita or despesa.
        category: Category name.
        value: Amount in reais.
        description: Optional description.
        payment_method: Payment method label (default PIX).
        attach: Optional receipt file; only its name is recorded.
    """
    try:
        # Normalize date using pandas
        parsed = pd.to_datetime(date, dayfirst=True)
        if pd.isna(parsed):
            raise ValueError(f"empty date '{date}'")
        when = parsed.to_pydatetime()
    except (ValueError, pd.errors.ParserError) as e:
        console.print(f"[red]Invalid date format: {escape(str(e))}[/red]")
        console.print("[dim]Accepted formats: YYYY-MM-DD, DD/MM/YYYY, DD-MM-YYYY, etc.[/dim]")
        sys.exit(1)

    txn, error = build_manual_transaction(
        when,
        type,
        category,
        value,
        description=description,
        payment_method=payment_method,
        attachment=attach,
    )
    if txn is None:
        console.print(f"[red]{escape(error or '')}[/red]", style="bold")
        sys.exit(1)

    try:
        txn_id = insert_transaction(settings.user, txn, settings.db_path)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print("[green]✓[/green] Transaction saved:")
    console.print(f"  ID: {txn_id}")
    console.print(f"  Date: {format_br_date(txn.date)}")
    console.print(f"  Type: {txn.type.value}")
    console.print(f"  Category: {escape(txn.category)}")
    console.print(f"  Value: {format_value_display(txn)}")
    console.print(f"  Payment method: {escape(txn.payment_method)}")
    if txn.description:
        console.print(f"  Description: {escape(txn.description)}")
    if txn.file_name:
        console.print(f"  Receipt: {escape(txn.file_name)}")


def render_transactions_table(transactions: list[Transaction], title: str) -> Table:
    """Build a rich table of transactions.

    Args:
        transactions: Transactions to show, in display order.
        title: Table title.

    Returns:
        The table, ready to print.
    """
    table = Table(title=title)
    table.add_column("Date", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Category", style="magenta")
    table.add_column("Value", justify="right")
    table.add_column("Receipt", style="dim")

    for txn in transactions:
        table.add_row(
            format_br_date(txn.date),
            escape(txn.description),
            escape(txn.category),
            format_value_display(txn),
            escape(txn.file_name or "N/A"),
        )

    return table


def list_command(
    settings: Settings,
    limit: int = 50,
    all: bool = False,
) -> None:
    """List transactions, newest first."""
    try:
        actual_limit = None if all else limit
        transactions = get_all_transactions(settings.user, settings.db_path, actual_limit)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    if not transactions:
        console.print("[yellow]No transactions found[/yellow]")
        return

    title = f"Transactions (showing all {len(transactions)})" if all else f"Transactions (showing {len(transactions)})"
    console.print(render_transactions_table(transactions, title))
