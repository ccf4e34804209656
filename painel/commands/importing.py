"""Import command for bulk-loading transactions from a CSV export."""

import sqlite3
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from painel.config import Settings
from painel.dates import format_br_date, format_brl
from painel.domain.importer import (
    CSV_PAYMENT_METHOD,
    REQUIRED_COLUMNS,
    CsvImportError,
    ImportResult,
    InvalidHeaderError,
    NoValidRowsError,
    SkippedRow,
    UnreadableFileError,
    parse_csv,
)
from painel.domain.models import TransactionType
from painel.store.queries import insert_transactions

console = Console()


def read_csv_source(path: Path, encoding: str = "utf-8") -> str:
    """Read a CSV export as text.

    Args:
        path: File to read.
        encoding: Text encoding of the file.

    Returns:
        Decoded file content.

    Raises:
        UnreadableFileError: If the file is not a .csv or cannot be read/decoded.
    """
    if path.suffix.lower() != ".csv":
        raise UnreadableFileError(str(path), "not a .csv file")

    try:
        with open(path, encoding=encoding, newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise UnreadableFileError(str(path), str(e)) from e


def render_skipped_rows(skipped: list[SkippedRow]) -> None:
    """Render a table of rows that were not imported.

    Args:
        skipped: Skipped row diagnostics.
    """
    table = Table(title="Skipped rows", show_header=True, header_style="bold yellow")
    table.add_column("Line", justify="right", style="dim")
    table.add_column("Reason")
    table.add_column("Content", style="dim")

    for row in skipped:
        table.add_row(str(row.line_number), escape(row.reason), escape(row.line[:60]))

    console.print(table)


def render_import_preview(result: ImportResult, limit: int = 5) -> None:
    """Show the first parsed transactions."""
    table = Table(title=f"Parsed transactions (first {min(limit, len(result.transactions))})")
    table.add_column("Date", style="cyan")
    table.add_column("Category", style="magenta")
    table.add_column("Description")
    table.add_column("Value", justify="right")

    for txn in result.transactions[:limit]:
        table.add_row(format_br_date(txn.date), escape(txn.category), escape(txn.description), format_brl(txn.value))

    console.print(table)


def import_command(
    settings: Settings,
    file: str,
    type: str,
    verbose: bool = False,
) -> None:
    """Parse a CSV export and store its transactions in one batch."""
    try:
        declared_type = TransactionType.parse(type)
    except ValueError:
        console.print(f"[red]Invalid type '{escape(type)}' (use receita or despesa)[/red]", style="bold")
        sys.exit(1)

    path = Path(file).expanduser()

    try:
        raw_text = read_csv_source(path)
        result = parse_csv(raw_text, declared_type)
    except InvalidHeaderError as e:
        console.print(f"[red]{escape(str(e))}[/red]", style="bold")
        console.print(f"[dim]Expected header: {';'.join(REQUIRED_COLUMNS)}[;descrição][/dim]")
        sys.exit(1)
    except NoValidRowsError as e:
        console.print(f"[red]{escape(str(e))}[/red]", style="bold")
        if verbose and e.skipped:
            render_skipped_rows(e.skipped)
        sys.exit(1)
    except CsvImportError as e:
        console.print(f"[red]{escape(str(e))}[/red]", style="bold")
        sys.exit(1)

    if verbose:
        render_import_preview(result)

    try:
        ids = insert_transactions(settings.user, result.transactions, settings.db_path)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        console.print("[dim]Nothing was imported. Run 'painel init' if the database is missing.[/dim]")
        sys.exit(1)

    console.print(
        f"[green]✓[/green] {len(ids)} {declared_type.value} transactions imported "
        f"[dim](payment method: {CSV_PAYMENT_METHOD})[/dim]"
    )

    if result.skipped:
        console.print(f"[yellow]Skipped {len(result.skipped)} invalid rows[/yellow]")
        if verbose:
            render_skipped_rows(result.skipped)
