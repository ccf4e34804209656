"""Dashboard command for viewing KPIs, the monthly series and categories."""

import sqlite3
import sys
from datetime import datetime

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from painel.commands.transactions import render_transactions_table
from painel.config import Settings
from painel.dates import format_brl, month_label
from painel.domain.aggregate import DashboardSummary, aggregate, calculate_histogram_bar_length
from painel.domain.models import PeriodFilter
from painel.store.queries import get_all_transactions

console = Console()

PERIOD_LABELS = {
    PeriodFilter.ALL_TIME: "All Time",
    PeriodFilter.THIS_YEAR: "This Year",
    PeriodFilter.THIS_MONTH: "This Month",
}

LATEST_ENTRIES = 10


def format_period_display(period: PeriodFilter, reference_now: datetime) -> str:
    """Human-readable title for a period.

    Args:
        period: Period filter.
        reference_now: Current date-time.

    Returns:
        Title such as "This Month (mar/2025)".
    """
    if period is PeriodFilter.THIS_YEAR:
        return f"{PERIOD_LABELS[period]} ({reference_now.year})"
    if period is PeriodFilter.THIS_MONTH:
        return f"{PERIOD_LABELS[period]} ({month_label(reference_now.month)}/{reference_now.year})"
    return PERIOD_LABELS[period]


def render_kpis(summary: DashboardSummary) -> None:
    """Render revenue, expense and balance cards."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Total Revenue", justify="right", style="green")
    table.add_column("Total Expense", justify="right", style="red")
    table.add_column("Balance", justify="right", style="blue")
    table.add_row(
        format_brl(summary.total_revenue),
        format_brl(summary.total_expense),
        format_brl(summary.balance),
    )
    console.print(table)


def render_monthly_series(summary: DashboardSummary, histogram: bool, bar_width: int = 20) -> None:
    """Render the 12-month revenue/expense series with optional bars."""
    table = Table(title=f"Revenue vs. Expense by Month ({summary.year})")
    table.add_column("Month", style="cyan")
    table.add_column("Revenue", justify="right", style="green")
    table.add_column("Expense", justify="right", style="red")
    if histogram:
        table.add_column("", no_wrap=True)

    max_amount = max((max(m.revenue, m.expense) for m in summary.monthly), default=0.0)

    for month in summary.monthly:
        row = [month_label(month.month), format_brl(month.revenue), format_brl(month.expense)]
        if histogram:
            revenue_bar = "█" * calculate_histogram_bar_length(month.revenue, max_amount, bar_width)
            expense_bar = "█" * calculate_histogram_bar_length(month.expense, max_amount, bar_width)
            row.append(f"[green]{revenue_bar}[/green]\n[red]{expense_bar}[/red]")
        table.add_row(*row)

    console.print(table)


def render_category_breakdown(summary: DashboardSummary, histogram: bool, bar_width: int = 30) -> None:
    """Render revenue by category."""
    if not summary.category_revenue:
        console.print("[dim]No revenue in this period[/dim]")
        return

    console.print("[bold green]Revenue by category:[/bold green]\n")
    max_amount = max(abs(amount) for amount in summary.category_revenue.values())

    for category, amount in summary.category_revenue.items():
        amount_display = format_brl(amount)
        if histogram:
            bar = "█" * calculate_histogram_bar_length(amount, max_amount, bar_width)
            console.print(f"  {escape(f'{category:20}')} {amount_display:>16} {bar}")
        else:
            console.print(f"  {escape(category)}: {amount_display}")
    console.print()


def dashboard_command(
    settings: Settings,
    period: PeriodFilter | None = None,
    histogram: bool = True,
) -> None:
    """Show KPIs, the monthly series, category breakdown and latest entries."""
    period = period or settings.default_period

    try:
        transactions = get_all_transactions(settings.user, settings.db_path)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    now = datetime.now()
    summary = aggregate(transactions, period, now)

    console.print(f"[bold cyan]{format_period_display(period, now)}[/bold cyan]\n")
    render_kpis(summary)
    console.print()
    render_monthly_series(summary, histogram)
    console.print()
    render_category_breakdown(summary, histogram)

    if summary.transactions:
        latest = summary.transactions[:LATEST_ENTRIES]
        console.print(render_transactions_table(latest, "Latest Entries"))
    else:
        console.print("[yellow]No transactions found[/yellow]")
