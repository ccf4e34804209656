"""Pure functions for dashboard aggregation.

This module contains the functional core for the dashboard:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

Amounts are floats in reais, summed with math.fsum.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable

from painel.domain.models import CategoryName, PeriodFilter, Transaction, TransactionType


@dataclass(frozen=True)
class MonthlyTotals:
    """Immutable revenue/expense totals for one calendar month."""

    month: int  # 1-12
    revenue: float = 0.0
    expense: float = 0.0


@dataclass(frozen=True)
class DashboardSummary:
    """Immutable dashboard data for a period."""

    period: PeriodFilter
    year: int
    total_revenue: float
    total_expense: float
    balance: float
    monthly: list[MonthlyTotals]
    category_revenue: dict[CategoryName, float]
    transactions: list[Transaction]


def in_period(txn_date: date, period: PeriodFilter, reference_now: datetime) -> bool:
    """Check whether a date falls inside a period window.

    Args:
        txn_date: Date to test.
        period: Period filter.
        reference_now: The current date-time the window is anchored on.

    Returns:
        True if the date is inside the window.
    """
    if period is PeriodFilter.THIS_YEAR:
        return txn_date.year == reference_now.year
    if period is PeriodFilter.THIS_MONTH:
        return txn_date.year == reference_now.year and txn_date.month == reference_now.month
    return True


def filter_transactions(
    transactions: Iterable[Transaction],
    period: PeriodFilter,
    reference_now: datetime,
) -> list[Transaction]:
    """Keep the transactions that fall inside a period, preserving order.

    Transactions without a valid date are always dropped.
    """
    return [txn for txn in transactions if isinstance(txn.date, date) and in_period(txn.date, period, reference_now)]


def sum_by_type(transactions: Iterable[Transaction], txn_type: TransactionType) -> float:
    """Sum the values of all transactions of one type."""
    return math.fsum(txn.value for txn in transactions if txn.type is txn_type)


def build_monthly_series(transactions: Iterable[Transaction], year: int) -> list[MonthlyTotals]:
    """Build the 12-month revenue/expense series for a year.

    Args:
        transactions: Transactions with valid dates.
        year: Calendar year of the series.

    Returns:
        Exactly 12 MonthlyTotals, January first.
    """
    revenue: dict[int, list[float]] = {month: [] for month in range(1, 13)}
    expense: dict[int, list[float]] = {month: [] for month in range(1, 13)}

    for txn in transactions:
        if not isinstance(txn.date, date) or txn.date.year != year:
            continue
        bucket = revenue if txn.type is TransactionType.REVENUE else expense
        bucket[txn.date.month].append(txn.value)

    return [
        MonthlyTotals(month=month, revenue=math.fsum(revenue[month]), expense=math.fsum(expense[month]))
        for month in range(1, 13)
    ]


def revenue_by_category(transactions: Iterable[Transaction]) -> dict[CategoryName, float]:
    """Group revenue by category, in order of first appearance."""
    grouped: dict[CategoryName, list[float]] = {}
    for txn in transactions:
        if txn.type is TransactionType.REVENUE:
            grouped.setdefault(txn.category, []).append(txn.value)
    return {category: math.fsum(values) for category, values in grouped.items()}


def aggregate(
    transactions: Iterable[Transaction],
    period: PeriodFilter,
    reference_now: datetime,
) -> DashboardSummary:
    """Compute dashboard totals, monthly series and category breakdown.

    The monthly series always covers the twelve months of the reference
    year, whatever the period, but only counts transactions that passed
    the period filter.

    Args:
        transactions: Transactions, typically newest first.
        period: Period filter.
        reference_now: Current date-time.

    Returns:
        DashboardSummary for the period.
    """
    filtered = filter_transactions(transactions, period, reference_now)

    total_revenue = sum_by_type(filtered, TransactionType.REVENUE)
    total_expense = sum_by_type(filtered, TransactionType.EXPENSE)

    return DashboardSummary(
        period=period,
        year=reference_now.year,
        total_revenue=total_revenue,
        total_expense=total_expense,
        balance=total_revenue - total_expense,
        monthly=build_monthly_series(filtered, reference_now.year),
        category_revenue=revenue_by_category(filtered),
        transactions=filtered,
    )


def calculate_histogram_bar_length(amount: float, max_amount: float, bar_width: int) -> int:
    """Calculate histogram bar length.

    Args:
        amount: Amount to display.
        max_amount: Maximum amount in dataset.
        bar_width: Maximum bar width in characters.

    Returns:
        Bar length in characters.
    """
    if max_amount <= 0:
        return 0
    return int((abs(amount) / max_amount) * bar_width)
