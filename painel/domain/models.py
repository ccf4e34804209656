"""Domain types for painel.

- Transaction: a single dated money movement, tagged revenue or expense
- TransactionType: receita (revenue) or despesa (expense)
- PeriodFilter: time window applied before aggregation
- CategoryName: free-text category label
"""

import math
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import PurePath
from typing import NewType

# Category label as typed by the user or read from the CSV
CategoryName = NewType("CategoryName", str)

DEFAULT_PAYMENT_METHOD = "PIX"


class TransactionType(str, Enum):
    """Direction of a transaction, stored under its Portuguese name."""

    REVENUE = "receita"
    EXPENSE = "despesa"

    @classmethod
    def parse(cls, raw: str) -> "TransactionType":
        """Parse a transaction type from its stored or English name.

        Raises:
            ValueError: If the name is not recognised.
        """
        key = raw.strip().lower()
        aliases = {"revenue": cls.REVENUE, "expense": cls.EXPENSE}
        if key in aliases:
            return aliases[key]
        return cls(key)


class PeriodFilter(str, Enum):
    """Time window applied to transactions before aggregation."""

    ALL_TIME = "all"
    THIS_YEAR = "this-year"
    THIS_MONTH = "this-month"


@dataclass(frozen=True)
class Transaction:
    """Immutable transaction data."""

    date: datetime | None
    type: TransactionType
    value: float
    category: CategoryName
    description: str = ""
    payment_method: str = DEFAULT_PAYMENT_METHOD
    file_name: str | None = None
    id: int | None = None


def to_midnight(value: date) -> datetime:
    """Drop the time of day from a date or datetime."""
    return datetime(value.year, value.month, value.day)


def build_manual_transaction(
    when: date,
    type: str | TransactionType,
    category: str,
    value: float,
    description: str = "",
    payment_method: str = DEFAULT_PAYMENT_METHOD,
    attachment: str | None = None,
) -> tuple[Transaction | None, str | None]:
    """Validate a manually entered transaction.

    Args:
        when: Transaction date; the time of day is discarded.
        type: Transaction type (receita/despesa or revenue/expense).
        category: Category label, must not be blank.
        value: Amount in reais.
        description: Optional description.
        payment_method: Informational payment method label.
        attachment: Optional receipt path; only its file name is kept.

    Returns:
        Tuple of (transaction, error). Exactly one of them is None.
    """
    try:
        txn_type = type if isinstance(type, TransactionType) else TransactionType.parse(type)
    except ValueError:
        return None, f"Invalid type '{type}' (use receita or despesa)"

    label = category.strip()
    if not label:
        return None, "Category is required"

    if not math.isfinite(value):
        return None, "Value must be a finite number"

    file_name = PurePath(attachment).name if attachment else None

    txn = Transaction(
        date=to_midnight(when),
        type=txn_type,
        value=float(value),
        category=CategoryName(label),
        description=description.strip(),
        payment_method=payment_method.strip() or DEFAULT_PAYMENT_METHOD,
        file_name=file_name or None,
    )
    return txn, None
