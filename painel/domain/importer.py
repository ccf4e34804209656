"""Pure functions for importing transactions from CSV exports.

The supported format is a semicolon-delimited, Portuguese-locale export:

    data_lançamento;Categoria;Valor em R$;descrição
    15/03/2024;Doações;"R$ 1.234,56";Oferta especial

- Dates are DD/MM/YYYY
- Values use "." for thousands and "," for decimals, optionally prefixed by R$
- Columns are looked up by name, so extra or reordered columns are fine

Rows that cannot be parsed are skipped and reported; only a bad header or
an import with no usable rows fails as a whole.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import datetime

from painel.domain.models import CategoryName, Transaction, TransactionType

logger = logging.getLogger(__name__)

DATE_COLUMN = "data_lançamento"
CATEGORY_COLUMN = "Categoria"
VALUE_COLUMN = "Valor em R$"
DESCRIPTION_COLUMN = "descrição"

REQUIRED_COLUMNS = (DATE_COLUMN, CATEGORY_COLUMN, VALUE_COLUMN)

DELIMITER = ";"
BOM = "\ufeff"

CSV_DESCRIPTION = "Importado via CSV"
CSV_PAYMENT_METHOD = "CSV Import"

# Amount after R$ and thousands separators are removed and "," became "."
AMOUNT_PATTERN = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")


class CsvImportError(Exception):
    """Base class for errors that abort a CSV import."""


class InvalidHeaderError(CsvImportError):
    """The header line lacks one or more required columns."""

    def __init__(self, expected: list[str], found: list[str]) -> None:
        self.expected = expected
        self.found = found
        self.missing = [name for name in expected if name not in found]
        super().__init__(f'Invalid header. Expected: "{"; ".join(expected)}". Found: "{"; ".join(found)}".')


class NoValidRowsError(CsvImportError):
    """No row of the file produced a transaction."""

    def __init__(self, skipped: list["SkippedRow"] | None = None) -> None:
        self.skipped = skipped or []
        super().__init__("No valid transactions found in the file.")


class UnreadableFileError(CsvImportError):
    """The source file could not be read as text."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to read file {path}: {reason}")


@dataclass(frozen=True)
class CsvRow:
    """Named fields of one data line."""

    date: str
    category: str
    value: str
    description: str

    @classmethod
    def from_fields(cls, header: list[str], values: list[str]) -> "CsvRow":
        """Map values to header names; missing trailing fields become empty."""
        fields = {name: (values[i] if i < len(values) else "") for i, name in enumerate(header)}
        return cls(
            date=fields.get(DATE_COLUMN, ""),
            category=fields.get(CATEGORY_COLUMN, ""),
            value=fields.get(VALUE_COLUMN, ""),
            description=fields.get(DESCRIPTION_COLUMN, ""),
        )


@dataclass(frozen=True)
class SkippedRow:
    """Diagnostic for a data line that was not imported."""

    line_number: int
    line: str
    reason: str


@dataclass(frozen=True)
class ImportResult:
    """Transactions parsed from a file, plus the rows that were skipped."""

    transactions: list[Transaction]
    skipped: list[SkippedRow] = field(default_factory=list)


def clean_field(raw: str) -> str:
    """Trim whitespace and surrounding quotes from a field."""
    return raw.strip().strip('"').strip()


def split_line(line: str) -> list[str]:
    """Split a line on the delimiter and clean each field."""
    return [clean_field(part) for part in line.split(DELIMITER)]


def parse_header(line: str) -> list[str]:
    """Parse the header line into column names.

    Raises:
        InvalidHeaderError: If a required column is missing.
    """
    header = split_line(line.removeprefix(BOM).rstrip("\r"))
    if not all(name in header for name in REQUIRED_COLUMNS):
        raise InvalidHeaderError(list(REQUIRED_COLUMNS), header)
    return header


def parse_br_date(raw: str) -> datetime | None:
    """Parse a DD/MM/YYYY date at midnight.

    Returns:
        The date, or None if it is malformed or not a real calendar date.
    """
    parts = raw.strip().split("/")
    if len(parts) != 3 or not all(part.isascii() and part.isdigit() for part in parts):
        return None
    day, month, year = parts
    if len(day) > 2 or len(month) > 2 or len(year) != 4:
        return None
    try:
        return datetime(int(year), int(month), int(day))
    except ValueError:
        return None


def parse_br_amount(raw: str) -> float | None:
    """Parse a Brazilian-formatted amount such as "R$ 1.234,56".

    Returns:
        The amount, or None if it is not a finite number.
    """
    cleaned = raw.replace("R$", "").replace(".", "").replace(",", ".").strip()
    if not AMOUNT_PATTERN.fullmatch(cleaned):
        return None
    amount = float(cleaned)
    if not math.isfinite(amount):
        return None
    return amount


def parse_csv_row(row: CsvRow, declared_type: TransactionType) -> tuple[Transaction | None, str | None]:
    """Build a transaction from one row.

    Args:
        row: Named row fields.
        declared_type: Type assigned to every transaction of the file.

    Returns:
        Tuple of (transaction, skip_reason). Exactly one of them is None.
    """
    if not row.date or not row.category or not row.value:
        return None, "missing required field"

    txn_date = parse_br_date(row.date)
    if txn_date is None:
        return None, f"invalid date '{row.date}' (use DD/MM/YYYY)"

    amount = parse_br_amount(row.value)
    if amount is None:
        return None, f"invalid value '{row.value}'"

    txn = Transaction(
        date=txn_date,
        type=declared_type,
        value=amount,
        category=CategoryName(row.category),
        description=row.description or CSV_DESCRIPTION,
        payment_method=CSV_PAYMENT_METHOD,
        file_name=None,
    )
    return txn, None


def parse_csv(raw_text: str, declared_type: TransactionType) -> ImportResult:
    """Parse CSV text into unsaved transactions.

    Args:
        raw_text: Decoded file content.
        declared_type: Type assigned to every transaction of the file.

    Returns:
        ImportResult with the parsed transactions and skipped rows.

    Raises:
        InvalidHeaderError: If the header lacks a required column.
        NoValidRowsError: If no data row could be parsed.
    """
    lines = [
        (number, line)
        for number, line in enumerate(raw_text.removeprefix(BOM).split("\n"), start=1)
        if line.strip()
    ]
    if not lines:
        raise InvalidHeaderError(list(REQUIRED_COLUMNS), [])

    _, header_line = lines[0]
    header = parse_header(header_line)

    transactions: list[Transaction] = []
    skipped: list[SkippedRow] = []

    for number, line in lines[1:]:
        row = CsvRow.from_fields(header, split_line(line.strip()))
        txn, reason = parse_csv_row(row, declared_type)
        if txn is None:
            logger.warning("Skipping line %d (%s): %s", number, reason, line.strip())
            skipped.append(SkippedRow(line_number=number, line=line.strip(), reason=reason or ""))
            continue
        transactions.append(txn)

    if not transactions:
        raise NoValidRowsError(skipped)

    return ImportResult(transactions=transactions, skipped=skipped)
