"""Database query functions.

Every query is scoped by user profile. Dates are stored as ISO strings.
"""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable

from painel.domain.models import CategoryName, Transaction, TransactionType
from painel.store.schema import get_db_path

logger = logging.getLogger(__name__)


def _connect(db_path: Path | None = None) -> sqlite3.Connection:
    """Create a database connection with row factory.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Database connection with row_factory configured.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def _to_params(user: str, txn: Transaction) -> tuple[Any, ...]:
    if txn.date is None:
        raise ValueError("Cannot store a transaction without a date")
    return (
        user,
        txn.date.isoformat(),
        txn.type.value,
        txn.value,
        txn.category,
        txn.description,
        txn.payment_method,
        txn.file_name,
    )


def _parse_stored_date(raw: str | None) -> datetime | None:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        return None


def _row_to_transaction(row: sqlite3.Row) -> Transaction:
    """Convert a database row to a Transaction.

    Malformed stored dates become None; aggregation drops those rows.
    """
    return Transaction(
        id=row["id"],
        date=_parse_stored_date(row["date"]),
        type=TransactionType(row["type"]),
        value=row["value"],
        category=CategoryName(row["category"]),
        description=row["description"],
        payment_method=row["payment_method"],
        file_name=row["file_name"],
    )


_INSERT_SQL = """
    INSERT INTO transactions (user, date, type, value, category, description, payment_method, file_name)
    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
"""


def insert_transaction(user: str, txn: Transaction, db_path: Path | None = None) -> int:
    """Insert a single transaction.

    Args:
        user: User profile the transaction belongs to.
        txn: Transaction to store (its id is ignored).
        db_path: Path to the database file. If None, uses default location.

    Returns:
        ID assigned to the new transaction.

    Raises:
        sqlite3.Error: If database operation fails.
        ValueError: If the transaction has no date.
    """
    params = _to_params(user, txn)
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(_INSERT_SQL, params)
            conn.commit()
            new_id = cursor.lastrowid
        except sqlite3.Error:
            conn.rollback()
            raise
    assert new_id is not None
    return new_id


def insert_transactions(user: str, txns: Iterable[Transaction], db_path: Path | None = None) -> list[int]:
    """Insert many transactions in a single database transaction.

    Either all transactions are stored or none are.

    Args:
        user: User profile the transactions belong to.
        txns: Transactions to store.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        IDs assigned to the new transactions, in input order.

    Raises:
        sqlite3.Error: If database operation fails.
        ValueError: If a transaction has no date.
    """
    rows = [_to_params(user, txn) for txn in txns]
    ids: list[int] = []

    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            for params in rows:
                cursor.execute(_INSERT_SQL, params)
                assert cursor.lastrowid is not None
                ids.append(cursor.lastrowid)
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise

    logger.debug("Inserted %d transactions for user %s", len(ids), user)
    return ids


def get_all_transactions(user: str, db_path: Path | None = None, limit: int | None = None) -> list[Transaction]:
    """Get a user's transactions, newest first.

    Args:
        user: User profile.
        db_path: Path to the database file. If None, uses default location.
        limit: Maximum number of transactions to return. If None, returns all.

    Returns:
        List of transactions ordered by date descending.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        query = (
            "SELECT id, date, type, value, category, description, payment_method, file_name "
            "FROM transactions WHERE user = ? ORDER BY date DESC, id DESC"
        )
        params: list[Any] = [user]

        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        cursor.execute(query, params)
        rows = cursor.fetchall()
        return [_row_to_transaction(row) for row in rows]


def count_transactions(user: str, db_path: Path | None = None) -> int:
    """Count a user's transactions.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT COUNT(*) FROM transactions WHERE user = ?", (user,))
        return int(cursor.fetchone()[0])
