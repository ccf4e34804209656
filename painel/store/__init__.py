"""Database store layer - provides persistence for the application.

This module re-exports all public database functions for easy importing.
"""

from painel.store.queries import (
    count_transactions,
    get_all_transactions,
    insert_transaction,
    insert_transactions,
)
from painel.store.schema import database_exists, get_db_path, init_database

__all__ = [
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
    # Queries
    "count_transactions",
    "get_all_transactions",
    "insert_transaction",
    "insert_transactions",
]
