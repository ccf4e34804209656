"""Domain models and types for painel.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from painel.domain.models import CategoryName, PeriodFilter, Transaction, TransactionType

__all__ = ["CategoryName", "PeriodFilter", "Transaction", "TransactionType"]
