"""
Storage Services Package

Provides the abstract storage interface and the SQL implementation backed
by SQLAlchemy (PostgreSQL in production).
"""

from expense_tracker.services.storage.interface import (
    ConnectionError,
    ExpenseStorageInterface,
    StoreError,
    ValidationError,
)
from expense_tracker.services.storage.database import (
    DatabaseClient,
    DatabaseExpenseStorage,
    expenses_table,
)

__all__ = [
    # Interfaces
    "ExpenseStorageInterface",
    # Exceptions
    "ConnectionError",
    "StoreError",
    "ValidationError",
    # SQL implementation
    "DatabaseClient",
    "DatabaseExpenseStorage",
    "expenses_table",
]
