"""Services package."""

from expense_tracker.services.storage import (
    ConnectionError,
    DatabaseClient,
    DatabaseExpenseStorage,
    ExpenseStorageInterface,
    StoreError,
    ValidationError,
)

__all__ = [
    "ConnectionError",
    "DatabaseClient",
    "DatabaseExpenseStorage",
    "ExpenseStorageInterface",
    "StoreError",
    "ValidationError",
]
