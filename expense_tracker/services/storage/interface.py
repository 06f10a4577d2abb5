"""
Abstract Storage Interface

The dispatcher only talks to this interface, which allows us to:
1. Point the tracker at PostgreSQL in production
2. Use an in-memory SQLite database for testing
3. Keep command handling decoupled from SQL

The interface is intentionally small: five data operations plus schema
initialization. We're not building an ORM.
"""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Optional, Union

from expense_tracker.models.expense import Expense


class ExpenseStorageInterface(ABC):
    """
    Abstract interface for expense storage operations.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def ensure_schema(self) -> bool:
        """
        Create the expenses table if it does not exist yet.

        Safe to call on every startup.

        Returns:
            True if the table had to be created
        """
        pass

    @abstractmethod
    def list_all(self) -> list[Expense]:
        """
        List every expense, oldest first.

        Rows recorded on the same date keep insertion order.

        Returns:
            All expenses (empty list if there are none)
        """
        pass

    @abstractmethod
    def add(
        self,
        amount: Union[str, Decimal],
        memo: str,
        created_on: Optional[date] = None,
    ) -> Expense:
        """
        Record a new expense.

        Args:
            amount: Amount spent; text is parsed exactly
            memo: Description of the expense
            created_on: Date of the expense; the store uses today if omitted

        Returns:
            The stored expense, with its assigned id

        Raises:
            ValidationError: If amount or memo is malformed
            StoreError: If the database rejects the row
        """
        pass

    @abstractmethod
    def search(self, substring: str) -> list[Expense]:
        """
        Find expenses whose memo contains substring, ignoring case.

        The substring is matched literally; '%' and '_' have no special
        meaning.

        Returns:
            Matching expenses, oldest first
        """
        pass

    @abstractmethod
    def delete_by_id(self, expense_id: int) -> Optional[Expense]:
        """
        Delete one expense.

        Args:
            expense_id: The expense's identifier

        Returns:
            Snapshot of the deleted expense, or None if no expense has
            that id (nothing is changed in that case)
        """
        pass

    @abstractmethod
    def clear_all(self) -> int:
        """
        Delete every expense.

        Returns:
            Number of expenses removed
        """
        pass

    def close(self) -> None:
        """Release any held resources."""


class StoreError(Exception):
    """Base exception for storage operations."""
    pass


class ConnectionError(StoreError):
    """Could not connect to storage backend."""
    pass


class ValidationError(StoreError):
    """Input rejected before anything was written."""
    pass
