"""
Command Dispatcher

Maps the command-line arguments of one invocation onto one storage
operation:

    list                 print all expenses
    add AMOUNT MEMO      record a new expense
    search QUERY         print expenses whose memo contains QUERY
    delete ID            delete one expense and echo it
    clear                confirm with y/n, then delete everything

Anything else prints the help text. Errors are handled here, at the command
boundary; run() always returns an exit code instead of raising.
"""

from typing import Callable, Optional, Sequence

import click

from expense_tracker.audit import AuditLogger
from expense_tracker.cli.formatter import format_expenses
from expense_tracker.cli.keys import KeyReader, TerminalKeyReader
from expense_tracker.models.expense import Expense
from expense_tracker.services.storage import (
    ExpenseStorageInterface,
    StoreError,
    ValidationError,
)

__all__ = ["Dispatcher", "HELP_TEXT", "EXIT_OK", "EXIT_FAILURE"]

EXIT_OK = 0
EXIT_FAILURE = 1

HELP_TEXT = """
An expense recording system

Commands:

add AMOUNT MEMO - record a new expense
clear - delete all expenses
list - list all expenses
delete NUMBER - remove expense with id NUMBER
search QUERY - list expenses with a matching memo field
"""

CLEAR_PROMPT = "This will remove all expenses. Are you sure? (y/n)"
CLEAR_REPROMPT = "I didn't get that, are you sure you want to remove all expenses? (y/n)"


class UsageError(ValidationError):
    """Wrong number or shape of command arguments."""


class Dispatcher:
    """
    Routes one command to the storage layer and renders the result.

    The storage object is owned by the caller; the dispatcher never opens
    or closes it.
    """

    def __init__(
        self,
        storage: ExpenseStorageInterface,
        key_reader: Optional[KeyReader] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._key_reader = key_reader or TerminalKeyReader()
        self._audit_logger = audit_logger or AuditLogger()
        self._commands: dict[str, Callable[[list[str]], int]] = {
            "list": self.list_expenses,
            "add": self.add_expense,
            "search": self.search_expenses,
            "delete": self.delete_expense,
            "clear": self.clear_expenses,
        }

    def run(self, args: Sequence[str]) -> int:
        """
        Execute the command named by args[0].

        Returns the process exit code.
        """
        command = args[0] if args else None
        handler = self._commands.get(command) if command else None
        if handler is None:
            self.show_help()
            return EXIT_OK

        try:
            return handler(list(args[1:]))
        except StoreError as e:
            # ValidationError and UsageError included
            self._audit_logger.log_command_failed(command, str(e))
            click.echo(str(e) if isinstance(e, UsageError) else f"Error: {e}", err=True)
            return EXIT_FAILURE

    # ── Output ────────────────────────────────────────────────────────────

    def show_help(self) -> None:
        click.echo(HELP_TEXT)

    def _display(self, expenses: Sequence[Expense]) -> None:
        for line in format_expenses(expenses):
            click.echo(line)

    # ── Commands ──────────────────────────────────────────────────────────

    def list_expenses(self, args: list[str]) -> int:
        self._display(self._storage.list_all())
        return EXIT_OK

    def add_expense(self, args: list[str]) -> int:
        """add AMOUNT MEMO"""
        if len(args) != 2:
            raise UsageError("You must provide an amount and a memo")
        amount, memo = args

        expense = self._storage.add(amount, memo)
        self._audit_logger.log_expense_added(expense)
        click.echo(f"Expense {expense.id} has been added.")
        return EXIT_OK

    def search_expenses(self, args: list[str]) -> int:
        """search QUERY"""
        if len(args) != 1:
            raise UsageError("You must provide a search query")
        self._display(self._storage.search(args[0]))
        return EXIT_OK

    def delete_expense(self, args: list[str]) -> int:
        """delete ID"""
        if len(args) != 1:
            raise UsageError("You must provide an expense id")
        raw_id = args[0]
        try:
            expense_id = int(raw_id)
        except ValueError:
            raise ValidationError(f"Invalid id: '{raw_id}' is not a number") from None

        deleted = self._storage.delete_by_id(expense_id)
        if deleted is None:
            click.echo(f"There is no expense with id '{raw_id}'")
            return EXIT_OK

        self._audit_logger.log_expense_deleted(deleted)
        click.echo("The following expense has been deleted:")
        self._display([deleted])
        return EXIT_OK

    def clear_expenses(self, args: list[str]) -> int:
        """clear: ask for y/n one keystroke at a time, then delete everything."""
        click.echo(CLEAR_PROMPT)
        try:
            answer = self._key_reader.read_key()
            while answer not in ("y", "n"):
                click.echo(CLEAR_REPROMPT)
                answer = self._key_reader.read_key()
        except (KeyboardInterrupt, EOFError):
            click.echo("Aborted.", err=True)
            return EXIT_FAILURE

        if answer == "y":
            count = self._storage.clear_all()
            self._audit_logger.log_expenses_cleared(count)
            click.echo("All expenses have been deleted.")
        return EXIT_OK
