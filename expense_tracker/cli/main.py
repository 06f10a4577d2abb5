"""
CLI entry point for the expense tracker.

Usage
─────
  expense list
  expense add 5.00 coffee
  expense search cof
  expense delete 3
  expense clear

The database is configured through EXPENSES_DB_* environment variables (or a
.env file); see expense_tracker.config.settings.
"""

import sys
from typing import Optional, Sequence

import click

from expense_tracker.audit import AuditLogger, configure_logging
from expense_tracker.cli.dispatcher import EXIT_FAILURE, Dispatcher
from expense_tracker.cli.keys import KeyReader
from expense_tracker.config import get_settings
from expense_tracker.services.storage import (
    ConnectionError,
    DatabaseClient,
    DatabaseExpenseStorage,
    StoreError,
)

__all__ = ["cli", "main", "run", "EXIT_CONNECTION_FAILED"]

EXIT_CONNECTION_FAILED = 2


def run(args: Sequence[str], key_reader: Optional[KeyReader] = None) -> int:
    """Connect, run one command, disconnect. Returns the exit code."""
    settings = get_settings()
    configure_logging(debug=settings.app.debug_mode)

    audit_logger = AuditLogger()
    client = DatabaseClient(settings.database)
    try:
        storage = DatabaseExpenseStorage(client=client, audit_logger=audit_logger)
    except ConnectionError as e:
        client.close()
        click.echo(f"Error: {e}", err=True)
        return EXIT_CONNECTION_FAILED
    except StoreError as e:
        client.close()
        click.echo(f"Error: {e}", err=True)
        return EXIT_FAILURE

    try:
        dispatcher = Dispatcher(storage, key_reader=key_reader, audit_logger=audit_logger)
        return dispatcher.run(args)
    finally:
        storage.close()


@click.command(
    context_settings={
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
        "help_option_names": [],
    },
)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def cli(args: tuple[str, ...]) -> None:
    """An expense recording system."""
    sys.exit(run(args))


def main() -> None:
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
