"""
Command-line interface for the expense tracker.

Commands: list | add | search | delete | clear
"""

from expense_tracker.cli.dispatcher import Dispatcher, HELP_TEXT
from expense_tracker.cli.keys import KeyReader, TerminalKeyReader
from expense_tracker.cli.main import cli, main

__all__ = ["Dispatcher", "HELP_TEXT", "KeyReader", "TerminalKeyReader", "cli", "main"]
