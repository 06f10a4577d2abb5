"""
Shared fixtures.

Tests run against in-memory SQLite through the same SQLAlchemy code path
used for PostgreSQL. No real database server is needed.
"""

from typing import Iterable

import pytest

from expense_tracker.audit import AuditLogger
from expense_tracker.cli.dispatcher import Dispatcher
from expense_tracker.cli.keys import KeyReader
from expense_tracker.config import DatabaseSettings, get_settings
from expense_tracker.services.storage import DatabaseClient, DatabaseExpenseStorage


class ScriptedKeyReader(KeyReader):
    """Replays a fixed sequence of keystrokes, then behaves like Ctrl-D."""

    def __init__(self, keys: Iterable[str] = ()):
        self._keys = list(keys)
        self.reads = 0

    def read_key(self) -> str:
        if not self._keys:
            raise EOFError
        self.reads += 1
        return self._keys.pop(0)


def memory_settings() -> DatabaseSettings:
    return DatabaseSettings(url="sqlite://", connect_attempts=1)


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Settings are cached per process; tests change the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def store():
    """A fresh DatabaseExpenseStorage on an in-memory database."""
    storage = DatabaseExpenseStorage(client=DatabaseClient(memory_settings()))
    yield storage
    storage.close()


@pytest.fixture
def make_dispatcher(store):
    """Build a Dispatcher over the test store with scripted keystrokes."""
    def _make(*keys: str) -> Dispatcher:
        return Dispatcher(
            store,
            key_reader=ScriptedKeyReader(keys),
            audit_logger=AuditLogger(),
        )
    return _make
