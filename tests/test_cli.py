"""
End-to-end tests for the `expense` command.

Each invoke() is one "process": settings are read from the environment, the
store connects to a temporary SQLite file, one command runs, and the
connection is closed again.
"""

import pytest
from click.testing import CliRunner

from expense_tracker.cli.dispatcher import EXIT_FAILURE
from expense_tracker.cli.main import EXIT_CONNECTION_FAILED, cli, run
from expense_tracker.config import get_settings
from expense_tracker.services.storage import (
    DatabaseClient,
    DatabaseExpenseStorage,
    StoreError,
)

from tests.conftest import ScriptedKeyReader


@pytest.fixture
def env(tmp_path):
    return {
        "EXPENSES_DB_URL": f"sqlite:///{tmp_path / 'expenses.db'}",
        "EXPENSES_DB_CONNECT_ATTEMPTS": "1",
    }


@pytest.fixture
def invoke(env):
    runner = CliRunner()

    def _invoke(*args, input=None):
        get_settings.cache_clear()
        return runner.invoke(cli, list(args), env=env, input=input)

    return _invoke


class TestCli:

    def test_no_arguments_prints_help(self, invoke):
        result = invoke()
        assert result.exit_code == 0
        assert "An expense recording system" in result.output

    def test_add_then_list(self, invoke):
        assert invoke("add", "5.00", "coffee").exit_code == 0
        assert invoke("add", "12.50", "books").exit_code == 0

        result = invoke("list")
        assert result.exit_code == 0
        assert "There are 2 expenses" in result.output
        assert "| coffee" in result.output
        assert "| books" in result.output
        assert result.output.splitlines()[-1].split() == ["Total", "17.50"]

    def test_search_then_delete(self, invoke):
        invoke("add", "5.00", "coffee")
        invoke("add", "12.50", "books")

        result = invoke("search", "COF")
        assert "There is 1 expense" in result.output
        assert "books" not in result.output

        result = invoke("delete", "1")
        assert result.exit_code == 0
        assert "The following expense has been deleted:" in result.output
        assert "There is 1 expense" in invoke("list").output

    def test_delete_unknown_id(self, invoke):
        invoke("add", "5.00", "coffee")
        result = invoke("delete", "999")
        assert result.exit_code == 0
        assert "There is no expense with id '999'" in result.output
        assert "There is 1 expense" in invoke("list").output

    def test_add_with_one_argument_inserts_nothing(self, invoke):
        result = invoke("add", "5.00")
        assert result.exit_code == 1
        assert "You must provide an amount and a memo" in result.output
        assert "There are no expenses." in invoke("list").output

    def test_negative_looking_arguments_are_not_options(self, invoke):
        result = invoke("add", "-5", "refund")
        assert result.exit_code == 1
        assert "Invalid amount" in result.output

    def test_clear_with_n_keeps_rows(self, invoke):
        invoke("add", "5.00", "coffee")
        result = invoke("clear", input="n")
        assert result.exit_code == 0
        assert "Are you sure? (y/n)" in result.output
        assert "There is 1 expense" in invoke("list").output

    def test_clear_with_y_empties_table(self, invoke):
        invoke("add", "5.00", "coffee")
        result = invoke("clear", input="?y")
        assert result.exit_code == 0
        assert "I didn't get that" in result.output
        assert "All expenses have been deleted." in result.output
        assert "There are no expenses." in invoke("list").output

    def test_connection_failure_is_fatal(self, tmp_path):
        runner = CliRunner()
        env = {
            "EXPENSES_DB_URL": f"sqlite:///{tmp_path / 'missing' / 'expenses.db'}",
            "EXPENSES_DB_CONNECT_ATTEMPTS": "1",
        }
        result = runner.invoke(cli, ["list"], env=env)
        assert result.exit_code == EXIT_CONNECTION_FAILED
        assert "Failed to connect to database" in result.output


class TestRun:
    """run(): the function behind the click command."""

    def test_run_with_injected_keys(self, env, monkeypatch, capsys):
        for name, value in env.items():
            monkeypatch.setenv(name, value)

        assert run(["add", "1.00", "gum"]) == 0
        assert run(["clear"], key_reader=ScriptedKeyReader(["y"])) == 0
        capsys.readouterr()

        assert run(["list"]) == 0
        assert capsys.readouterr().out == "There are no expenses.\n"

    def test_schema_failure_closes_connection(self, env, monkeypatch, capsys):
        for name, value in env.items():
            monkeypatch.setenv(name, value)

        def broken_schema(self):
            raise StoreError("Failed to create the expenses table: read-only")

        closed = []
        original_close = DatabaseClient.close

        def recording_close(self):
            closed.append(self._connection is not None)
            original_close(self)

        monkeypatch.setattr(DatabaseExpenseStorage, "ensure_schema", broken_schema)
        monkeypatch.setattr(DatabaseClient, "close", recording_close)

        assert run(["list"]) == EXIT_FAILURE
        assert "Failed to create the expenses table" in capsys.readouterr().err
        assert closed == [True]
