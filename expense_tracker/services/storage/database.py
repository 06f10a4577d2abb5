"""
Relational Database Storage Implementation

Expenses live in a single table:

    expenses(id, amount, memo, created_on)

PostgreSQL is the production backend; any database SQLAlchemy can reach works,
which is how the tests run against in-memory SQLite. All statements are built
with SQLAlchemy Core, so user input only ever travels as bound parameters.

One connection is opened at startup and held until close(). Each write is
committed immediately (commit-as-you-go); there are no multi-statement
transactions.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Union

import structlog
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    Integer,
    MetaData,
    Numeric,
    Table,
    Text,
    create_engine,
    delete,
    func,
    insert,
    inspect,
    select,
)
from sqlalchemy.engine import Connection, Engine, Row
from sqlalchemy.exc import ArgumentError, OperationalError, SQLAlchemyError
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from expense_tracker.audit import AuditLogger
from expense_tracker.config import DatabaseSettings, get_settings
from expense_tracker.models.expense import (
    AMOUNT_PRECISION,
    AMOUNT_SCALE,
    Expense,
    NewExpense,
)
from expense_tracker.services.storage.interface import (
    ConnectionError,
    ExpenseStorageInterface,
    StoreError,
    ValidationError,
)


logger = structlog.get_logger(__name__)

# Escape character for LIKE patterns built from user input
LIKE_ESCAPE = "!"

# Largest id the INTEGER column can hold on every backend
MAX_ID = 2**31 - 1

metadata = MetaData()

expenses_table = Table(
    "expenses",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("amount", Numeric(AMOUNT_PRECISION, AMOUNT_SCALE), nullable=False),
    Column("memo", Text, nullable=False),
    Column(
        "created_on",
        Date,
        nullable=False,
        server_default=func.current_date(),
    ),
    CheckConstraint("amount >= 0.01", name="expenses_amount_check"),
    # ids are never reused, even after the newest row is deleted
    sqlite_autoincrement=True,
)


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so text matches literally."""
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def describe_validation_error(error: PydanticValidationError) -> str:
    """Turn a pydantic error into one line a user can act on."""
    messages = []
    for detail in error.errors():
        field = ".".join(str(part) for part in detail["loc"]) or "input"
        messages.append(f"Invalid {field}: {detail['msg']}")
    return "; ".join(messages)


class DatabaseClient:
    """
    Low-level database client wrapper.

    Owns the engine and the single connection. Connecting is retried with
    exponential backoff; after the last attempt the failure is fatal.
    """

    def __init__(self, settings: Optional[DatabaseSettings] = None):
        self._settings = settings or get_settings().database
        self._engine: Optional[Engine] = None
        self._connection: Optional[Connection] = None

    def connect(self) -> Connection:
        """
        Open the connection (once).

        Raises:
            ConnectionError: If the database cannot be reached
        """
        if self._connection is None:
            try:
                self._engine = create_engine(self._settings.sqlalchemy_url)
            except (ArgumentError, ImportError) as e:
                raise ConnectionError(f"Invalid database configuration: {e}") from e

            retrying = Retrying(
                stop=stop_after_attempt(self._settings.connect_attempts),
                wait=wait_exponential(multiplier=0.25, min=0.25, max=2),
                retry=retry_if_exception_type(OperationalError),
                reraise=True,
            )
            try:
                for attempt in retrying:
                    with attempt:
                        self._connection = self._engine.connect()
            except SQLAlchemyError as e:
                raise ConnectionError(f"Failed to connect to database: {e}") from e

            logger.debug(
                "database_connected",
                url=self._engine.url.render_as_string(hide_password=True),
            )

        return self._connection

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None


class DatabaseExpenseStorage(ExpenseStorageInterface):
    """
    SQL implementation of expense storage.

    Connects and ensures the schema as soon as it is constructed, so every
    later call can assume the expenses table exists.
    """

    def __init__(
        self,
        client: Optional[DatabaseClient] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._client = client or DatabaseClient()
        self._audit_logger = audit_logger
        self._connection = self._client.connect()
        self.ensure_schema()

    @staticmethod
    def _row_to_expense(row: Row) -> Expense:
        """
        Convert a result row to an Expense.

        Raises:
            StoreError: If the stored row breaks the Expense invariants
                (e.g. an empty memo written by another client)
        """
        try:
            return Expense(
                id=row.id,
                amount=row.amount,
                memo=row.memo,
                created_on=row.created_on,
            )
        except PydanticValidationError as e:
            logger.error("invalid_stored_row", expense_id=row.id, error=str(e))
            raise StoreError(
                f"Stored expense {row.id} is invalid: {describe_validation_error(e)}"
            ) from e

    def _unencodable(self, field: str, error: UnicodeError) -> ValidationError:
        """Roll back and report text the database cannot store."""
        self._connection.rollback()
        logger.warning("unencodable_text", field=field, error=str(error))
        return ValidationError(f"Invalid {field}: text is not valid UTF-8")

    def _failure(self, action: str, error: SQLAlchemyError) -> StoreError:
        """Roll back and build the StoreError reported to the caller."""
        self._connection.rollback()
        cause = getattr(error, "orig", None) or error
        logger.error("database_error", action=action, error=str(cause))
        return StoreError(f"Failed to {action}: {cause}")

    @staticmethod
    def _ordered(query):
        return query.order_by(
            expenses_table.c.created_on.asc(),
            expenses_table.c.id.asc(),
        )

    def ensure_schema(self) -> bool:
        """Create the expenses table if it doesn't exist."""
        try:
            if inspect(self._connection).has_table(expenses_table.name):
                return False
            metadata.create_all(self._connection, tables=[expenses_table])
            self._connection.commit()
        except SQLAlchemyError as e:
            raise self._failure("create the expenses table", e) from e

        logger.info("schema_created", table=expenses_table.name)
        if self._audit_logger:
            self._audit_logger.log_schema_created(expenses_table.name)
        return True

    def list_all(self) -> list[Expense]:
        """List every expense, oldest first."""
        query = self._ordered(select(expenses_table))
        try:
            rows = self._connection.execute(query).all()
        except SQLAlchemyError as e:
            raise self._failure("list expenses", e) from e
        return [self._row_to_expense(row) for row in rows]

    def add(
        self,
        amount: Union[str, Decimal],
        memo: str,
        created_on: Optional[date] = None,
    ) -> Expense:
        """Validate and insert one expense."""
        try:
            new_expense = NewExpense(amount=amount, memo=memo)
        except PydanticValidationError as e:
            raise ValidationError(describe_validation_error(e)) from e
        except UnicodeError as e:
            raise ValidationError("Invalid memo: text is not valid UTF-8") from e

        values = {"amount": new_expense.amount, "memo": new_expense.memo}
        if created_on is not None:
            values["created_on"] = created_on

        statement = (
            insert(expenses_table)
            .values(**values)
            .returning(*expenses_table.c)
        )
        try:
            row = self._connection.execute(statement).one()
            self._connection.commit()
        except UnicodeError as e:
            raise self._unencodable("memo", e) from e
        except SQLAlchemyError as e:
            raise self._failure("add expense", e) from e

        expense = self._row_to_expense(row)
        logger.debug("expense_inserted", expense_id=expense.id)
        return expense

    def search(self, substring: str) -> list[Expense]:
        """Case-insensitive literal substring search on memo."""
        pattern = f"%{escape_like(substring)}%"
        query = self._ordered(
            select(expenses_table).where(
                expenses_table.c.memo.ilike(pattern, escape=LIKE_ESCAPE)
            )
        )
        try:
            rows = self._connection.execute(query).all()
        except UnicodeError as e:
            raise self._unencodable("search query", e) from e
        except SQLAlchemyError as e:
            raise self._failure("search expenses", e) from e
        return [self._row_to_expense(row) for row in rows]

    def delete_by_id(self, expense_id: int) -> Optional[Expense]:
        """Delete one expense, returning what was deleted."""
        if not 1 <= expense_id <= MAX_ID:
            return None
        lookup = select(expenses_table).where(expenses_table.c.id == expense_id)
        try:
            row = self._connection.execute(lookup).first()
            if row is None:
                return None
            self._connection.execute(
                delete(expenses_table).where(expenses_table.c.id == expense_id)
            )
            self._connection.commit()
        except SQLAlchemyError as e:
            raise self._failure("delete expense", e) from e
        return self._row_to_expense(row)

    def clear_all(self) -> int:
        """Delete every expense."""
        try:
            result = self._connection.execute(delete(expenses_table))
            self._connection.commit()
        except SQLAlchemyError as e:
            raise self._failure("delete all expenses", e) from e
        return result.rowcount

    def close(self) -> None:
        self._client.close()
