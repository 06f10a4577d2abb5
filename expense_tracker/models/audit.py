"""
Audit Models for the Expense Tracker

Every change to the expenses table, and every failed command, produces an
audit event. Events are written to the structured log (see
expense_tracker.audit.logger); they are never stored in the database.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from expense_tracker.models.expense import Expense


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Schema
    SCHEMA_CREATED = "schema_created"

    # Persistence
    EXPENSE_ADDED = "expense_added"
    EXPENSE_DELETED = "expense_deleted"
    EXPENSES_CLEARED = "expenses_cleared"

    # Failures
    COMMAND_FAILED = "command_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """A single audit log entry."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(tz=timezone.utc)
    )
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Entity being acted upon
    entity_id: Optional[int] = Field(
        default=None,
        description="Expense id, when the event concerns a single row"
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Groups the events of one command invocation"
    )

    description: str = Field(..., min_length=1)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict[str, Any]:
        """Flatten into keyword arguments for the structured logger."""
        data: dict[str, Any] = {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "description": self.description,
            "details": self.details,
        }
        if self.entity_id is not None:
            data["entity_id"] = self.entity_id
        if self.correlation_id is not None:
            data["correlation_id"] = str(self.correlation_id)
        if self.error_message:
            data["error_message"] = self.error_message
        return data


class AuditEventBuilder:
    """Factory methods for the events the tracker emits."""

    @staticmethod
    def expense_added(
        expense: Expense,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_id=expense.id,
            correlation_id=correlation_id,
            description=f"Recorded expense {expense.id}",
            details={
                "amount": str(expense.amount),
                "created_on": expense.created_on.isoformat(),
            },
        )

    @staticmethod
    def expense_deleted(
        expense: Expense,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_id=expense.id,
            correlation_id=correlation_id,
            description=f"Deleted expense {expense.id}",
            details={
                "amount": str(expense.amount),
                "memo": expense.memo,
                "created_on": expense.created_on.isoformat(),
            },
        )

    @staticmethod
    def expenses_cleared(
        count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSES_CLEARED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Deleted all expenses ({count} rows)",
            details={"count": count},
        )

    @staticmethod
    def schema_created(table: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SCHEMA_CREATED,
            description=f"Created table {table}",
            details={"table": table},
        )

    @staticmethod
    def command_failed(
        command: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COMMAND_FAILED,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"Command '{command}' failed",
            details={"command": command},
            error_message=error_message,
        )
