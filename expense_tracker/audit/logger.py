"""
Audit Logger

Every change to the expenses table is logged, along with every command that
fails. This provides:
1. Traceability of deletions (the deleted row is part of the event)
2. Debugging capability when a command fails
3. A record of bulk clears

The audit logger writes to the structured local log only. It never raises:
a logging failure must not turn a successful command into a failed one.
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from expense_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from expense_tracker.models.expense import Expense


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(debug: bool = False) -> None:
    """
    Route log records to stderr.

    stdout belongs to the command output, so nothing is ever logged there.
    Only warnings and errors are shown unless debug is enabled.
    """
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
    )


class AuditLogger:
    """
    Central audit logging service.

    One instance per command invocation; all events it writes share the
    same correlation id.
    """

    def __init__(self, correlation_id: Optional[UUID] = None):
        self.correlation_id = correlation_id or create_correlation_id()
        self._logger = structlog.get_logger("expense_tracker.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written.
        """
        log_dict = event.to_log_dict()
        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Log failure but don't raise
            logging.getLogger(__name__).error(
                "audit logging failed for %s: %s", log_dict["event_id"], e
            )
            return False
        return True

    def log_schema_created(self, table: str) -> None:
        self.log(AuditEventBuilder.schema_created(table))

    def log_expense_added(self, expense: Expense) -> None:
        """Log a newly recorded expense."""
        self.log(AuditEventBuilder.expense_added(
            expense=expense,
            correlation_id=self.correlation_id,
        ))

    def log_expense_deleted(self, expense: Expense) -> None:
        """Log a deleted expense, including its full snapshot."""
        self.log(AuditEventBuilder.expense_deleted(
            expense=expense,
            correlation_id=self.correlation_id,
        ))

    def log_expenses_cleared(self, count: int) -> None:
        """Log a clear-all."""
        self.log(AuditEventBuilder.expenses_cleared(
            count=count,
            correlation_id=self.correlation_id,
        ))

    def log_command_failed(self, command: str, error_message: str) -> None:
        """Log a command that ended in an error."""
        self.log(AuditEventBuilder.command_failed(
            command=command,
            error_message=error_message,
            correlation_id=self.correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    One is created per command invocation.
    """
    return uuid4()
