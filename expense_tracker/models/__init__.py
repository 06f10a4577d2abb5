"""
Data Models Package

Pydantic models for expenses and audit events.
"""

from expense_tracker.models.expense import (
    AMOUNT_PRECISION,
    AMOUNT_SCALE,
    MIN_AMOUNT,
    Expense,
    NewExpense,
)
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "AMOUNT_PRECISION",
    "AMOUNT_SCALE",
    "MIN_AMOUNT",
    "Expense",
    "NewExpense",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
