"""
Core Data Models for the Expense Tracker

These models define the schemas for data flowing in and out of the store:

- NewExpense validates what a user typed before anything is written
- Expense is the typed snapshot of one stored row

The database check constraint (amount >= 0.01) stays the source of truth;
NewExpense mirrors it so bad input is reported before a statement is sent.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Smallest amount the expenses table accepts
MIN_AMOUNT = Decimal("0.01")

# NUMERIC(6, 2): up to 9999.99
AMOUNT_PRECISION = 6
AMOUNT_SCALE = 2


class NewExpense(BaseModel):
    """
    An expense as entered on the command line, not yet stored.

    The amount arrives as text and is parsed to a Decimal; floats are never
    involved so "0.1" stays exactly one tenth.
    """
    amount: Decimal = Field(
        ...,
        ge=MIN_AMOUNT,
        max_digits=AMOUNT_PRECISION,
        decimal_places=AMOUNT_SCALE,
        description="Amount spent, positive to the cent"
    )
    memo: str = Field(
        ...,
        min_length=1,
        description="Free-text description of the expense"
    )

    @field_validator('memo')
    @classmethod
    def memo_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Memo must not be blank")
        return v


class Expense(BaseModel):
    """
    Snapshot of one row of the expenses table.

    Rows are never updated in place, so the model is frozen.
    """
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1, description="Store-assigned identifier")
    amount: Decimal = Field(
        ...,
        ge=MIN_AMOUNT,
        decimal_places=AMOUNT_SCALE,
    )
    memo: str = Field(..., min_length=1)
    created_on: date = Field(..., description="Date the expense was recorded")

    def __str__(self) -> str:
        return f"Expense(id={self.id}, amount={self.amount}, memo={self.memo!r})"
