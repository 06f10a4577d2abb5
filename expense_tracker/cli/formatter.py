"""
Result formatting shared by list, search and delete.

    There are 2 expenses
      1 | 2024-03-01 |         5.00 | coffee
      2 | 2024-03-02 |        12.50 | books
    --------------------------------------------------
    Total                     17.50

The total only covers the rows being shown, not the whole table.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from expense_tracker.models.expense import Expense

__all__ = [
    "NO_EXPENSES",
    "format_expense_row",
    "format_expenses",
    "format_header",
    "format_total",
]

NO_EXPENSES = "There are no expenses."

COLUMN_SEPARATOR = " | "
ID_WIDTH = 3
DATE_WIDTH = 10
AMOUNT_WIDTH = 12
RULE_WIDTH = 50
TOTAL_WIDTH = 25

_CENT = Decimal("0.01")


def _money(amount: Decimal) -> str:
    return str(amount.quantize(_CENT, rounding=ROUND_HALF_UP))


def format_header(count: int) -> str:
    if count == 1:
        return "There is 1 expense"
    return f"There are {count} expenses"


def format_expense_row(expense: Expense) -> str:
    columns = [
        str(expense.id).rjust(ID_WIDTH),
        expense.created_on.isoformat().rjust(DATE_WIDTH),
        _money(expense.amount).rjust(AMOUNT_WIDTH),
        expense.memo,
    ]
    return COLUMN_SEPARATOR.join(columns)


def format_total(expenses: Sequence[Expense]) -> str:
    total = sum((expense.amount for expense in expenses), Decimal("0"))
    return f"Total {_money(total).rjust(TOTAL_WIDTH)}"


def format_expenses(expenses: Sequence[Expense]) -> list[str]:
    """
    Render a result set as output lines.

    Returns a single "no expenses" line for an empty result.
    """
    if not expenses:
        return [NO_EXPENSES]

    lines = [format_header(len(expenses))]
    lines.extend(format_expense_row(expense) for expense in expenses)
    lines.append("-" * RULE_WIDTH)
    lines.append(format_total(expenses))
    return lines
