"""Tests for result rendering."""

from datetime import date
from decimal import Decimal

from expense_tracker.cli.formatter import (
    NO_EXPENSES,
    format_expense_row,
    format_expenses,
    format_header,
    format_total,
)
from expense_tracker.models.expense import Expense


def _expense(id, amount, memo, created_on=date(2024, 3, 1)):
    return Expense(id=id, amount=Decimal(amount), memo=memo, created_on=created_on)


class TestFormatExpenses:

    def test_empty_result(self):
        assert format_expenses([]) == ["There are no expenses."]
        assert NO_EXPENSES == "There are no expenses."

    def test_header_agrees_with_count(self):
        assert format_header(1) == "There is 1 expense"
        assert format_header(2) == "There are 2 expenses"
        assert format_header(10) == "There are 10 expenses"

    def test_row_columns_are_right_aligned(self):
        row = format_expense_row(_expense(1, "5.00", "coffee"))
        assert row == "  1 | 2024-03-01 |         5.00 | coffee"

    def test_memo_is_not_padded(self):
        row = format_expense_row(_expense(123, "9999.99", "a much longer memo text"))
        assert row == "123 | 2024-03-01 |      9999.99 | a much longer memo text"

    def test_amount_always_has_two_decimals(self):
        row = format_expense_row(_expense(2, "12.5", "books"))
        assert row.split(" | ")[2] == "       12.50"

    def test_two_row_listing(self):
        lines = format_expenses([
            _expense(1, "5.00", "coffee", date(2024, 3, 1)),
            _expense(2, "12.50", "books", date(2024, 3, 2)),
        ])
        assert lines == [
            "There are 2 expenses",
            "  1 | 2024-03-01 |         5.00 | coffee",
            "  2 | 2024-03-02 |        12.50 | books",
            "-" * 50,
            "Total " + " " * 20 + "17.50",
        ]

    def test_single_row_listing(self):
        lines = format_expenses([_expense(4, "0.01", "gum")])
        assert lines[0] == "There is 1 expense"
        assert lines[-1] == "Total " + "0.01".rjust(25)

    def test_total_covers_only_given_rows(self):
        rows = [_expense(1, "0.10", "a"), _expense(2, "0.20", "b")]
        assert format_total(rows) == "Total " + "0.30".rjust(25)

    def test_total_field_is_25_wide(self):
        total = format_total([_expense(1, "1234.56", "rent")])
        assert len(total) == len("Total ") + 25
