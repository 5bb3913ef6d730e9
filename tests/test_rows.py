import pytest
from finance_tracker.models import Debt, Expense
from finance_tracker.rows import (
    DEBT,
    EXPENSE,
    decode,
    decode_grid,
    encode,
    parse_number,
)


def test_expense_round_trip():
    expense = Expense(
        date="2024-03-15",
        description="Dinner with friends",
        category="Food & Dining",
        payment_method="Credit Card",
        amount=1234.5,
        notes="birthday",
    )
    cells = encode(EXPENSE, expense)
    assert cells == ["2024-03-15", "Dinner with friends", "Food & Dining", "Credit Card", 1234.5, "birthday"]

    decoded = decode(EXPENSE, 1, cells)
    assert decoded.model_dump(exclude={"id"}) == expense.model_dump(exclude={"id"})
    assert decoded.id == "expense_1"


def test_expense_without_notes_encodes_empty_string():
    expense = Expense(date="2024-03-15", description="Tea", category="Other", payment_method="Cash", amount=1)
    assert encode(EXPENSE, expense)[-1] == ""


def test_debt_round_trip():
    debt = Debt(
        lender="HDFC Bank",
        loan_type="Home Loan",
        principal_amount=2500000,
        current_balance=1800000,
        emi_amount=24000,
        interest_rate=8.5,
        start_date="2020-04-01",
        end_date="2040-04-01",
        status="Active",
    )
    cells = encode(DEBT, debt)
    assert len(cells) == 10
    assert cells[8] == "Active"

    decoded = decode(DEBT, 3, cells)
    assert decoded.model_dump(exclude={"id"}) == debt.model_dump(exclude={"id"})
    assert decoded.id == "debt_3"


def test_short_expense_row_is_dropped():
    assert decode(EXPENSE, 1, ["2024-01-01", "Lunch"]) is None


def test_short_debt_row_is_dropped():
    assert decode(DEBT, 1, ["HDFC", "Home Loan", "100", "50", "10", "8", "2020-01-01", "2030-01-01"]) is None


def test_missing_trailing_cells_default_to_empty():
    expense = decode(EXPENSE, 2, ["2024-01-01", "Lunch", "Food & Dining", "Cash", "10"])
    assert expense.notes == ""
    debt = decode(DEBT, 2, ["HDFC", "Home Loan", "100", "50", "10", "8", "2020-01-01", "2030-01-01", "Active"])
    assert debt.notes == ""


def test_non_numeric_amount_decodes_to_zero():
    expense = decode(EXPENSE, 1, ["2024-01-01", "Lunch", "Food & Dining", "Cash", "abc"])
    assert expense is not None
    assert expense.amount == 0


@pytest.mark.parametrize("cell, expected", [
    ("12.5", 12.5),
    ("1,234.50", 1234.5),
    ("₹2,100", 2100.0),
    ("-40", -40.0),
    (7, 7.0),
])
def test_parse_number_parsed(cell, expected):
    parsed = parse_number(cell)
    assert parsed.value == expected
    assert not parsed.defaulted


@pytest.mark.parametrize("cell", ["abc", "", None, "NaN", "inf"])
def test_parse_number_defaulted(cell):
    parsed = parse_number(cell)
    assert parsed.value == 0
    assert parsed.defaulted


def test_parse_number_distinguishes_real_zero():
    assert parse_number("0") == (0.0, False)


def test_decode_grid_skips_header_and_malformed_rows(expense_rows):
    grid = expense_rows + [["2024-01-07", "Lunch"]]
    expenses = decode_grid(EXPENSE, grid)

    assert len(expenses) == 6
    assert expenses[0].id == "expense_1"
    assert expenses[-1].id == "expense_6"
    assert all(e.description != "Lunch" for e in expenses)


def test_decode_grid_keeps_raw_row_index_after_skipped_row(expense_rows):
    grid = [expense_rows[0], ["bad"], expense_rows[1]]
    expenses = decode_grid(EXPENSE, grid)
    assert [e.id for e in expenses] == ["expense_2"]


def test_decode_grid_empty_sheet():
    assert decode_grid(DEBT, []) == []


def test_unknown_kind():
    with pytest.raises(ValueError):
        decode("income", 1, [])
