import pytest

from finance_tracker.config import DEBT_COLUMNS, DEBTS_SHEET, EXPENSE_COLUMNS, EXPENSES_SHEET
from finance_tracker.mock_sheets_client import MockClient
from finance_tracker.sheets_client import SheetsClient


@pytest.fixture
def expense_rows():
    return [
        list(EXPENSE_COLUMNS),
        ["2024-01-01", "Coffee", "Food & Dining", "Cash", "3.50", ""],
        ["2024-01-02", "Bus pass", "Transportation", "UPI", "40", "monthly"],
        ["2024-01-03", "Groceries", "Groceries", "Debit Card", "82.10"],
        ["2024-01-04", "Cinema", "Entertainment", "Credit Card", "15", ""],
        ["2024-01-05", "Pharmacy", "Healthcare", "Cash", "12.40", ""],
        ["2024-01-06", "Books", "Education", "Net Banking", "30", ""],
    ]


@pytest.fixture
def debt_rows():
    return [
        list(DEBT_COLUMNS),
        ["HDFC Bank", "Home Loan", "2500000", "500", "24000", "8.5", "2020-04-01", "2040-04-01", "Active", ""],
        ["SBI", "Car Loan", "600000", "300", "12500", "9.2", "2019-01-01", "2024-01-01", "Completed"],
    ]


@pytest.fixture
def mock_client(expense_rows, debt_rows):
    return MockClient({EXPENSES_SHEET: expense_rows, DEBTS_SHEET: debt_rows})


@pytest.fixture
def sheets(mock_client):
    return SheetsClient(client=mock_client, spreadsheet_id="test_spreadsheet_id")
