import json

import requests
from gspread.exceptions import APIError
from gspread.utils import a1_to_rowcol
from rich.console import Console

from finance_tracker.config import DEBT_COLUMNS, DEBTS_SHEET, EXPENSE_COLUMNS, EXPENSES_SHEET

console = Console()


def api_error(status: int, message: str) -> APIError:
    """Builds the same APIError gspread raises for a failed request."""
    response = requests.Response()
    response.status_code = status
    response.encoding = "utf-8"
    response._content = json.dumps(
        {"error": {"code": status, "message": message, "status": "INVALID_ARGUMENT"}}
    ).encode()
    return APIError(response)


def _split_range(range_name: str):
    if "!" in range_name:
        sheet_name, cells = range_name.split("!", 1)
    else:
        sheet_name, cells = range_name, None
    if sheet_name.startswith("'") and sheet_name.endswith("'"):
        sheet_name = sheet_name[1:-1].replace("''", "'")
    return sheet_name, cells


def _format_cell(value):
    # Sheets hands numbers back as formatted strings
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class MockSpreadsheet:
    def __init__(self, sheets):
        self.sheets = sheets  # sheet name -> list of rows

    def values_get(self, range_name, params=None):
        sheet_name, cells = _split_range(range_name)
        if sheet_name not in self.sheets:
            raise api_error(400, f"Unable to parse range: {range_name}")

        rows = self.sheets[sheet_name]
        if cells:
            start, _, end = cells.partition(":")
            first_row, first_col = a1_to_rowcol(start)
            last_row, last_col = a1_to_rowcol(end or start)
            rows = [row[first_col - 1:last_col] for row in rows[first_row - 1:last_row]]

        # The API omits trailing empty rows and the key itself when nothing is left
        while rows and not rows[-1]:
            rows = rows[:-1]
        response = {"range": range_name, "majorDimension": "ROWS"}
        if rows:
            response["values"] = [list(row) for row in rows]
        return response

    def values_append(self, range_name, params=None, body=None):
        sheet_name, _ = _split_range(range_name)
        if sheet_name not in self.sheets:
            raise api_error(400, f"Unable to parse range: {range_name}")

        values = (body or {}).get("values", [])
        self.sheets[sheet_name].extend([_format_cell(v) for v in row] for row in values)
        console.print(f"[bold cyan][Mock][/bold cyan] Appended {len(values)} row(s) to {sheet_name}.")
        return {"spreadsheetId": "mock_id", "updates": {"updatedRows": len(values)}}

    def add_worksheet(self, title, rows=1000, cols=26):
        if title in self.sheets:
            raise api_error(400, f'A sheet with the name "{title}" already exists.')
        self.sheets[title] = []
        return title


class MockClient:
    def __init__(self, sheets=None):
        self.sheets = sheets if sheets is not None else {}

    def open_by_key(self, key):
        return MockSpreadsheet(self.sheets)


def get_mock_data():
    """Returns some default mock data for the spreadsheet."""
    return {
        EXPENSES_SHEET: [
            list(EXPENSE_COLUMNS),
            ["2024-01-05", "Groceries at market", "Groceries", "UPI", "1250", ""],
            ["2024-01-12", "Electricity bill", "Bills & Utilities", "Net Banking", "2100", "January"],
            ["2024-02-02", "Movie night", "Entertainment", "Credit Card", "600", ""],
        ],
        DEBTS_SHEET: [
            list(DEBT_COLUMNS),
            ["HDFC Bank", "Home Loan", "2500000", "1800000", "24000", "8.5", "2020-04-01", "2040-04-01", "Active", ""],
            ["SBI", "Car Loan", "600000", "0", "12500", "9.2", "2019-01-01", "2024-01-01", "Completed", "Closed early"],
        ],
    }


_client = None


def get_client(credentials_path: str = None):
    """Process-wide in-memory client so writes survive between requests."""
    global _client
    if _client is None:
        _client = MockClient(get_mock_data())
    return _client
