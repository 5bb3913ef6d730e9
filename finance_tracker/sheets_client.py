from pathlib import Path
from typing import Optional

import gspread
from gspread.exceptions import APIError, SpreadsheetNotFound
from gspread.utils import absolute_range_name
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials
from requests.exceptions import RequestException
from rich.console import Console
from rich.markup import escape

from finance_tracker.config import (
    CREDENTIALS_PATH,
    GOOGLE_SHEETS_API_KEY,
    NOT_CONFIGURED_MESSAGE,
    SPREADSHEET_ID,
    USE_MOCK,
)
from finance_tracker.errors import ConfigError, RemoteError

console = Console()

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def is_configured() -> bool:
    """True when a spreadsheet ID and some credential are available."""
    if USE_MOCK:
        return True
    has_credentials = bool(GOOGLE_SHEETS_API_KEY) or bool(CREDENTIALS_PATH and Path(CREDENTIALS_PATH).exists())
    return bool(SPREADSHEET_ID) and has_credentials


def get_client(credentials_path: Optional[str] = None):
    """Authenticates with Google Sheets.

    A service account file is preferred; the API key is the fallback.
    """
    if USE_MOCK:
        from finance_tracker.mock_sheets_client import get_client as get_mock_client
        return get_mock_client()

    if credentials_path and Path(credentials_path).exists():
        creds = Credentials.from_service_account_file(credentials_path, scopes=SCOPES)
        return gspread.authorize(creds)

    if GOOGLE_SHEETS_API_KEY:
        return gspread.api_key(GOOGLE_SHEETS_API_KEY)

    raise ConfigError(NOT_CONFIGURED_MESSAGE)


def _remote_error(error: Exception) -> RemoteError:
    """Maps any failure talking to Google into a RemoteError."""
    if isinstance(error, APIError):
        response = error.response
        return RemoteError(response.status_code, response.text)
    if isinstance(error, GoogleAuthError):
        return RemoteError(401, f"Authentication failed: {error}")
    # Network level: no response from the API at all
    return RemoteError(503, f"{type(error).__name__}: {error}")


# Everything the Sheets round trip may raise besides our own errors
REMOTE_FAILURES = (APIError, GoogleAuthError, RequestException)


class SheetsClient:
    """
    Range read/append over a single spreadsheet.

    The spreadsheet is opened lazily on first use, so constructing a client
    never touches the network.
    """

    def __init__(self, client=None, spreadsheet_id: Optional[str] = None):
        self._client = client
        self._spreadsheet_id = spreadsheet_id or SPREADSHEET_ID
        self._spreadsheet = None

    def _get_spreadsheet(self):
        if self._spreadsheet is not None:
            return self._spreadsheet

        if not self._spreadsheet_id and not USE_MOCK:
            raise ConfigError(NOT_CONFIGURED_MESSAGE)

        try:
            if self._client is None:
                self._client = get_client(CREDENTIALS_PATH)
            self._spreadsheet = self._client.open_by_key(self._spreadsheet_id)
        except SpreadsheetNotFound:
            raise RemoteError(404, f"Spreadsheet not found: {self._spreadsheet_id}")
        except REMOTE_FAILURES as e:
            raise _remote_error(e) from e
        return self._spreadsheet

    def read(self, sheet_name: str, cell_range: Optional[str] = None) -> list[list[str]]:
        """Returns the cells of `sheet_name` (optionally limited to an A1 range)."""
        spreadsheet = self._get_spreadsheet()
        try:
            response = spreadsheet.values_get(absolute_range_name(sheet_name, cell_range))
        except REMOTE_FAILURES as e:
            error = _remote_error(e)
            console.print(f"[red]Google Sheets API error reading {sheet_name}: {escape(error.body)}[/red]")
            raise error from e
        return response.get("values", [])

    def append(self, sheet_name: str, rows: list[list]) -> dict:
        """
        Appends rows after the last row of `sheet_name`.
        Cells are sent USER_ENTERED so Sheets coerces numbers and dates itself.
        Not idempotent: a retry appends the rows again.
        """
        spreadsheet = self._get_spreadsheet()
        try:
            return spreadsheet.values_append(
                absolute_range_name(sheet_name),
                params={"valueInputOption": "USER_ENTERED"},
                body={"majorDimension": "ROWS", "values": rows},
            )
        except REMOTE_FAILURES as e:
            error = _remote_error(e)
            console.print(f"[red]Google Sheets API error appending to {sheet_name}: {escape(error.body)}[/red]")
            raise error from e

    def create_sheet(self, sheet_name: str, cols: int):
        spreadsheet = self._get_spreadsheet()
        try:
            return spreadsheet.add_worksheet(title=sheet_name, rows=1000, cols=cols)
        except REMOTE_FAILURES as e:
            raise _remote_error(e) from e
