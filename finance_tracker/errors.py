"""Error types shared by the sheet client, storage layer and API."""


class FinanceTrackerError(Exception):
    """Base class for errors surfaced to callers."""


class ConfigError(FinanceTrackerError):
    """Spreadsheet ID or credentials are missing."""


class ValidationError(FinanceTrackerError):
    """A write payload failed its entity schema.

    `errors` is a list of {"field": ..., "message": ...} dicts.
    """

    def __init__(self, errors, message: str = "Validation error"):
        super().__init__(message)
        self.message = message
        self.errors = errors


class RemoteError(FinanceTrackerError):
    """The Sheets API answered with a non-success status."""

    def __init__(self, status: int, body: str = ""):
        super().__init__(f"Google Sheets API error: {status} {body}".strip())
        self.status = status
        self.body = body
