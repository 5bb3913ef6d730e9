"""
Lazy header management for record sheets.

Each sheet is in one of two states, NO_HEADER or HEADER_PRESENT, and the only
transition is NO_HEADER -> HEADER_PRESENT, taken by appending the header row.
An existing first row is trusted as-is; it is never compared against the
expected header or repaired.

The check and the append are separate API calls. Two writers that both see
NO_HEADER will both append a header, leaving a duplicate header row. This is
accepted for a single-user tracker.
"""
from enum import Enum

from gspread.utils import rowcol_to_a1
from rich.console import Console
from rich.markup import escape

from finance_tracker.errors import RemoteError

console = Console()


class HeaderState(str, Enum):
    NO_HEADER = "no-header"
    HEADER_PRESENT = "header-present"


def header_range(width: int) -> str:
    """A1 range covering the first row, e.g. A1:F1 for six columns."""
    return f"A1:{rowcol_to_a1(1, max(width, 1))}"


def header_state(sheets, sheet_name: str, width: int = 1) -> HeaderState:
    """Reads the first row; raises RemoteError if the sheet cannot be read."""
    first_row = sheets.read(sheet_name, header_range(width))
    if first_row:
        return HeaderState.HEADER_PRESENT
    return HeaderState.NO_HEADER


def ensure_header(sheets, sheet_name: str, header: list[str]) -> bool:
    """
    Appends `header` when the sheet has no first row.

    A failed read is taken to mean the sheet does not exist yet: we try to
    create it, then append the header either way.

    Returns True if a header row was appended.
    """
    try:
        state = header_state(sheets, sheet_name, len(header))
    except RemoteError as e:
        console.print(f"[yellow]Sheet '{sheet_name}' may not exist yet ({e.status}), creating it.[/yellow]")
        try:
            sheets.create_sheet(sheet_name, len(header))
        except RemoteError as create_error:
            console.print(f"[yellow]Could not create sheet '{sheet_name}': {escape(create_error.body)}[/yellow]")
        state = HeaderState.NO_HEADER

    if state is HeaderState.HEADER_PRESENT:
        return False

    sheets.append(sheet_name, [list(header)])
    console.print(f"[green]Added header row to '{sheet_name}'.[/green]")
    return True
