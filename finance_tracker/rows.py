"""
Row codecs: typed records <-> ordered spreadsheet cells.

Decoding is lenient. Rows shorter than the required prefix are dropped,
missing trailing cells become "", and numeric cells that do not parse become 0.
`parse_number` reports which of those happened so callers can tell a stored
zero from a defaulted one.
"""
import math
import re
from typing import Callable, NamedTuple, Optional, Union

from rich.console import Console

from finance_tracker.config import (
    DEBT_COLUMNS,
    DEBT_MIN_CELLS,
    DEBTS_SHEET,
    EXPENSE_COLUMNS,
    EXPENSE_MIN_CELLS,
    EXPENSES_SHEET,
)
from finance_tracker.models import Debt, Expense

console = Console()

EXPENSE = "expense"
DEBT = "debt"

# Currency symbols and thousands separators Sheets adds to formatted numbers
_NUMBER_NOISE = re.compile(r"[,\s₹$€£¥]")


class ParsedNumber(NamedTuple):
    value: float
    defaulted: bool = False


def parse_number(cell) -> ParsedNumber:
    if isinstance(cell, (int, float)) and not isinstance(cell, bool):
        value = float(cell)
    else:
        try:
            value = float(_NUMBER_NOISE.sub("", str(cell or "")))
        except ValueError:
            return ParsedNumber(0.0, defaulted=True)
    if not math.isfinite(value):
        return ParsedNumber(0.0, defaulted=True)
    return ParsedNumber(value)


def _cell(cells: list, index: int) -> str:
    if index < len(cells) and cells[index] is not None:
        return str(cells[index])
    return ""


def _number(cells: list, index: int) -> float:
    return parse_number(_cell(cells, index)).value


def encode_expense(expense: Expense) -> list:
    return [
        expense.date,
        expense.description,
        expense.category,
        expense.payment_method,
        expense.amount,
        expense.notes or "",
    ]


def decode_expense(row_index: int, cells: list) -> Optional[Expense]:
    if len(cells) < EXPENSE_MIN_CELLS:
        return None
    return Expense(
        id=f"{EXPENSE}_{row_index}",
        date=_cell(cells, 0),
        description=_cell(cells, 1),
        category=_cell(cells, 2),
        payment_method=_cell(cells, 3),
        amount=_number(cells, 4),
        notes=_cell(cells, 5),
    )


def encode_debt(debt: Debt) -> list:
    return [
        debt.lender,
        debt.loan_type,
        debt.principal_amount,
        debt.current_balance,
        debt.emi_amount,
        debt.interest_rate,
        debt.start_date,
        debt.end_date,
        debt.status,
        debt.notes or "",
    ]


def decode_debt(row_index: int, cells: list) -> Optional[Debt]:
    if len(cells) < DEBT_MIN_CELLS:
        return None
    return Debt(
        id=f"{DEBT}_{row_index}",
        lender=_cell(cells, 0),
        loan_type=_cell(cells, 1),
        principal_amount=_number(cells, 2),
        current_balance=_number(cells, 3),
        emi_amount=_number(cells, 4),
        interest_rate=_number(cells, 5),
        start_date=_cell(cells, 6),
        end_date=_cell(cells, 7),
        status=_cell(cells, 8),
        notes=_cell(cells, 9),
    )


class EntityKind(NamedTuple):
    name: str
    sheet_name: str
    header: list
    encode: Callable
    decode: Callable


ENTITIES = {
    EXPENSE: EntityKind(EXPENSE, EXPENSES_SHEET, EXPENSE_COLUMNS, encode_expense, decode_expense),
    DEBT: EntityKind(DEBT, DEBTS_SHEET, DEBT_COLUMNS, encode_debt, decode_debt),
}


def get_entity(kind: str) -> EntityKind:
    try:
        return ENTITIES[kind]
    except KeyError:
        raise ValueError(f"Unknown entity kind: {kind!r}")


def encode(kind: str, record: Union[Expense, Debt]) -> list:
    return get_entity(kind).encode(record)


def decode(kind: str, row_index: int, cells: list):
    return get_entity(kind).decode(row_index, cells)


def decode_grid(kind: str, grid: list[list]) -> list:
    """Decodes every data row of a raw sheet grid (row 0 is the header)."""
    entity = get_entity(kind)
    records = []
    for i in range(1, len(grid)):
        record = entity.decode(i, grid[i])
        if record is None:
            console.print(f"[dim]Skipping malformed row {i} in {entity.sheet_name} ({len(grid[i])} cells)[/dim]")
            continue
        records.append(record)
    return records
