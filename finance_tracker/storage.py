"""
Sheet-backed storage for expenses and debts.

Two operations: `list_records(kind)` scans the whole sheet on every call, and
`append_record(kind, record)` bootstraps the header row if needed and then
appends. There is no update, delete, cache or retry.
"""
from typing import Union

from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.markup import escape

from finance_tracker.errors import ConfigError, RemoteError, ValidationError
from finance_tracker.models import Debt, DebtForm, Expense, ExpenseForm
from finance_tracker.rows import DEBT, EXPENSE, decode_grid, encode, get_entity
from finance_tracker.schema import ensure_header

console = Console()

FORMS = {
    EXPENSE: ExpenseForm,
    DEBT: DebtForm,
}


def _field_errors(error: PydanticValidationError) -> list[dict]:
    errors = []
    for err in error.errors():
        ctx_error = err.get("ctx", {}).get("error")
        errors.append({
            "field": ".".join(str(part) for part in err["loc"]) or "__root__",
            "message": str(ctx_error) if ctx_error else err["msg"],
        })
    return errors


def validate_record(kind: str, data) -> Union[Expense, Debt]:
    """Checks a write payload against the entity's form; raises ValidationError."""
    form = FORMS[get_entity(kind).name]
    if not isinstance(data, dict):
        raise ValidationError([{"field": "data", "message": "Record data must be an object"}])
    try:
        return form.model_validate(data).to_record()
    except PydanticValidationError as e:
        raise ValidationError(_field_errors(e))


class SheetStorage:
    def __init__(self, sheets):
        self.sheets = sheets

    def list_records(self, kind: str) -> list:
        """All decodable records of `kind` in insertion order. Raises RemoteError."""
        entity = get_entity(kind)
        grid = self.sheets.read(entity.sheet_name)
        return decode_grid(kind, grid)

    def list_or_empty(self, kind: str) -> list:
        """`list_records`, degrading to [] when the sheet cannot be read."""
        try:
            return self.list_records(kind)
        except (RemoteError, ConfigError) as e:
            console.print(f"[yellow]Could not read {get_entity(kind).sheet_name}: {escape(str(e))}. Using empty list.[/yellow]")
            return []

    def append_record(self, kind: str, record: Union[Expense, Debt]) -> dict:
        """
        Appends one record. A header-only append followed by a failed data
        append leaves the sheet with just a header; nothing is rolled back.
        """
        entity = get_entity(kind)
        ensure_header(self.sheets, entity.sheet_name, entity.header)
        result = self.sheets.append(entity.sheet_name, [encode(kind, record)])
        console.print(f"[green]Added {kind} to {entity.sheet_name}.[/green]")
        return result
