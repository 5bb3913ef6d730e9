"""
FastAPI server for the finance tracker.
Reads and appends expenses and debts in Google Sheets and serves the dashboard summary.
"""
from typing import Any, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape

from finance_tracker.config import (
    CORS_ORIGINS,
    EXPENSE_CATEGORIES,
    LOAN_STATUSES,
    LOAN_TYPES,
    NOT_CONFIGURED_MESSAGE,
    PAYMENT_METHODS,
)
from finance_tracker.errors import ConfigError, RemoteError, ValidationError
from finance_tracker.processor import build_dashboard, empty_dashboard
from finance_tracker.rows import DEBT, EXPENSE
from finance_tracker.sheets_client import SheetsClient, is_configured
from finance_tracker.storage import SheetStorage, validate_record

console = Console()

app = FastAPI(title="Finance Tracker API", version="1.0.0")

# Enable CORS for the browser frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

SUCCESS_MESSAGES = {
    EXPENSE: "Expense added successfully to Google Sheets",
    DEBT: "Debt/Loan added successfully to Google Sheets",
}


class SheetsWriteRequest(BaseModel):
    type: Optional[str] = None
    data: Any = None


def get_sheets_client() -> Optional[SheetsClient]:
    """None when Google Sheets is not configured."""
    if not is_configured():
        return None
    return SheetsClient()


@app.exception_handler(ConfigError)
def config_error_handler(request: Request, exc: ConfigError):
    return JSONResponse(status_code=400, content={"message": str(exc)})


@app.exception_handler(ValidationError)
def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"message": exc.message, "errors": exc.errors})


@app.exception_handler(RequestValidationError)
def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"message": "Invalid request body", "errors": errors})


@app.exception_handler(RemoteError)
def remote_error_handler(request: Request, exc: RemoteError):
    console.print(f"[bold red]Google Sheets request failed: {escape(str(exc))}[/bold red]")
    return JSONResponse(status_code=500, content={"message": str(exc)})


@app.get("/api/health")
def health_check():
    return {"status": "ok"}


@app.get("/api/options")
def list_options():
    """Label sets offered by the entry forms."""
    return {
        "categories": EXPENSE_CATEGORIES,
        "paymentMethods": PAYMENT_METHODS,
        "loanTypes": LOAN_TYPES,
        "loanStatuses": LOAN_STATUSES,
    }


@app.get("/api/sheets")
def read_sheets(kind: Optional[str] = Query(None, alias="type"), sheets: Optional[SheetsClient] = Depends(get_sheets_client)):
    """
    Expenses (newest first), debts (insertion order) or, by default, the
    dashboard summary. Never fails because of the spreadsheet: a missing
    configuration or an unreadable sheet yields empty data.
    """
    if sheets is None:
        console.print("[yellow]Google Sheets not configured, returning empty data.[/yellow]")
        return {
            "message": NOT_CONFIGURED_MESSAGE,
            **empty_dashboard(),
            "expenses": [],
            "debts": [],
        }

    storage = SheetStorage(sheets)

    if kind == "expenses":
        expenses = storage.list_or_empty(EXPENSE)
        return {"expenses": [e.to_json() for e in reversed(expenses)]}

    if kind == "debts":
        debts = storage.list_or_empty(DEBT)
        return {"debts": [d.to_json() for d in debts]}

    return build_dashboard(storage.list_or_empty(EXPENSE), storage.list_or_empty(DEBT))


@app.post("/api/sheets")
def write_sheets(request: SheetsWriteRequest, sheets: Optional[SheetsClient] = Depends(get_sheets_client)):
    """Validates and appends one expense or debt."""
    if sheets is None:
        raise ConfigError(NOT_CONFIGURED_MESSAGE)

    if request.type not in SUCCESS_MESSAGES:
        return JSONResponse(
            status_code=400,
            content={"message": 'Invalid request type. Use "expense" or "debt".'},
        )

    record = validate_record(request.type, request.data)
    SheetStorage(sheets).append_record(request.type, record)
    return {"message": SUCCESS_MESSAGES[request.type]}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
