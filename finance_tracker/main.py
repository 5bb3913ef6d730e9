import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from typing import Optional

from finance_tracker.config import ACTIVE_STATUS, NOT_CONFIGURED_MESSAGE
from finance_tracker.errors import FinanceTrackerError, ValidationError
from finance_tracker.processor import build_dashboard, months_remaining
from finance_tracker.rows import DEBT, EXPENSE
from finance_tracker.sheets_client import SheetsClient, is_configured
from finance_tracker.storage import SheetStorage, validate_record

app = typer.Typer(help="Track expenses and loans in Google Sheets.")
console = Console()


def get_storage() -> Optional[SheetStorage]:
    if not is_configured():
        return None
    return SheetStorage(SheetsClient())


def load_records(kind: str) -> list:
    storage = get_storage()
    if storage is None:
        console.print(f"[yellow]{NOT_CONFIGURED_MESSAGE}[/yellow]")
        return []
    return storage.list_or_empty(kind)


def save_record(kind: str, data: dict):
    """Validates and appends one record, exiting non-zero on any failure."""
    storage = get_storage()
    if storage is None:
        console.print(f"[bold red]{NOT_CONFIGURED_MESSAGE}[/bold red]")
        raise typer.Exit(code=1)

    try:
        record = validate_record(kind, data)
        storage.append_record(kind, record)
    except ValidationError as e:
        console.print("[bold red]Validation error:[/bold red]")
        for err in e.errors:
            console.print(f"  [red]{err['field']}: {escape(err['message'])}[/red]")
        raise typer.Exit(code=1)
    except FinanceTrackerError as e:
        console.print(f"[bold red]Error: {escape(str(e))}[/bold red]")
        raise typer.Exit(code=1)


@app.command()
def dashboard():
    """
    Show totals, this month's spending, recent expenses and upcoming EMIs.
    """
    summary = build_dashboard(load_records(EXPENSE), load_records(DEBT))

    table = Table(title="Dashboard")
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", justify="right", style="bold magenta")
    table.add_row("Total Expenses", f"{summary['totalExpenses']:.2f}")
    table.add_row("This Month", f"{summary['monthlyExpenses']:.2f}")
    table.add_row("Total Debts", f"{summary['totalDebts']:.2f}")
    table.add_row("Active Loans", str(summary['activeLoans']))
    console.print(table)

    recent = Table(title="Recent Expenses")
    for col in ["Date", "Description", "Category"]:
        recent.add_column(col)
    recent.add_column("Amount", justify="right")
    for item in summary['recentExpenses']:
        recent.add_row(escape(item['date']), escape(item['description']), escape(item['category']), f"{item['amount']:.2f}")
    console.print(recent)

    emis = Table(title="Upcoming EMIs (due dates estimated)")
    emis.add_column("Lender")
    emis.add_column("EMI", justify="right")
    emis.add_column("Due", style="yellow")
    for item in summary['upcomingEMIs']:
        emis.add_row(escape(item['lender']), f"{item['amount']:.2f}", item['dueDate'][:10])
    console.print(emis)


@app.command()
def expenses(limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Show only the N most recent expenses")):
    """List expenses, most recent first."""
    records = list(reversed(load_records(EXPENSE)))
    if limit is not None:
        records = records[:limit]

    if not records:
        console.print("[yellow]No expenses recorded.[/yellow]")
        return

    table = Table(title=f"Expenses ({len(records)})")
    for col in ["ID", "Date", "Description", "Category", "Payment Method"]:
        table.add_column(col)
    table.add_column("Amount", justify="right", style="bold")
    table.add_column("Notes", style="dim")
    for e in records:
        table.add_row(
            e.id, escape(e.date), escape(e.description), escape(e.category),
            escape(e.payment_method), f"{e.amount:.2f}", escape(e.notes),
        )
    console.print(table)


@app.command()
def debts():
    """List debts and loans with an estimate of EMIs remaining."""
    records = load_records(DEBT)
    if not records:
        console.print("[yellow]No debts recorded.[/yellow]")
        return

    table = Table(title=f"Debts & Loans ({len(records)})")
    for col in ["ID", "Lender", "Type"]:
        table.add_column(col)
    for col in ["Principal", "Balance", "EMI", "Rate %"]:
        table.add_column(col, justify="right")
    table.add_column("Status")
    table.add_column("Months Left", justify="right", style="cyan")
    for d in records:
        status_style = "green" if d.status == ACTIVE_STATUS else "dim"
        table.add_row(
            d.id, escape(d.lender), escape(d.loan_type),
            f"{d.principal_amount:.2f}", f"{d.current_balance:.2f}",
            f"{d.emi_amount:.2f}", f"{d.interest_rate:.2f}",
            f"[{status_style}]{escape(d.status)}[/{status_style}]",
            str(months_remaining(d)),
        )
    console.print(table)


@app.command("add-expense")
def add_expense(
    date: str = typer.Option(..., "--date", "-d", help="Expense date, e.g. 2024-05-31"),
    description: str = typer.Option(..., "--description", help="What the money was spent on"),
    category: str = typer.Option(..., "--category", "-c", help="Category label, e.g. 'Groceries'"),
    payment_method: str = typer.Option(..., "--payment-method", "-p", help="e.g. Cash, UPI, Credit Card"),
    amount: float = typer.Option(..., "--amount", "-a", help="Amount spent (must be positive)"),
    notes: str = typer.Option("", "--notes", help="Optional notes"),
):
    """Record a new expense."""
    save_record(EXPENSE, {
        "date": date,
        "description": description,
        "category": category,
        "paymentMethod": payment_method,
        "amount": amount,
        "notes": notes,
    })
    console.print("[bold green]Expense added successfully to Google Sheets[/bold green]")


@app.command("add-debt")
def add_debt(
    lender: str = typer.Option(..., "--lender", help="Bank or lender name"),
    loan_type: str = typer.Option(..., "--loan-type", "-t", help="e.g. Home Loan, Car Loan"),
    principal: float = typer.Option(..., "--principal", help="Original loan amount"),
    balance: float = typer.Option(..., "--balance", help="Outstanding balance"),
    emi: float = typer.Option(..., "--emi", help="Monthly installment"),
    rate: float = typer.Option(..., "--rate", help="Annual interest rate in %"),
    start_date: str = typer.Option(..., "--start-date", help="Loan start date, e.g. 2022-01-01"),
    end_date: str = typer.Option(..., "--end-date", help="Loan end date, e.g. 2027-01-01"),
    status: str = typer.Option(ACTIVE_STATUS, "--status", help="Active, Completed, Defaulted or Prepaid"),
    notes: str = typer.Option("", "--notes", help="Optional notes"),
):
    """Record a new debt or loan."""
    save_record(DEBT, {
        "lender": lender,
        "loanType": loan_type,
        "principalAmount": principal,
        "currentBalance": balance,
        "emiAmount": emi,
        "interestRate": rate,
        "startDate": start_date,
        "endDate": end_date,
        "status": status,
        "notes": notes,
    })
    console.print("[bold green]Debt/Loan added successfully to Google Sheets[/bold green]")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    port: int = typer.Option(8000, "--port", help="Port to listen on"),
):
    """Run the HTTP API."""
    import uvicorn
    uvicorn.run("finance_tracker.server:app", host=host, port=port)


if __name__ == "__main__":
    app()
