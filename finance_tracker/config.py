# Configuration for Finance Tracker

import json
import os
from pathlib import Path

ROOT_DIR = Path(__file__).parent.parent


def load_sheet_config():
    """Loads spreadsheet settings from config/sheet_config.json if it exists."""
    config_path = ROOT_DIR / "config/sheet_config.json"

    if config_path.exists():
        with open(config_path, 'r') as f:
            return json.load(f)
    return {}


_sheet_config = load_sheet_config()

# Environment wins over the JSON file. Missing values mean "not configured",
# which reads tolerate and writes reject.
SPREADSHEET_ID = os.environ.get("SPREADSHEET_ID") or _sheet_config.get("spreadsheet_id", "")
GOOGLE_SHEETS_API_KEY = os.environ.get("GOOGLE_SHEETS_API_KEY") or _sheet_config.get("api_key", "")
CREDENTIALS_PATH = os.environ.get("GOOGLE_SHEETS_CREDENTIALS") or _sheet_config.get("credentials_path", "")

USE_MOCK = os.environ.get("FINANCE_TRACKER_USE_MOCK", "").lower() in ("1", "true", "yes")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("FINANCE_TRACKER_CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

EXPENSES_SHEET = "Expenses"
DEBTS_SHEET = "Debts"

# Header rows, in storage order
EXPENSE_COLUMNS = ["Date", "Description", "Category", "Payment Method", "Amount", "Notes"]
DEBT_COLUMNS = [
    "Lender",
    "Loan Type",
    "Principal Amount",
    "Current Balance",
    "EMI Amount",
    "Interest Rate",
    "Start Date",
    "End Date",
    "Status",
    "Notes"
]

# Rows shorter than this are treated as malformed and skipped
EXPENSE_MIN_CELLS = 5
DEBT_MIN_CELLS = 9

RECENT_EXPENSES_LIMIT = 5
UPCOMING_EMIS_LIMIT = 5
# Placeholder EMI due date offset; there is no real due-day column
EMI_DUE_OFFSET_DAYS = 30

EXPENSE_CATEGORIES = [
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Bills & Utilities",
    "Healthcare",
    "Education",
    "Travel",
    "Groceries",
    "Personal Care",
    "Home & Garden",
    "Gifts & Donations",
    "Business",
    "Other"
]

PAYMENT_METHODS = [
    "Cash",
    "Credit Card",
    "Debit Card",
    "Bank Transfer",
    "Digital Wallet",
    "UPI",
    "Net Banking",
    "Cheque"
]

LOAN_TYPES = [
    "Personal Loan",
    "Home Loan",
    "Car Loan",
    "Education Loan",
    "Credit Card",
    "Business Loan",
    "Gold Loan",
    "Other"
]

LOAN_STATUSES = ["Active", "Completed", "Defaulted", "Prepaid"]
ACTIVE_STATUS = "Active"

NOT_CONFIGURED_MESSAGE = (
    "Google Sheets integration not configured. Please add GOOGLE_SHEETS_API_KEY "
    "(or GOOGLE_SHEETS_CREDENTIALS) and SPREADSHEET_ID to your environment variables."
)
