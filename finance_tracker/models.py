"""
Record types.

`Expense` and `Debt` are what comes back out of a sheet: no constraints, since
a stored row may hold anything a person typed into the spreadsheet.
`ExpenseForm` and `DebtForm` are what a client may write and carry the
validation rules.

JSON uses camelCase field names; Python attributes are snake_case.
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from finance_tracker.config import ACTIVE_STATUS, LOAN_STATUSES


class Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class Expense(Record):
    # Position-derived ("expense_<row>"), changes if rows above are removed
    id: Optional[str] = None
    date: str = ""
    description: str = ""
    category: str = ""
    payment_method: str = Field("", alias="paymentMethod")
    amount: float = 0.0
    notes: str = ""


class Debt(Record):
    id: Optional[str] = None
    lender: str = ""
    loan_type: str = Field("", alias="loanType")
    principal_amount: float = Field(0.0, alias="principalAmount")
    current_balance: float = Field(0.0, alias="currentBalance")
    emi_amount: float = Field(0.0, alias="emiAmount")
    interest_rate: float = Field(0.0, alias="interestRate")
    start_date: str = Field("", alias="startDate")
    end_date: str = Field("", alias="endDate")
    status: str = ""
    notes: str = ""

    @property
    def is_active(self) -> bool:
        return self.status == ACTIVE_STATUS


REQUIRED_LABELS = {
    "date": "Date",
    "description": "Description",
    "category": "Category",
    "payment_method": "Payment method",
    "lender": "Lender name",
    "loan_type": "Loan type",
    "start_date": "Start date",
    "end_date": "End date",
}


def _parse_date(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


class Form(BaseModel):
    # Amounts must be finite; inf/nan are rejected before the sign checks
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    @field_validator("notes", mode="before", check_fields=False)
    @classmethod
    def notes_default(cls, v):
        return "" if v is None else v


class ExpenseForm(Form):
    date: str
    description: str
    category: str
    payment_method: str = Field(alias="paymentMethod")
    amount: float
    notes: str = ""

    @field_validator("date", "description", "category", "payment_method")
    @classmethod
    def required_text(cls, v: str, info: ValidationInfo) -> str:
        v = v.strip()
        if not v:
            raise ValueError(f"{REQUIRED_LABELS[info.field_name]} is required")
        return v

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Amount must be positive")
        return v

    def to_record(self) -> Expense:
        return Expense(**self.model_dump())


class DebtForm(Form):
    lender: str
    loan_type: str = Field(alias="loanType")
    principal_amount: float = Field(alias="principalAmount")
    current_balance: float = Field(alias="currentBalance")
    emi_amount: float = Field(alias="emiAmount")
    interest_rate: float = Field(alias="interestRate")
    start_date: str = Field(alias="startDate")
    end_date: str = Field(alias="endDate")
    status: str = ACTIVE_STATUS
    notes: str = ""

    @field_validator("lender", "loan_type", "start_date", "end_date")
    @classmethod
    def required_text(cls, v: str, info: ValidationInfo) -> str:
        v = v.strip()
        if not v:
            raise ValueError(f"{REQUIRED_LABELS[info.field_name]} is required")
        return v

    @field_validator("principal_amount")
    @classmethod
    def principal_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Principal amount must be positive")
        return v

    @field_validator("current_balance")
    @classmethod
    def balance_not_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Current balance cannot be negative")
        return v

    @field_validator("emi_amount")
    @classmethod
    def emi_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("EMI amount must be positive")
        return v

    @field_validator("interest_rate")
    @classmethod
    def rate_not_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Interest rate cannot be negative")
        return v

    @field_validator("status")
    @classmethod
    def known_status(cls, v: str) -> str:
        v = v.strip()
        if v not in LOAN_STATUSES:
            raise ValueError(f"Status must be one of {', '.join(LOAN_STATUSES)}")
        return v

    @model_validator(mode="after")
    def end_after_start(self):
        start, end = _parse_date(self.start_date), _parse_date(self.end_date)
        if start and end and end <= start:
            raise ValueError("End date must be after start date")
        return self

    def to_record(self) -> Debt:
        return Debt(**self.model_dump())
