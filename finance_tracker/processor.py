import math
from datetime import datetime, timedelta
from typing import Optional

import pandas as pd

from finance_tracker.config import (
    ACTIVE_STATUS,
    EMI_DUE_OFFSET_DAYS,
    RECENT_EXPENSES_LIMIT,
    UPCOMING_EMIS_LIMIT,
)
from finance_tracker.models import Debt, Expense

EXPENSE_FIELDS = ['id', 'date', 'description', 'category', 'amount']


def _parse_date(value) -> pd.Timestamp:
    """Per-cell parse so rows typed in different formats all get a chance."""
    if not value:
        return pd.NaT
    try:
        parsed = pd.to_datetime(value, errors='coerce')
    except (ValueError, TypeError, OverflowError):
        return pd.NaT
    # Offset-bearing cells are moved to server local time, then made naive
    if not pd.isna(parsed) and parsed.tzinfo is not None:
        parsed = pd.Timestamp(datetime.fromtimestamp(parsed.timestamp()))
    return parsed


def expenses_frame(expenses: list[Expense]) -> pd.DataFrame:
    """One row per expense, in insertion order, with a parsed DATE column."""
    df = pd.DataFrame([e.model_dump() for e in expenses], columns=list(Expense.model_fields))
    df['amount'] = pd.to_numeric(df['amount'], errors='coerce').fillna(0.0)
    df['DATE'] = df['date'].map(_parse_date)
    return df


def debts_frame(debts: list[Debt]) -> pd.DataFrame:
    df = pd.DataFrame([d.model_dump() for d in debts], columns=list(Debt.model_fields))
    for col in ['principal_amount', 'current_balance', 'emi_amount', 'interest_rate']:
        df[col] = pd.to_numeric(df[col], errors='coerce').fillna(0.0)
    return df


def summarize_expenses(expenses: list[Expense], now: Optional[datetime] = None) -> dict:
    """
    Totals over every expense, the current month's total (server local time)
    and the last few inserted expenses, newest first.
    """
    now = now or datetime.now()
    df = expenses_frame(expenses)

    if df.empty:
        return {'totalExpenses': 0.0, 'monthlyExpenses': 0.0, 'recentExpenses': []}

    dates = pd.to_datetime(df['DATE'], errors='coerce')
    this_month = (dates.dt.year == now.year) & (dates.dt.month == now.month)

    recent = df.iloc[::-1].head(RECENT_EXPENSES_LIMIT)
    recent_expenses = [
        {field: (float(row[field]) if field == 'amount' else row[field]) for field in EXPENSE_FIELDS}
        for _, row in recent.iterrows()
    ]

    return {
        'totalExpenses': float(df['amount'].sum()),
        'monthlyExpenses': float(df.loc[this_month, 'amount'].sum()),
        'recentExpenses': recent_expenses,
    }


def summarize_debts(debts: list[Debt], now: Optional[datetime] = None) -> dict:
    """
    Outstanding balance and count of Active debts, plus the first few Active
    debts as upcoming EMIs.

    The EMI due date is a placeholder (now + 30 days); no due-day is stored,
    so each entry is marked `estimated`.
    """
    now = now or datetime.now()
    df = debts_frame(debts)

    if df.empty:
        return {'totalDebts': 0.0, 'activeLoans': 0, 'upcomingEMIs': []}

    active = df[df['status'] == ACTIVE_STATUS]
    due_date = (now + timedelta(days=EMI_DUE_OFFSET_DAYS)).isoformat()

    upcoming = [
        {
            'id': row['id'],
            'lender': row['lender'],
            'amount': float(row['emi_amount']),
            'dueDate': due_date,
            'estimated': True,
        }
        for _, row in active.head(UPCOMING_EMIS_LIMIT).iterrows()
    ]

    return {
        'totalDebts': float(active['current_balance'].sum()),
        'activeLoans': int(len(active)),
        'upcomingEMIs': upcoming,
    }


def build_dashboard(expenses: list[Expense], debts: list[Debt], now: Optional[datetime] = None) -> dict:
    now = now or datetime.now()
    summary = summarize_expenses(expenses, now)
    summary.update(summarize_debts(debts, now))
    return {
        'totalExpenses': summary['totalExpenses'],
        'totalDebts': summary['totalDebts'],
        'monthlyExpenses': summary['monthlyExpenses'],
        'activeLoans': summary['activeLoans'],
        'recentExpenses': summary['recentExpenses'],
        'upcomingEMIs': summary['upcomingEMIs'],
    }


def empty_dashboard() -> dict:
    return build_dashboard([], [])


def months_remaining(debt: Debt, now: Optional[datetime] = None) -> int:
    """
    Rough number of EMIs left: balance / EMI rounded up, capped by the 30-day
    months until the end date. Ignores interest and changing EMIs.
    """
    if debt.current_balance <= 0 or debt.emi_amount <= 0:
        return 0
    now = now or datetime.now()
    months = math.ceil(debt.current_balance / debt.emi_amount)

    end = _parse_date(debt.end_date)
    if pd.isna(end):
        return months
    max_months = math.ceil((end - pd.Timestamp(now)) / pd.Timedelta(days=30))
    return min(months, max(0, max_months))
