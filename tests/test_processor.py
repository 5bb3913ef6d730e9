import os
import time
from datetime import datetime, timedelta

import pytest
from finance_tracker.models import Debt, Expense
from finance_tracker.processor import (
    build_dashboard,
    empty_dashboard,
    months_remaining,
    summarize_debts,
    summarize_expenses,
)
from finance_tracker.rows import DEBT, EXPENSE, decode_grid

NOW = datetime(2024, 1, 20, 12, 0, 0)


@pytest.fixture
def expenses(expense_rows):
    return decode_grid(EXPENSE, expense_rows)


@pytest.fixture
def debts(debt_rows):
    return decode_grid(DEBT, debt_rows)


def make_debt(**kwargs):
    fields = dict(
        lender="Bank",
        loan_type="Personal Loan",
        principal_amount=1000,
        current_balance=500,
        emi_amount=100,
        interest_rate=10,
        start_date="2023-01-01",
        end_date="2025-01-01",
        status="Active",
    )
    fields.update(kwargs)
    return Debt(**fields)


def test_summarize_expenses_totals(expenses):
    summary = summarize_expenses(expenses, NOW)
    assert summary['totalExpenses'] == pytest.approx(3.5 + 40 + 82.1 + 15 + 12.4 + 30)
    assert summary['monthlyExpenses'] == pytest.approx(summary['totalExpenses'])


def test_monthly_expenses_only_counts_current_month():
    expenses = [
        Expense(date="2024-01-03", amount=10),
        Expense(date="2023-12-31", amount=20),
        Expense(date="2023-01-15", amount=40),
        Expense(date="not a date", amount=80),
    ]
    summary = summarize_expenses(expenses, NOW)
    assert summary['monthlyExpenses'] == 10
    assert summary['totalExpenses'] == 150


@pytest.fixture
def new_york_time():
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    original = os.environ.get("TZ")
    os.environ["TZ"] = "America/New_York"
    time.tzset()
    yield
    if original is None:
        del os.environ["TZ"]
    else:
        os.environ["TZ"] = original
    time.tzset()


def test_offset_dates_are_counted_in_local_month(new_york_time):
    # 03:30 UTC on Feb 1 is still Jan 31 in New York
    expenses = [Expense(date="2024-02-01T03:30:00+00:00", amount=25)]
    assert summarize_expenses(expenses, NOW)['monthlyExpenses'] == 25
    assert summarize_expenses(expenses, datetime(2024, 2, 10))['monthlyExpenses'] == 0


def test_recent_expenses_are_last_five_newest_first(expenses):
    recent = summarize_expenses(expenses, NOW)['recentExpenses']

    assert len(recent) == 5
    assert [r['id'] for r in recent] == ['expense_6', 'expense_5', 'expense_4', 'expense_3', 'expense_2']
    assert recent[0] == {
        'id': 'expense_6',
        'date': '2024-01-06',
        'description': 'Books',
        'category': 'Education',
        'amount': 30.0,
    }


def test_inactive_debts_are_excluded(debts):
    # One Active with balance 500, one Completed with balance 300
    summary = summarize_debts(debts, NOW)
    assert summary['totalDebts'] == 500
    assert summary['activeLoans'] == 1
    assert [emi['id'] for emi in summary['upcomingEMIs']] == ['debt_1']


def test_upcoming_emis_use_placeholder_due_date():
    debts = [make_debt(lender=f"Bank {i}", emi_amount=100 + i) for i in range(7)]
    emis = summarize_debts(debts, NOW)['upcomingEMIs']

    assert len(emis) == 5
    assert [e['lender'] for e in emis] == ['Bank 0', 'Bank 1', 'Bank 2', 'Bank 3', 'Bank 4']
    assert emis[0]['amount'] == 100
    assert emis[0]['dueDate'] == (NOW + timedelta(days=30)).isoformat()
    assert all(e['estimated'] for e in emis)


def test_build_dashboard_shape(expenses, debts):
    dashboard = build_dashboard(expenses, debts, NOW)
    assert set(dashboard) == {
        'totalExpenses', 'totalDebts', 'monthlyExpenses', 'activeLoans', 'recentExpenses', 'upcomingEMIs'
    }
    assert dashboard['activeLoans'] == 1


def test_empty_dashboard_is_zeroed():
    dashboard = empty_dashboard()
    assert dashboard['totalExpenses'] == 0
    assert dashboard['totalDebts'] == 0
    assert dashboard['monthlyExpenses'] == 0
    assert dashboard['activeLoans'] == 0
    assert dashboard['recentExpenses'] == []
    assert dashboard['upcomingEMIs'] == []


def test_months_remaining_from_balance():
    # 500 / 100 = 5 EMIs, end date far away
    assert months_remaining(make_debt(end_date="2030-01-01"), NOW) == 5


def test_months_remaining_rounds_up():
    assert months_remaining(make_debt(current_balance=450, end_date="2030-01-01"), NOW) == 5


def test_months_remaining_capped_by_end_date():
    # 2024-01-20 -> 2024-03-20 is 60 days, two 30-day months
    debt = make_debt(current_balance=10000, end_date="2024-03-20")
    assert months_remaining(debt, NOW) == 2


def test_months_remaining_past_end_date_is_zero():
    assert months_remaining(make_debt(end_date="2023-06-01"), NOW) == 0


def test_months_remaining_paid_off():
    assert months_remaining(make_debt(current_balance=0), NOW) == 0
    assert months_remaining(make_debt(emi_amount=0), NOW) == 0


def test_months_remaining_unparseable_end_date():
    assert months_remaining(make_debt(end_date="someday"), NOW) == 5
