"""Tests for the dashboard summary."""

import pytest
from datetime import date, timedelta
from decimal import Decimal

from finance_tracker.models import AlertKind
from finance_tracker.queries import DashboardQueries


TODAY = date(2024, 6, 15)


@pytest.fixture
def dashboard(ledger, expenses, taxes, investments):
    return DashboardQueries(
        ledger=ledger,
        expenses=expenses,
        taxes=taxes,
        investments=investments,
    )


class TestDashboardQueries:

    def test_empty_tracker(self, dashboard):
        summary = dashboard.summary()
        assert summary.total_balance == Decimal("0")
        assert summary.available == Decimal("0")
        assert summary.main_account is None
        assert summary.alerts == []

    def test_figures(self, dashboard, ledger, expenses, taxes, investments):
        wallet = ledger.add_account({"name": "Wallet", "balance": 1000})
        ledger.add_account({"name": "Savings", "balance": 500})
        rent = expenses.add_expense({"description": "Rent", "amount": 600, "due_date": TODAY})
        expenses.add_expense({"description": "Phone", "amount": 40, "due_date": TODAY + timedelta(days=3)})
        expenses.toggle_paid(rent.id, True)
        taxes.add_tax({"name": "Income tax", "amount": 250, "due_date": TODAY + timedelta(days=20)})
        taxes.add_tax({"name": "Next year", "amount": 900, "due_date": TODAY + timedelta(days=200)})
        investments.add_investment({"name": "ETF", "amount": 300, "date": TODAY})

        summary = dashboard.summary()
        assert summary.total_balance == Decimal("1500")
        assert summary.total_expenses == Decimal("640")
        assert summary.total_investments == Decimal("300")
        assert summary.available == Decimal("560")
        assert summary.main_account.id == wallet.id
        assert summary.pending_expense_count == 1
        assert summary.total_pending_expenses == Decimal("40")
        assert summary.total_pending_taxes == Decimal("1150")
        assert [t.name for t in summary.upcoming_taxes] == ["Income tax"]
        assert summary.overdue_count == 0

    def test_available_never_negative(self, dashboard, ledger, investments):
        ledger.add_account({"name": "Wallet", "balance": 100})
        investments.add_investment({"name": "House", "amount": 5000, "date": TODAY})
        assert dashboard.available_funds() == Decimal("0")

    def test_alerts_merge_expenses_and_taxes(self, dashboard, expenses, taxes):
        expenses.add_expense({"description": "Late bill", "amount": 10, "due_date": TODAY - timedelta(days=4)})
        taxes.add_tax({"name": "VAT", "amount": 20, "due_date": TODAY + timedelta(days=2)})
        expenses.add_expense({"description": "Today", "amount": 5, "due_date": TODAY})

        alerts = dashboard.alerts()
        assert [(a.kind, a.label, a.days_until) for a in alerts] == [
            (AlertKind.EXPENSE, "Late bill", -4),
            (AlertKind.EXPENSE, "Today", 0),
            (AlertKind.TAX, "VAT", 2),
        ]
        assert dashboard.summary().overdue_count == 1
