"""
Dashboard Queries

DESIGN DECISION: Dashboard figures are DERIVED, never stored.
Every call reads the current in-memory collections and computes the
summary from scratch, so it can never disagree with the records behind it.

GUARANTEES:
- Read-only: no collection is mutated and nothing is persisted
- Available funds never go below zero
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from finance_tracker.ledger import AccountLedger
from finance_tracker.models.ledger import Account
from finance_tracker.models.schedule import DueAlert, Tax
from finance_tracker.views import ExpenseView, InvestmentView, TaxView


class DashboardSummary(BaseModel):
    """The figures shown on the home screen."""

    total_balance: Decimal = Field(..., description="Sum of every account balance")
    total_expenses: Decimal = Field(..., description="All expenses, paid or not")
    total_investments: Decimal
    available: Decimal = Field(
        ...,
        ge=0,
        description="Balance left after expenses and investments, floored at zero"
    )
    main_account: Optional[Account] = None
    pending_expense_count: int = 0
    total_pending_expenses: Decimal = Decimal("0")
    total_pending_taxes: Decimal = Decimal("0")
    upcoming_taxes: list[Tax] = Field(default_factory=list)
    overdue_count: int = 0
    alerts: list[DueAlert] = Field(default_factory=list)


class DashboardQueries:
    """
    Computes summary figures across all collections.
    """

    def __init__(
        self,
        ledger: AccountLedger,
        expenses: ExpenseView,
        taxes: TaxView,
        investments: InvestmentView,
    ):
        self._ledger = ledger
        self._expenses = expenses
        self._taxes = taxes
        self._investments = investments

    def available_funds(self) -> Decimal:
        remaining = (
            self._ledger.get_total_balance()
            - self._expenses.get_total()
            - self._investments.get_total()
        )
        return max(remaining, Decimal("0"))

    def alerts(self) -> list[DueAlert]:
        """Expense and tax alerts together, most urgent first."""
        combined = self._expenses.get_alerts() + self._taxes.get_alerts()
        return sorted(combined, key=lambda a: a.days_until)

    def summary(self) -> DashboardSummary:
        alerts = self.alerts()
        return DashboardSummary(
            total_balance=self._ledger.get_total_balance(),
            total_expenses=self._expenses.get_total(),
            total_investments=self._investments.get_total(),
            available=self.available_funds(),
            main_account=self._ledger.get_main_account(),
            pending_expense_count=len(self._expenses.get_pending()),
            total_pending_expenses=self._expenses.get_total_pending(),
            total_pending_taxes=self._taxes.get_total_pending(),
            upcoming_taxes=self._taxes.get_upcoming(),
            overdue_count=len(self._expenses.get_overdue()) + len(self._taxes.get_overdue()),
            alerts=alerts,
        )
