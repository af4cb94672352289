"""
Views Package

Collections that are derived for display only: expenses, taxes and
investments. None of them move account balances.
"""

from finance_tracker.views.dates import classify_due, days_until, due_status_message
from finance_tracker.views.payables import ExpenseView, PayableView, TaxView
from finance_tracker.views.investments import InvestmentView

__all__ = [
    # Date math
    "classify_due",
    "days_until",
    "due_status_message",
    # Collections
    "ExpenseView",
    "InvestmentView",
    "PayableView",
    "TaxView",
]
