"""
Due-date arithmetic shared by the expense and tax views.

All comparisons are in whole calendar days. A due date of today is
0 days away: due, but not overdue.
"""

import datetime as dt
from typing import Optional

from finance_tracker.models.schedule import DueStatus


def days_until(due_date: dt.date, today: Optional[dt.date] = None) -> int:
    """Whole days from today to due_date. Negative once it has passed."""
    if today is None:
        today = dt.date.today()
    return (due_date - today).days


def classify_due(days: int, due_soon_days: int = 7) -> DueStatus:
    if days < 0:
        return DueStatus.OVERDUE
    if days <= due_soon_days:
        return DueStatus.DUE_SOON
    return DueStatus.LATER


def due_status_message(days: int) -> str:
    """Short label for a due date, as shown next to a payable."""
    if days < 0:
        return f"Overdue by {abs(days)} {_days(abs(days))}"
    if days == 0:
        return "Due today"
    return f"Due in {days} {_days(days)}"


def _days(n: int) -> str:
    return "day" if n == 1 else "days"
