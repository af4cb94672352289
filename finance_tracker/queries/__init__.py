"""Dashboard query package."""

from finance_tracker.queries.dashboard import DashboardQueries, DashboardSummary

__all__ = ["DashboardQueries", "DashboardSummary"]
