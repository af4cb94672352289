"""
Finance Tracker - Source Package

The ledger core of a personal-finance tracker: accounts, transactions,
expenses, taxes and investments, plus the summary figures derived from them.

DESIGN PRINCIPLES:
1. Balances change only through one delta-apply operation
2. Edits and deletes reverse the old effect before applying the new one
3. In-memory state is the source of truth for the running session
4. Persistence is fire-and-forget and never rolls back a mutation
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
