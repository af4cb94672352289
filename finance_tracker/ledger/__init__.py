"""
Ledger Package

The account ledger and the transaction engine that moves its balances.
"""

from finance_tracker.ledger.collection import RecordCollection, as_decimal, as_uuid
from finance_tracker.ledger.accounts import AccountLedger
from finance_tracker.ledger.transactions import TransactionEngine, effect_of

__all__ = [
    # Base
    "RecordCollection",
    "as_decimal",
    "as_uuid",
    # Collections
    "AccountLedger",
    "TransactionEngine",
    # Balance effects
    "effect_of",
]
