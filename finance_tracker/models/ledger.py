"""
Ledger Models: accounts, transactions and balance deltas.

An amount on a transaction is always positive. The direction of its
effect on balances comes from the transaction type, never from the sign.

DESIGN DECISION: Each entity has three shapes:
- Draft: what a caller supplies to create a record (no id)
- Record: the stored form (draft fields plus a generated id)
- Patch: the optional fields accepted by an update
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from finance_tracker.models.base import RECORD_CONFIG, RecordPatch


class TransactionType(str, Enum):
    """How a transaction moves money."""
    INCOME = "income"        # credits account_id
    EXPENSE = "expense"      # debits account_id
    TRANSFER = "transfer"    # debits account_id, credits to_account_id


# =============================================================================
# ACCOUNTS
# =============================================================================

class AccountDraft(BaseModel):
    """Data needed to open an account."""
    model_config = RECORD_CONFIG

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Account name"
    )
    balance: Decimal = Field(
        default=Decimal("0"),
        description="Opening balance (may be negative)"
    )
    is_main: bool = Field(
        default=False,
        description="Whether this is the default account"
    )


class Account(AccountDraft):
    """
    A stored account.

    After creation, balance changes only through
    AccountLedger.apply_balance_delta.
    """

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique account ID"
    )


class AccountPatch(RecordPatch):
    """
    Partial account update.

    Balance is deliberately absent: it is not replaceable.
    """

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    is_main: Optional[bool] = None


# =============================================================================
# TRANSACTIONS
# =============================================================================

class TransactionDraft(BaseModel):
    """Data needed to record a transaction."""
    model_config = RECORD_CONFIG

    description: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="What the transaction was for"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Positive amount; direction comes from type"
    )
    type: TransactionType
    date: dt.date = Field(
        ...,
        description="Date the transaction happened"
    )
    account_id: UUID = Field(
        ...,
        description="Source account (or the credited account for income)"
    )
    to_account_id: Optional[UUID] = Field(
        default=None,
        description="Destination account, transfers only"
    )
    notes: Optional[str] = Field(
        default=None,
        max_length=1000
    )


class Transaction(TransactionDraft):
    """A stored transaction."""

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique transaction ID"
    )


class TransactionPatch(RecordPatch):
    """Partial transaction update. Unset fields keep their old values."""

    description: Optional[str] = Field(default=None, min_length=1, max_length=200)
    amount: Optional[Decimal] = Field(default=None, gt=0)
    type: Optional[TransactionType] = None
    date: Optional[dt.date] = None
    account_id: Optional[UUID] = None
    to_account_id: Optional[UUID] = None
    notes: Optional[str] = Field(default=None, max_length=1000)


class BalanceDelta(BaseModel):
    """A signed amount applied to one account's balance."""
    model_config = ConfigDict(frozen=True)

    account_id: UUID
    amount: Decimal

    def negated(self) -> "BalanceDelta":
        return BalanceDelta(account_id=self.account_id, amount=-self.amount)
