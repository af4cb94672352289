"""
Schedule Models: expenses, taxes and investments.

Expenses and taxes are payables: they carry a due date and a paid flag.
None of these records touch account balances.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator

from finance_tracker.models.base import RECORD_CONFIG, RecordPatch


# Older snapshots stored paidDate formatted for display
LEGACY_DATE_FORMAT = "%d/%m/%Y"


class ExpenseCategory(str, Enum):
    """Expense tags offered by the expense form."""
    HOUSING = "housing"
    TRANSPORTATION = "transportation"
    FOOD = "food"
    UTILITIES = "utilities"
    HEALTHCARE = "healthcare"
    ENTERTAINMENT = "entertainment"
    PERSONAL = "personal"
    EDUCATION = "education"
    OTHER = "other"


class InvestmentCategory(str, Enum):
    """Investment tags offered by the investment form."""
    STOCKS = "stocks"
    BONDS = "bonds"
    REAL_ESTATE = "real_estate"
    CRYPTO = "crypto"
    ETF = "etf"
    RETIREMENT = "retirement"
    OTHER = "other"


class DueStatus(str, Enum):
    """Where a due date sits relative to today."""
    OVERDUE = "overdue"
    DUE_SOON = "due_soon"
    LATER = "later"


class AlertKind(str, Enum):
    """Which collection an alert was raised from."""
    EXPENSE = "expense"
    TAX = "tax"


def parse_paid_date(value):
    """Accept ISO dates as well as the legacy dd/mm/yyyy display format."""
    if isinstance(value, str) and "/" in value:
        return dt.datetime.strptime(value, LEGACY_DATE_FORMAT).date()
    return value


# =============================================================================
# EXPENSES
# =============================================================================

class ExpenseDraft(BaseModel):
    """Data needed to record an expense."""
    model_config = RECORD_CONFIG

    description: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="What the expense is"
    )
    amount: Decimal = Field(..., gt=0)
    due_date: dt.date
    category: ExpenseCategory = ExpenseCategory.OTHER
    paid: bool = False


class Expense(ExpenseDraft):
    """
    A stored expense.

    paid_date is stamped when paid becomes true and cleared when it
    becomes false. Nothing else writes it.
    """

    id: UUID = Field(default_factory=uuid4)
    paid_date: Optional[dt.date] = None

    @field_validator("paid_date", mode="before")
    @classmethod
    def accept_legacy_paid_date(cls, v):
        return parse_paid_date(v)

    @property
    def label(self) -> str:
        return self.description


class ExpensePatch(RecordPatch):
    """Partial expense update. paid_date follows paid and is not patchable."""

    description: Optional[str] = Field(default=None, min_length=1, max_length=200)
    amount: Optional[Decimal] = Field(default=None, gt=0)
    due_date: Optional[dt.date] = None
    category: Optional[ExpenseCategory] = None
    paid: Optional[bool] = None


# =============================================================================
# TAXES
# =============================================================================

class TaxDraft(BaseModel):
    """Data needed to record a tax obligation."""
    model_config = RECORD_CONFIG

    name: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., gt=0)
    due_date: dt.date
    notes: Optional[str] = Field(default=None, max_length=1000)
    paid: bool = False


class Tax(TaxDraft):
    """A stored tax obligation. Same paid_date rules as Expense."""

    id: UUID = Field(default_factory=uuid4)
    paid_date: Optional[dt.date] = None

    @field_validator("paid_date", mode="before")
    @classmethod
    def accept_legacy_paid_date(cls, v):
        return parse_paid_date(v)

    @property
    def label(self) -> str:
        return self.name


class TaxPatch(RecordPatch):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    amount: Optional[Decimal] = Field(default=None, gt=0)
    due_date: Optional[dt.date] = None
    notes: Optional[str] = Field(default=None, max_length=1000)
    paid: Optional[bool] = None


# =============================================================================
# INVESTMENTS
# =============================================================================

class InvestmentDraft(BaseModel):
    """Data needed to record an investment."""
    model_config = RECORD_CONFIG

    name: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., gt=0)
    date: dt.date
    category: InvestmentCategory = InvestmentCategory.OTHER
    notes: Optional[str] = Field(default=None, max_length=1000)


class Investment(InvestmentDraft):
    id: UUID = Field(default_factory=uuid4)


class InvestmentPatch(RecordPatch):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    amount: Optional[Decimal] = Field(default=None, gt=0)
    date: Optional[dt.date] = None
    category: Optional[InvestmentCategory] = None
    notes: Optional[str] = Field(default=None, max_length=1000)


# =============================================================================
# ALERTS
# =============================================================================

class DueAlert(BaseModel):
    """An unpaid expense or tax that needs attention."""

    kind: AlertKind
    record_id: UUID
    label: str
    amount: Decimal
    due_date: dt.date
    days_until: int = Field(
        ...,
        description="Negative when overdue"
    )
    status: DueStatus
    message: str = Field(
        ...,
        description="Human-readable due status, e.g. 'Overdue by 3 days'"
    )
