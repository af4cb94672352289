"""
Payable Views: expenses and taxes.

Both are lists of amounts with a due date and a paid flag. They never
touch account balances: paying an expense here only flips the flag.

paid_date is owned by the view. It is stamped with today's date whenever
paid turns true (on add, update or toggle) and cleared whenever it turns
false.
"""

import datetime as dt
from decimal import Decimal
from typing import Any, Callable, ClassVar, Mapping, Optional, TypeVar, Union

from finance_tracker.audit import AuditLogger
from finance_tracker.ledger.collection import RecordCollection, RecordId
from finance_tracker.models.base import RecordPatch
from finance_tracker.models.schedule import (
    AlertKind,
    DueAlert,
    Expense,
    ExpenseDraft,
    ExpensePatch,
    Tax,
    TaxDraft,
    TaxPatch,
)
from finance_tracker.services.storage.writer import SnapshotWriter
from finance_tracker.validation import LedgerValidator, coerce_model, coerce_value
from finance_tracker.views.dates import classify_due, days_until, due_status_message


PayableT = TypeVar("PayableT", Expense, Tax)


class PayableView(RecordCollection[PayableT]):
    """Shared behaviour of the expense and tax collections."""

    draft_type: ClassVar[type]
    patch_type: ClassVar[type[RecordPatch]]
    label_field: ClassVar[str]
    alert_kind: ClassVar[AlertKind]

    def __init__(
        self,
        writer: Optional[SnapshotWriter] = None,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[LedgerValidator] = None,
        today: Callable[[], dt.date] = dt.date.today,
        due_soon_days: int = 7,
        upcoming_days: int = 30,
    ):
        """
        Args:
            today: Clock used for paid dates and due-date queries
            due_soon_days: Unpaid items due within this many days are "due soon"
            upcoming_days: Default window for get_upcoming
        """
        super().__init__(writer=writer, audit_logger=audit_logger, validator=validator)
        self._today = today
        self._due_soon_days = due_soon_days
        self._upcoming_days = upcoming_days

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add(self, data: Union[Mapping[str, Any], Any]) -> PayableT:
        """
        Raises:
            ValidationError: If the label is missing or the amount is not positive
        """
        draft = coerce_model(self.draft_type, data)
        self._check(self._validator.validate_amount_record(
            draft.amount, self.label_field, getattr(draft, self.label_field)
        ))

        with self._lock:
            values = draft.model_dump()
            if values["paid"]:
                values["paid_date"] = self._today()
            record = self.record_type.model_validate(values)
            self._records.append(record)
            self._audit.log_added(
                self.collection_name,
                record.id,
                record.label,
                details={"amount": str(record.amount), "due_date": record.due_date.isoformat()},
            )
            self._persist()
            return record.model_copy()

    def update(
        self,
        record_id: RecordId,
        patch: Union[RecordPatch, Mapping[str, Any]],
    ) -> Optional[PayableT]:
        """
        Merge a patch. Returns None if the id is unknown.
        """
        changes = coerce_model(self.patch_type, patch).changes()

        with self._lock:
            idx = self._index_of(record_id)
            if idx is None:
                self._not_found(record_id, "update")
                return None

            old = self._records[idx]
            if changes.get("paid") is None:
                changes.pop("paid", None)
            elif changes["paid"] != old.paid:
                changes["paid_date"] = self._today() if changes["paid"] else None

            merged = self._merge(old, changes)
            self._check(
                self._validator.validate_amount_record(
                    merged.amount, self.label_field, getattr(merged, self.label_field)
                ),
                entity_id=old.id,
            )

            self._records[idx] = merged
            self._audit.log_updated(self.collection_name, merged.id, sorted(changes))
            self._persist()
            return merged.model_copy()

    def delete(self, record_id: RecordId) -> Optional[PayableT]:
        with self._lock:
            idx = self._index_of(record_id)
            if idx is None:
                self._not_found(record_id, "delete")
                return None

            removed = self._records.pop(idx)
            self._audit.log_deleted(self.collection_name, removed.id)
            self._persist()
            return removed

    def toggle_paid(self, record_id: RecordId, paid: Union[bool, str]) -> Optional[PayableT]:
        """
        Set the paid flag, stamping or clearing paid_date.

        Form values such as "true" or "0" are accepted.

        Returns:
            The record, or None if the id is unknown

        Raises:
            ValidationError: If paid is not a boolean
        """
        paid = coerce_value(bool, paid, "paid")

        with self._lock:
            idx = self._index_of(record_id)
            if idx is None:
                self._not_found(record_id, "toggle_paid")
                return None

            record = self._records[idx].model_copy(update={
                "paid": paid,
                "paid_date": self._today() if paid else None,
            })
            self._records[idx] = record
            self._audit.log_payment_status(self.collection_name, record.id, paid)
            self._persist()
            return record.model_copy()

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_pending(self) -> list[PayableT]:
        return [r for r in self.records if not r.paid]

    def get_paid(self) -> list[PayableT]:
        return [r for r in self.records if r.paid]

    def get_total(self) -> Decimal:
        """Sum of all amounts, paid or not."""
        return sum((r.amount for r in self._records), Decimal("0"))

    def get_total_pending(self) -> Decimal:
        return sum((r.amount for r in self._records if not r.paid), Decimal("0"))

    def days_until_due(self, record: PayableT) -> int:
        return days_until(record.due_date, self._today())

    def get_upcoming(self, threshold_days: Optional[int] = None) -> list[PayableT]:
        """Unpaid items due between today and threshold_days from now."""
        if threshold_days is None:
            threshold_days = self._upcoming_days
        today = self._today()
        return [
            r for r in self.get_pending()
            if 0 <= days_until(r.due_date, today) <= threshold_days
        ]

    def get_overdue(self) -> list[PayableT]:
        today = self._today()
        return [r for r in self.get_pending() if days_until(r.due_date, today) < 0]

    def get_alerts(self, threshold_days: Optional[int] = None) -> list[DueAlert]:
        """
        Alerts for unpaid items that are overdue or upcoming.

        Sorted by days until due, most overdue first.
        """
        today = self._today()
        alerts = []
        for record in self.get_overdue() + self.get_upcoming(threshold_days):
            days = days_until(record.due_date, today)
            alerts.append(DueAlert(
                kind=self.alert_kind,
                record_id=record.id,
                label=record.label,
                amount=record.amount,
                due_date=record.due_date,
                days_until=days,
                status=classify_due(days, self._due_soon_days),
                message=due_status_message(days),
            ))
        return sorted(alerts, key=lambda a: a.days_until)


class ExpenseView(PayableView[Expense]):
    """The expense collection."""

    collection_name = "expenses"
    record_type = Expense
    draft_type = ExpenseDraft
    patch_type = ExpensePatch
    label_field = "description"
    alert_kind = AlertKind.EXPENSE

    def add_expense(self, data: Union[ExpenseDraft, Mapping[str, Any]]) -> Expense:
        return self.add(data)

    def update_expense(
        self,
        expense_id: RecordId,
        patch: Union[ExpensePatch, Mapping[str, Any]],
    ) -> Optional[Expense]:
        return self.update(expense_id, patch)

    def delete_expense(self, expense_id: RecordId) -> Optional[Expense]:
        return self.delete(expense_id)


class TaxView(PayableView[Tax]):
    """The tax collection."""

    collection_name = "taxes"
    record_type = Tax
    draft_type = TaxDraft
    patch_type = TaxPatch
    label_field = "name"
    alert_kind = AlertKind.TAX

    def add_tax(self, data: Union[TaxDraft, Mapping[str, Any]]) -> Tax:
        return self.add(data)

    def update_tax(
        self,
        tax_id: RecordId,
        patch: Union[TaxPatch, Mapping[str, Any]],
    ) -> Optional[Tax]:
        return self.update(tax_id, patch)

    def delete_tax(self, tax_id: RecordId) -> Optional[Tax]:
        return self.delete(tax_id)
