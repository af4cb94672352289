"""
Transaction Engine

Records income, expense and transfer transactions and keeps account
balances consistent with them.

DESIGN DECISION: Reverse-then-apply.
Every transaction has an effect: the list of balance deltas it causes.
- add:    apply effect(new)
- delete: apply the negation of effect(old)
- update: apply the negation of effect(old), then effect(merged)

Because the full old effect is reversed before the full new effect is
applied, an edit that changes amount, type, source or destination (or
all of them at once) leaves balances exactly as if the old transaction
had never existed and the merged one had been recorded instead.

The merged transaction is validated before any balance moves, so a
rejected edit changes nothing.
"""

import datetime as dt
from typing import Any, Mapping, Optional, Union
from uuid import UUID

from finance_tracker.audit import AuditLogger
from finance_tracker.ledger.accounts import AccountLedger
from finance_tracker.ledger.collection import RecordCollection, RecordId, as_uuid
from finance_tracker.models.ledger import (
    BalanceDelta,
    Transaction,
    TransactionDraft,
    TransactionPatch,
    TransactionType,
)
from finance_tracker.services.storage.writer import SnapshotWriter
from finance_tracker.validation import LedgerValidator, coerce_model, coerce_value


def effect_of(transaction: TransactionDraft) -> list[BalanceDelta]:
    """
    Balance deltas caused by a transaction.

    A transfer without a destination has no effect at all. Such records
    only exist in snapshots written before transfers were validated.
    """
    if transaction.type == TransactionType.INCOME:
        return [BalanceDelta(account_id=transaction.account_id, amount=transaction.amount)]

    if transaction.type == TransactionType.EXPENSE:
        return [BalanceDelta(account_id=transaction.account_id, amount=-transaction.amount)]

    if transaction.type == TransactionType.TRANSFER and transaction.to_account_id is not None:
        return [
            BalanceDelta(account_id=transaction.account_id, amount=-transaction.amount),
            BalanceDelta(account_id=transaction.to_account_id, amount=transaction.amount),
        ]

    return []


def _without_stray_destination(transaction: Transaction) -> Transaction:
    # Only transfers carry a destination
    if transaction.type != TransactionType.TRANSFER and transaction.to_account_id is not None:
        return transaction.model_copy(update={"to_account_id": None})
    return transaction


class TransactionEngine(RecordCollection[Transaction]):
    """
    The transaction collection.

    Holds a reference to the AccountLedger and moves balances through
    its apply_balance_delta. Lock order is engine first, then ledger.
    """

    collection_name = "transactions"
    record_type = Transaction

    def __init__(
        self,
        ledger: AccountLedger,
        writer: Optional[SnapshotWriter] = None,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[LedgerValidator] = None,
    ):
        super().__init__(writer=writer, audit_logger=audit_logger, validator=validator)
        self._ledger = ledger

    @property
    def ledger(self) -> AccountLedger:
        return self._ledger

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_transaction(
        self,
        data: Union[TransactionDraft, Mapping[str, Any]],
    ) -> Transaction:
        """
        Record a transaction and apply its effect.

        Raises:
            ValidationError: If the transaction is rejected. No state changes.
        """
        draft = coerce_model(TransactionDraft, data)
        transaction = _without_stray_destination(
            Transaction.model_validate(draft.model_dump())
        )
        self._check(self._validator.validate_transaction(transaction))

        with self._lock, self._ledger.lock:
            self._apply(effect_of(transaction))
            self._records.append(transaction)
            self._audit.log_added(
                self.collection_name,
                transaction.id,
                transaction.description,
                details={
                    "type": transaction.type.value,
                    "amount": str(transaction.amount),
                },
            )
            self._persist()
            return transaction.model_copy()

    def update_transaction(
        self,
        transaction_id: RecordId,
        patch: Union[TransactionPatch, Mapping[str, Any]],
    ) -> Optional[Transaction]:
        """
        Merge a patch into a transaction, moving balances to match.

        Applying the same patch twice gives the same balances as applying
        it once.

        Returns:
            The merged transaction, or None if the id is unknown

        Raises:
            ValidationError: If the merged transaction is rejected.
                             No state changes.
        """
        changes = coerce_model(TransactionPatch, patch).changes()

        with self._lock, self._ledger.lock:
            idx = self._index_of(transaction_id)
            if idx is None:
                self._not_found(transaction_id, "update")
                return None

            old = self._records[idx]
            merged = _without_stray_destination(self._merge(old, changes))
            self._check(self._validator.validate_transaction(merged), entity_id=old.id)

            self._apply(delta.negated() for delta in effect_of(old))
            self._apply(effect_of(merged))

            self._records[idx] = merged
            self._audit.log_updated(self.collection_name, merged.id, sorted(changes))
            self._persist()
            return merged.model_copy()

    def delete_transaction(self, transaction_id: RecordId) -> Optional[Transaction]:
        """
        Remove a transaction and reverse its effect.

        Returns:
            The removed transaction, or None if the id is unknown
        """
        with self._lock, self._ledger.lock:
            idx = self._index_of(transaction_id)
            if idx is None:
                self._not_found(transaction_id, "delete")
                return None

            removed = self._records[idx]
            self._apply(delta.negated() for delta in effect_of(removed))
            del self._records[idx]
            self._audit.log_deleted(self.collection_name, removed.id)
            self._persist()
            return removed

    def _apply(self, deltas) -> None:
        for delta in deltas:
            self._ledger.apply_balance_delta(delta.account_id, delta.amount)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_transaction(self, transaction_id: RecordId) -> Optional[Transaction]:
        return self.get(transaction_id)

    def get_transactions_by_account(self, account_id: RecordId) -> list[Transaction]:
        """Transactions where the account is the source or the destination."""
        wanted: Optional[UUID] = as_uuid(account_id)
        if wanted is None:
            return []
        return [
            t for t in self.records
            if t.account_id == wanted or t.to_account_id == wanted
        ]

    def get_transactions_by_type(
        self,
        transaction_type: Union[TransactionType, str],
    ) -> list[Transaction]:
        """
        Raises:
            ValidationError: If the type is not income, expense or transfer
        """
        transaction_type = coerce_value(TransactionType, transaction_type, "type")
        return [t for t in self.records if t.type == transaction_type]

    def get_transactions_by_date_range(
        self,
        start: Union[dt.date, str],
        end: Union[dt.date, str],
    ) -> list[Transaction]:
        """
        Transactions dated between start and end, both inclusive.

        Raises:
            ValidationError: If either bound is not a date
        """
        start = coerce_value(dt.date, start, "start")
        end = coerce_value(dt.date, end, "end")
        return [t for t in self.records if start <= t.date <= end]
