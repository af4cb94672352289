"""
Account Ledger

Owns the account collection: the balance of every account and which one
is the main account.

INVARIANTS:
- At most one account has is_main set
- If any accounts exist, exactly one is main (the first account added
  becomes main; deleting the main account promotes the first remaining one)
- After creation, balances change only through apply_balance_delta
"""

from decimal import Decimal
from typing import Any, Mapping, Optional, Union

from finance_tracker.ledger.collection import RecordCollection, RecordId, as_decimal
from finance_tracker.models.ledger import Account, AccountDraft, AccountPatch
from finance_tracker.validation import coerce_model


class AccountLedger(RecordCollection[Account]):
    """The account collection."""

    collection_name = "accounts"
    record_type = Account

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_account(self, data: Union[AccountDraft, Mapping[str, Any]]) -> Account:
        """
        Open a new account.

        The first account is always main. A later account flagged is_main
        takes over from the current main account.

        Raises:
            ValidationError: If the name is missing
        """
        draft = coerce_model(AccountDraft, data)
        self._check(self._validator.validate_account_name(draft.name))

        with self._lock:
            previous_main = self.get_main_account()
            becomes_main = draft.is_main or previous_main is None
            account = Account.model_validate({**draft.model_dump(), "is_main": becomes_main})

            if becomes_main:
                self._clear_main()

            self._records.append(account)
            self._audit.log_added(
                self.collection_name,
                account.id,
                account.name,
                details={"balance": str(account.balance), "is_main": account.is_main},
            )
            if account.is_main:
                self._audit.log_main_account_changed(
                    account.id, previous_main.id if previous_main else None
                )
            self._persist()
            return account.model_copy()

    def update_account(
        self,
        account_id: RecordId,
        patch: Union[AccountPatch, Mapping[str, Any]],
    ) -> Optional[Account]:
        """
        Rename an account or make it the main account.

        Unsetting is_main on the main account is ignored: the ledger would
        otherwise be left without a main account.

        Returns:
            The updated account, or None if the id is unknown
        """
        changes = coerce_model(AccountPatch, patch).changes()

        with self._lock:
            idx = self._index_of(account_id)
            if idx is None:
                self._not_found(account_id, "update")
                return None

            account = self._records[idx]
            if changes.get("is_main") is False and account.is_main:
                changes.pop("is_main")
            if changes.get("is_main") is None:
                changes.pop("is_main", None)
            if "name" in changes:
                self._check(
                    self._validator.validate_account_name(changes["name"]),
                    entity_id=account.id,
                )

            updated = self._merge(account, changes)
            promoted = updated.is_main and not account.is_main
            previous_main = self.get_main_account() if promoted else None
            if promoted:
                self._clear_main()

            self._records[idx] = updated
            self._audit.log_updated(self.collection_name, updated.id, sorted(changes))
            if promoted:
                self._audit.log_main_account_changed(
                    updated.id, previous_main.id if previous_main else None
                )
            self._persist()
            return updated.model_copy()

    def delete_account(self, account_id: RecordId) -> Optional[Account]:
        """
        Remove an account.

        Transactions that reference it are left in place.

        Returns:
            The removed account, or None if the id is unknown
        """
        with self._lock:
            idx = self._index_of(account_id)
            if idx is None:
                self._not_found(account_id, "delete")
                return None

            removed = self._records.pop(idx)
            self._audit.log_deleted(self.collection_name, removed.id)

            if removed.is_main and self._records:
                successor = self._records[0].model_copy(update={"is_main": True})
                self._records[0] = successor
                self._audit.log_main_account_changed(successor.id, removed.id)

            self._persist()
            return removed

    def apply_balance_delta(
        self,
        account_id: RecordId,
        amount: Union[Decimal, int, float, str],
    ) -> Optional[Account]:
        """
        Add a signed amount to an account's balance.

        An unknown account is ignored. Whether a transaction references a
        live account is not checked here.

        Returns:
            The adjusted account, or None if the id is unknown

        Raises:
            ValidationError: If the amount is not a finite number
        """
        delta = as_decimal(amount)

        with self._lock:
            idx = self._index_of(account_id)
            if idx is None:
                self._not_found(account_id, "apply_balance_delta")
                return None

            old = self._records[idx]
            account = old.model_copy(update={"balance": old.balance + delta})
            self._records[idx] = account
            self._audit.log_balance_adjusted(account.id, delta, account.balance)
            self._persist()
            return account.model_copy()

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_account(self, account_id: RecordId) -> Optional[Account]:
        return self.get(account_id)

    def get_main_account(self) -> Optional[Account]:
        with self._lock:
            for account in self._records:
                if account.is_main:
                    return account.model_copy()
            return None

    def get_total_balance(self) -> Decimal:
        """Sum of every account balance."""
        return sum((account.balance for account in self._records), Decimal("0"))

    def _clear_main(self) -> None:
        self._records = [
            account.model_copy(update={"is_main": False}) if account.is_main else account
            for account in self._records
        ]
