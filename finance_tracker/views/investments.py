"""
Investment View

A plain list of invested amounts with category totals. Investments are
not linked to accounts and do not move balances.
"""

from decimal import Decimal
from typing import Any, Mapping, Optional, Union

from finance_tracker.ledger.collection import RecordCollection, RecordId
from finance_tracker.models.schedule import (
    Investment,
    InvestmentCategory,
    InvestmentDraft,
    InvestmentPatch,
)
from finance_tracker.validation import coerce_model


class InvestmentView(RecordCollection[Investment]):
    """The investment collection."""

    collection_name = "investments"
    record_type = Investment

    def add_investment(self, data: Union[InvestmentDraft, Mapping[str, Any]]) -> Investment:
        draft = coerce_model(InvestmentDraft, data)
        self._check(self._validator.validate_amount_record(draft.amount, "name", draft.name))

        with self._lock:
            investment = Investment.model_validate(draft.model_dump())
            self._records.append(investment)
            self._audit.log_added(
                self.collection_name,
                investment.id,
                investment.name,
                details={
                    "amount": str(investment.amount),
                    "category": investment.category.value,
                },
            )
            self._persist()
            return investment.model_copy()

    def update_investment(
        self,
        investment_id: RecordId,
        patch: Union[InvestmentPatch, Mapping[str, Any]],
    ) -> Optional[Investment]:
        changes = coerce_model(InvestmentPatch, patch).changes()

        with self._lock:
            idx = self._index_of(investment_id)
            if idx is None:
                self._not_found(investment_id, "update")
                return None

            old = self._records[idx]
            merged = self._merge(old, changes)
            self._check(
                self._validator.validate_amount_record(merged.amount, "name", merged.name),
                entity_id=old.id,
            )
            self._records[idx] = merged
            self._audit.log_updated(self.collection_name, merged.id, sorted(changes))
            self._persist()
            return merged.model_copy()

    def delete_investment(self, investment_id: RecordId) -> Optional[Investment]:
        with self._lock:
            idx = self._index_of(investment_id)
            if idx is None:
                self._not_found(investment_id, "delete")
                return None

            removed = self._records.pop(idx)
            self._audit.log_deleted(self.collection_name, removed.id)
            self._persist()
            return removed

    def get_total(self) -> Decimal:
        return sum((i.amount for i in self._records), Decimal("0"))

    def get_totals_by_category(self) -> dict[InvestmentCategory, Decimal]:
        """
        Invested amount per category.

        Only categories with at least one investment appear.
        """
        totals: dict[InvestmentCategory, Decimal] = {}
        for investment in self._records:
            totals[investment.category] = (
                totals.get(investment.category, Decimal("0")) + investment.amount
            )
        return totals
