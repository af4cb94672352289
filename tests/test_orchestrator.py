"""
Integration tests for the FinanceTracker composition root.

A full session is run against a real store, then a second tracker loads
what the first one saved.
"""

import asyncio
import json
from datetime import date
from decimal import Decimal

from finance_tracker.config import StorageBackend, TrackerSettings
from finance_tracker.orchestrator import FinanceTracker, create_finance_tracker, create_store
from finance_tracker.services.storage import (
    InMemoryRecordStore,
    JsonFileRecordStore,
    RecordStoreInterface,
    StorageError,
)


TODAY = date(2024, 6, 15)


class UnreachableStore(RecordStoreInterface):
    async def load(self, collection):
        raise StorageError("offline")

    async def save(self, collection, snapshot):
        raise StorageError("offline")


def run_session(tracker: FinanceTracker):
    wallet = tracker.accounts.add_account({"name": "Wallet", "balance": 100})
    bank = tracker.accounts.add_account({"name": "Bank", "balance": 0})
    tracker.transactions.add_transaction({
        "description": "Savings",
        "amount": 40,
        "type": "transfer",
        "date": TODAY,
        "account_id": wallet.id,
        "to_account_id": bank.id,
    })
    tracker.expenses.add_expense({"description": "Rent", "amount": 30, "due_date": TODAY})
    tracker.taxes.add_tax({"name": "IRS", "amount": 10, "due_date": TODAY, "paid": True})
    tracker.investments.add_investment({"name": "ETF", "amount": 5, "date": TODAY})
    return wallet, bank


class TestFinanceTracker:

    def test_session_survives_reload(self, tracker_settings):
        store = InMemoryRecordStore()
        first = FinanceTracker(store, settings=tracker_settings, today=lambda: TODAY)
        wallet, bank = run_session(first)

        second = FinanceTracker(store, settings=tracker_settings, today=lambda: TODAY)
        counts = asyncio.run(second.load())

        assert counts == {
            "accounts": 2,
            "transactions": 1,
            "expenses": 1,
            "taxes": 1,
            "investments": 1,
        }
        assert second.accounts.get_account(wallet.id).balance == Decimal("60")
        assert second.accounts.get_account(bank.id).balance == Decimal("40")
        assert second.accounts.get_main_account().id == wallet.id
        assert second.taxes.get_paid()[0].paid_date == TODAY

    def test_reloaded_transaction_can_be_edited(self, tracker_settings):
        store = InMemoryRecordStore()
        wallet, bank = run_session(FinanceTracker(store, settings=tracker_settings))

        tracker = FinanceTracker(store, settings=tracker_settings)
        asyncio.run(tracker.load())
        [tx] = tracker.transactions.records
        tracker.transactions.update_transaction(tx.id, {"amount": 100})
        assert tracker.accounts.get_account(wallet.id).balance == Decimal("0")
        assert tracker.accounts.get_account(bank.id).balance == Decimal("100")

    def test_load_failure_starts_empty(self, tracker_settings):
        tracker = FinanceTracker(UnreachableStore(), settings=tracker_settings)
        counts = asyncio.run(tracker.load())
        assert set(counts.values()) == {0}
        tracker.accounts.add_account({"name": "Wallet"})
        assert len(tracker.accounts) == 1

    def test_malformed_snapshot_only_affects_its_collection(self, tracker_settings):
        store = InMemoryRecordStore({
            "accounts": "not json",
            "taxes": json.dumps([{
                "id": "3f1c7a52-6f5e-4a3b-9d7e-2c1b0a9f8e7d",
                "name": "Council tax",
                "amount": 120,
                "dueDate": "2024-07-01",
                "paid": False,
            }]),
        })
        tracker = FinanceTracker(store, settings=tracker_settings)
        counts = asyncio.run(tracker.load())
        assert counts["accounts"] == 0
        assert counts["taxes"] == 1

    def test_dashboard_is_wired(self, tracker_settings):
        tracker = FinanceTracker(InMemoryRecordStore(), settings=tracker_settings, today=lambda: TODAY)
        run_session(tracker)
        summary = tracker.dashboard.summary()
        assert summary.total_balance == Decimal("100")
        assert summary.available == Decimal("65")
        assert [a.label for a in summary.alerts] == ["Rent"]

    def test_flush_inside_event_loop(self, tracker_settings):
        store = InMemoryRecordStore()
        tracker = FinanceTracker(store, settings=tracker_settings)

        async def scenario():
            await tracker.load()
            tracker.accounts.add_account({"name": "Wallet"})
            await tracker.flush()

        asyncio.run(scenario())
        assert json.loads(store.get_snapshot("accounts"))[0]["name"] == "Wallet"


class TestFactories:

    def test_memory_backend(self, tracker_settings):
        assert isinstance(create_store(tracker_settings), InMemoryRecordStore)

    def test_json_backend(self, tmp_path):
        settings = TrackerSettings(storage_backend=StorageBackend.JSON, data_dir=tmp_path)
        store = create_store(settings)
        assert isinstance(store, JsonFileRecordStore)
        assert store.path_for("accounts") == tmp_path / "accounts.json"

    def test_json_session_round_trip(self, tmp_path):
        settings = TrackerSettings(storage_backend="json", data_dir=tmp_path)
        wallet, _ = run_session(create_finance_tracker(settings))

        tracker = create_finance_tracker(settings)
        asyncio.run(tracker.load())
        assert tracker.accounts.get_account(wallet.id).balance == Decimal("60")
        assert (tmp_path / "transactions.json").exists()

    def test_explicit_store(self, tracker_settings):
        store = InMemoryRecordStore()
        tracker = create_finance_tracker(tracker_settings, store=store)
        assert tracker.store is store
