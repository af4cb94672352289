"""
Tests for the record stores and the snapshot writer.

No real Google API calls: the Sheets store runs against an in-memory
fake worksheet.
"""

import asyncio
import threading

import pytest

from finance_tracker.ledger import AccountLedger
from finance_tracker.services.storage import (
    GoogleSheetsRecordStore,
    InMemoryRecordStore,
    JsonFileRecordStore,
    RecordStoreInterface,
    SnapshotTooLargeError,
    SnapshotWriter,
    StorageError,
)
from finance_tracker.services.storage.google_sheets import MAX_CELL_CHARS, STORE_COLUMNS


class FakeWorksheet:
    """Just enough of gspread.Worksheet for the record store."""

    def __init__(self):
        self.rows = [list(STORE_COLUMNS)]

    def get_all_values(self):
        return [list(row) for row in self.rows]

    def append_row(self, values, value_input_option=None):
        self.rows.append(list(values))

    def update_cell(self, row, col, value):
        self.rows[row - 1][col - 1] = value


class FakeSheetsClient:
    def __init__(self):
        self.sheet = FakeWorksheet()

    def get_store_sheet(self):
        return self.sheet


class FailingStore(RecordStoreInterface):
    """A store whose every save fails."""

    def __init__(self, raises: bool = True):
        self._raises = raises
        self.attempts = 0

    async def load(self, collection):
        raise StorageError("offline")

    async def save(self, collection, snapshot):
        self.attempts += 1
        if self._raises:
            raise StorageError("offline")
        return False


class TestInMemoryRecordStore:

    def test_save_and_load(self):
        store = InMemoryRecordStore()
        assert asyncio.run(store.load("accounts")) is None
        asyncio.run(store.save("accounts", "[]"))
        assert asyncio.run(store.load("accounts")) == "[]"
        assert store.save_count == 1

    def test_initial_snapshots(self):
        store = InMemoryRecordStore({"taxes": "[]"})
        assert store.get_snapshot("taxes") == "[]"


class TestJsonFileRecordStore:

    def test_missing_file_loads_none(self, tmp_path):
        store = JsonFileRecordStore(tmp_path)
        assert asyncio.run(store.load("accounts")) is None

    def test_save_creates_directory_and_file(self, tmp_path):
        store = JsonFileRecordStore(tmp_path / "nested" / "data")
        assert asyncio.run(store.save("expenses", '[{"id": "1"}]')) is True
        assert store.path_for("expenses").read_text(encoding="utf-8") == '[{"id": "1"}]'
        assert asyncio.run(store.load("expenses")) == '[{"id": "1"}]'

    def test_save_overwrites_and_leaves_no_temp_file(self, tmp_path):
        store = JsonFileRecordStore(tmp_path)
        asyncio.run(store.save("taxes", "[1]"))
        asyncio.run(store.save("taxes", "[2]"))
        assert asyncio.run(store.load("taxes")) == "[2]"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["taxes.json"]

    def test_write_runs_off_the_event_loop(self, tmp_path):
        """Test that the file write happens in a worker thread."""
        threads = []

        class RecordingStore(JsonFileRecordStore):
            def _write(self, collection, snapshot):
                threads.append(threading.get_ident())
                super()._write(collection, snapshot)

        store = RecordingStore(tmp_path)

        async def scenario():
            await store.save("accounts", "[]")
            return threading.get_ident()

        loop_thread = asyncio.run(scenario())
        assert threads and threads[0] != loop_thread
        assert store.path_for("accounts").read_text(encoding="utf-8") == "[]"

    def test_unwritable_directory_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        store = JsonFileRecordStore(blocker / "data")
        with pytest.raises(StorageError):
            asyncio.run(store.save("accounts", "[]"))


class TestGoogleSheetsRecordStore:

    def test_first_save_appends_row(self):
        client = FakeSheetsClient()
        store = GoogleSheetsRecordStore(client)
        assert asyncio.run(store.save("accounts", "[]")) is True
        assert client.sheet.rows[1][:2] == ["accounts", "[]"]

    def test_second_save_replaces_row(self):
        client = FakeSheetsClient()
        store = GoogleSheetsRecordStore(client)
        asyncio.run(store.save("accounts", "[1]"))
        asyncio.run(store.save("transactions", "[]"))
        asyncio.run(store.save("accounts", "[2]"))
        assert len(client.sheet.rows) == 3
        assert asyncio.run(store.load("accounts")) == "[2]"
        assert asyncio.run(store.load("transactions")) == "[]"

    def test_unknown_collection_loads_none(self):
        store = GoogleSheetsRecordStore(FakeSheetsClient())
        assert asyncio.run(store.load("investments")) is None

    def test_oversized_snapshot_rejected(self):
        store = GoogleSheetsRecordStore(FakeSheetsClient())
        with pytest.raises(SnapshotTooLargeError):
            asyncio.run(store.save("accounts", "x" * (MAX_CELL_CHARS + 1)))


class TestSnapshotWriter:
    """Tests for fire-and-forget persistence."""

    def test_writes_immediately_without_event_loop(self, audit_logger):
        store = InMemoryRecordStore()
        writer = SnapshotWriter(store, audit_logger)
        writer.submit("accounts", "[]")
        assert store.get_snapshot("accounts") == "[]"

    def test_failed_save_keeps_memory(self, audit_logger, validator):
        """Test that a storage failure never reaches the caller."""
        store = FailingStore()
        ledger = AccountLedger(
            writer=SnapshotWriter(store, audit_logger),
            audit_logger=audit_logger,
            validator=validator,
        )
        account = ledger.add_account({"name": "Wallet", "balance": 10})
        assert ledger.get_account(account.id) == account
        assert store.attempts == 1

    def test_store_reporting_failure(self, audit_logger):
        store = FailingStore(raises=False)
        writer = SnapshotWriter(store, audit_logger)
        writer.submit("accounts", "[]")
        assert store.attempts == 1

    def test_inside_event_loop_latest_snapshot_wins(self, audit_logger):
        """Test that queued writes skip snapshots already superseded."""
        store = InMemoryRecordStore()
        writer = SnapshotWriter(store, audit_logger)

        async def scenario():
            writer.submit("accounts", "[1]")
            writer.submit("accounts", "[2]")
            writer.submit("transactions", "[]")
            writer.submit("accounts", "[3]")
            await writer.flush()

        asyncio.run(scenario())
        assert store.get_snapshot("accounts") == "[3]"
        assert store.get_snapshot("transactions") == "[]"
        assert store.save_count == 2

    def test_collection_mutation_inside_event_loop(self, audit_logger, validator):
        store = InMemoryRecordStore()
        writer = SnapshotWriter(store, audit_logger)
        ledger = AccountLedger(writer=writer, audit_logger=audit_logger, validator=validator)

        async def scenario():
            ledger.add_account({"name": "Wallet"})
            ledger.add_account({"name": "Bank"})
            assert store.get_snapshot("accounts") is None
            await writer.flush()

        asyncio.run(scenario())
        assert store.get_snapshot("accounts") == ledger.snapshot()
