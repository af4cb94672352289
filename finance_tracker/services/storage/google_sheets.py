"""
Google Sheets Record Store

DESIGN DECISION: A spreadsheet can serve as the snapshot store because:
1. Users can look at their data directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- One cell holds at most 50,000 characters, which caps a collection's
  snapshot size (plenty for a personal ledger)
- No transactions (every save replaces a single row)

Layout: one worksheet, one row per collection:
    [collection, snapshot_json, updated_at]

gspread is synchronous, so every call and retry back-off runs in a
worker thread.
"""

import asyncio
from datetime import datetime, timezone
from typing import Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finance_tracker.config import get_settings
from finance_tracker.services.storage.interface import (
    ConnectionError,
    RecordStoreInterface,
    StorageError,
)


STORE_COLUMNS = [
    "collection",
    "snapshot_json",
    "updated_at",
]

# Google Sheets hard limit per cell
MAX_CELL_CHARS = 50000


class SnapshotTooLargeError(StorageError):
    """The snapshot does not fit in one spreadsheet cell."""
    pass


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_store_sheet(self) -> gspread.Worksheet:
        """Get or create the snapshot worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.store_sheet_name)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=self._settings.store_sheet_name,
                rows=20,
                cols=len(STORE_COLUMNS),
            )
            sheet.append_row(STORE_COLUMNS)
        return sheet


class GoogleSheetsRecordStore(RecordStoreInterface):
    """
    Google Sheets implementation of the record store.

    Each collection occupies one row; a save overwrites that row.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    @staticmethod
    def _find_row(all_rows: list[list[str]], collection: str) -> Optional[int]:
        """1-based sheet row index of a collection, skipping the header."""
        for idx, row in enumerate(all_rows[1:], start=2):
            if row and row[0] == collection:
                return idx
        return None

    def _read_rows(self) -> list[list[str]]:
        return self._client.get_store_sheet().get_all_values()

    async def load(self, collection: str) -> Optional[str]:
        """Read the snapshot cell for a collection."""
        try:
            all_rows = await asyncio.to_thread(self._read_rows)
        except Exception as e:
            raise StorageError(f"Failed to read {collection} snapshot: {e}")

        idx = self._find_row(all_rows, collection)
        if idx is None:
            return None
        row = all_rows[idx - 1]
        return row[1] if len(row) > 1 and row[1] else None

    @retry(
        retry=retry_if_exception_type(gspread.exceptions.APIError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _write_row(self, collection: str, snapshot: str) -> None:
        sheet = self._client.get_store_sheet()
        all_rows = sheet.get_all_values()
        updated_at = datetime.now(timezone.utc).isoformat()

        idx = self._find_row(all_rows, collection)
        if idx is None:
            sheet.append_row(
                [collection, snapshot, updated_at],
                value_input_option="RAW",
            )
        else:
            sheet.update_cell(idx, 2, snapshot)
            sheet.update_cell(idx, 3, updated_at)

    async def save(self, collection: str, snapshot: str) -> bool:
        """Replace the snapshot row for a collection."""
        if len(snapshot) > MAX_CELL_CHARS:
            raise SnapshotTooLargeError(
                f"{collection} snapshot is {len(snapshot)} characters; "
                f"a sheet cell holds at most {MAX_CELL_CHARS}"
            )
        try:
            await asyncio.to_thread(self._write_row, collection, snapshot)
            return True
        except Exception as e:
            raise StorageError(f"Failed to save {collection} snapshot: {e}")
