"""Google Sheets workbook backed by gspread.

The spreadsheet is opened by id with a service-account key file. Empty
cells come back as empty strings from the Sheets API. Worksheets have a
fixed grid size; rows past it read as empty and are added before a write.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

import gspread
from gspread.exceptions import GSpreadException, WorksheetNotFound
from gspread.utils import rowcol_to_a1

from answersheet.errors import SheetBackendError
from answersheet.sheets.base import HEADER_ROW, Sheet, Workbook, is_empty

logger = logging.getLogger(__name__)

INITIAL_ROWS = 1000


class GoogleSheet(Sheet):
    def __init__(self, worksheet: Any) -> None:
        self.worksheet = worksheet
        self.name = str(worksheet.title)

    def get_value(self, row: int, column: int) -> Any:
        if row > self.worksheet.row_count:
            return None
        try:
            return self.worksheet.cell(row, column).value
        except GSpreadException as e:
            raise SheetBackendError(f"read failed sheet={self.name} row={row} column={column}: {e}") from e

    def get_rows(self, rows: Iterable[int], columns: int) -> dict[int, list[Any]]:
        wanted = sorted({r for r in rows if 1 <= r <= self.worksheet.row_count})
        if not wanted:
            return {}
        ranges = [f"{rowcol_to_a1(r, 1)}:{rowcol_to_a1(r, columns)}" for r in wanted]
        try:
            value_ranges = self.worksheet.batch_get(ranges)
        except GSpreadException as e:
            raise SheetBackendError(f"read failed sheet={self.name}: {e}") from e
        found: dict[int, list[Any]] = {}
        for row, values in zip(wanted, value_ranges):
            # The API trims trailing empty cells and omits empty rows
            cells = list(values[0]) if values else []
            if all(is_empty(v) for v in cells):
                continue
            found[row] = (cells + [""] * columns)[:columns]
        return found

    def set_row(self, row: int, start_column: int, values: Sequence[Any]) -> None:
        if not values:
            return
        first = rowcol_to_a1(row, start_column)
        last = rowcol_to_a1(row, start_column + len(values) - 1)
        try:
            if row > self.worksheet.row_count:
                self.worksheet.add_rows(row - self.worksheet.row_count)
            self.worksheet.update(range_name=f"{first}:{last}", values=[list(values)])
        except GSpreadException as e:
            raise SheetBackendError(f"write failed sheet={self.name} row={row}: {e}") from e


class GoogleSheetsWorkbook(Workbook):
    def __init__(self, spreadsheet: Any) -> None:
        self.spreadsheet = spreadsheet

    @classmethod
    def from_service_account(cls, credentials_file: str, spreadsheet_id: str) -> "GoogleSheetsWorkbook":
        try:
            client = gspread.service_account(filename=credentials_file)
            spreadsheet = client.open_by_key(spreadsheet_id)
        except (GSpreadException, OSError, ValueError) as e:
            raise SheetBackendError(f"opening spreadsheet {spreadsheet_id} failed: {e}") from e
        logger.info("spreadsheet_opened id=%s", spreadsheet_id)
        return cls(spreadsheet)

    def get_sheet(self, name: str) -> GoogleSheet | None:
        try:
            return GoogleSheet(self.spreadsheet.worksheet(name))
        except WorksheetNotFound:
            return None
        except GSpreadException as e:
            raise SheetBackendError(f"opening sheet {name} failed: {e}") from e

    def sheet_names(self) -> list[str]:
        try:
            return [str(ws.title) for ws in self.spreadsheet.worksheets()]
        except GSpreadException as e:
            raise SheetBackendError(f"listing sheets failed: {e}") from e

    def create_sheet(self, name: str, header: Sequence[str] = HEADER_ROW) -> GoogleSheet:
        existing = self.get_sheet(name)
        if existing is not None:
            return existing
        try:
            worksheet = self.spreadsheet.add_worksheet(title=name, rows=INITIAL_ROWS, cols=len(header))
        except GSpreadException as e:
            raise SheetBackendError(f"creating sheet {name} failed: {e}") from e
        sheet = GoogleSheet(worksheet)
        sheet.set_row(1, 1, list(header))
        logger.info("sheet_created backend=gsheets name=%s", name)
        return sheet


__all__ = ["GoogleSheet", "GoogleSheetsWorkbook"]
