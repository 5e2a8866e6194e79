"""In-memory workbook used for tests and local development.

Cells live in a per-sheet dict keyed by (row, column); nothing is persisted.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Sequence, Tuple

from answersheet.errors import SheetBackendError
from answersheet.sheets.base import HEADER_ROW, Sheet, Workbook

logger = logging.getLogger(__name__)


class InMemorySheet(Sheet):
    def __init__(self, name: str) -> None:
        self.name = name
        self._cells: Dict[Tuple[int, int], Any] = {}

    def get_value(self, row: int, column: int) -> Any:
        if row < 1 or column < 1:
            raise SheetBackendError(f"invalid cell address row={row} column={column}")
        return self._cells.get((row, column))

    def get_rows(self, rows: Iterable[int], columns: int) -> dict[int, list[Any]]:
        found: dict[int, list[Any]] = {}
        for row in set(rows):
            cells = [self._cells.get((row, c)) for c in range(1, columns + 1)]
            if any(v is not None for v in cells):
                found[row] = cells
        return found

    def set_row(self, row: int, start_column: int, values: Sequence[Any]) -> None:
        if row < 1 or start_column < 1:
            raise SheetBackendError(f"invalid cell address row={row} column={start_column}")
        for offset, value in enumerate(values):
            self._cells[(row, start_column + offset)] = value


class InMemoryWorkbook(Workbook):
    def __init__(self) -> None:
        self._sheets: Dict[str, InMemorySheet] = {}

    def get_sheet(self, name: str) -> InMemorySheet | None:
        return self._sheets.get(name)

    def sheet_names(self) -> list[str]:
        return list(self._sheets)

    def create_sheet(self, name: str, header: Sequence[str] = HEADER_ROW) -> InMemorySheet:
        sheet = self._sheets.get(name)
        if sheet is None:
            sheet = InMemorySheet(name)
            sheet.set_row(1, 1, list(header))
            self._sheets[name] = sheet
            logger.info("sheet_created backend=memory name=%s", name)
        return sheet


__all__ = ["InMemorySheet", "InMemoryWorkbook"]
