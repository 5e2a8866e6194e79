"""Grid interface over the spreadsheet that backs the answer store.

Rows and columns are 1-based as in spreadsheet notation. Backends convert
their own failures into `SheetBackendError`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, Sequence

HEADER_ROW = ["timestamp", "question_number", "question_answer_1", "question_answer_2"]


class Sheet(ABC):
    name: str

    @abstractmethod
    def get_value(self, row: int, column: int) -> Any:
        """Return the value at (row, column), or None for an empty cell."""

    @abstractmethod
    def get_rows(self, rows: Iterable[int], columns: int) -> dict[int, list[Any]]:
        """Return `{row: cells}` for the requested rows that hold any value.

        `cells` covers columns 1..`columns`, padded with None. Unpopulated
        rows are left out of the mapping.
        """

    @abstractmethod
    def set_row(self, row: int, start_column: int, values: Sequence[Any]) -> None:
        """Write `values` into consecutive cells of `row` from `start_column`."""


class Workbook(ABC):
    @abstractmethod
    def get_sheet(self, name: str) -> Sheet | None:
        """Return the named sheet, or None when it does not exist."""

    @abstractmethod
    def sheet_names(self) -> list[str]:
        ...

    @abstractmethod
    def create_sheet(self, name: str, header: Sequence[str] = HEADER_ROW) -> Sheet:
        """Create `name` with `header` in row 1 and return it."""


def is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


__all__ = ["HEADER_ROW", "Sheet", "Workbook", "is_empty"]
