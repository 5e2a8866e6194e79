"""SQL-backed workbook.

Stores each populated cell as one row of `sheet_cells`; values are kept as
text the way a spreadsheet export would hold them. Schema is created by
`answersheet.db.migrations_runner`.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Sequence

from sqlalchemy import bindparam, text as sql_text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from answersheet.errors import SheetBackendError
from answersheet.sheets.base import HEADER_ROW, Sheet, Workbook

logger = logging.getLogger(__name__)


def _to_text(value: Any) -> str | None:
    return None if value is None else str(value)


class SqlSheet(Sheet):
    def __init__(self, engine: Engine, name: str) -> None:
        self.engine = engine
        self.name = name

    def get_value(self, row: int, column: int) -> Any:
        try:
            with self.engine.connect() as conn:
                found = conn.execute(
                    sql_text(
                        "SELECT value FROM sheet_cells "
                        "WHERE sheet_name = :s AND row_index = :r AND column_index = :c"
                    ),
                    {"s": self.name, "r": int(row), "c": int(column)},
                ).fetchone()
        except SQLAlchemyError as e:
            raise SheetBackendError(f"read failed sheet={self.name} row={row} column={column}: {e}") from e
        return found[0] if found else None

    def get_rows(self, rows: Iterable[int], columns: int) -> dict[int, list[Any]]:
        wanted = sorted({int(r) for r in rows})
        if not wanted:
            return {}
        stmt = sql_text(
            "SELECT row_index, column_index, value FROM sheet_cells "
            "WHERE sheet_name = :s AND row_index IN :rows AND column_index <= :c"
        ).bindparams(bindparam("rows", expanding=True))
        try:
            with self.engine.connect() as conn:
                found = conn.execute(stmt, {"s": self.name, "rows": wanted, "c": int(columns)}).fetchall()
        except SQLAlchemyError as e:
            raise SheetBackendError(f"read failed sheet={self.name}: {e}") from e
        result: dict[int, list[Any]] = {}
        for r, c, value in found:
            if value is None:
                continue
            result.setdefault(int(r), [None] * columns)[int(c) - 1] = value
        return result

    def set_row(self, row: int, start_column: int, values: Sequence[Any]) -> None:
        params = [
            {"s": self.name, "r": int(row), "c": int(start_column) + offset, "v": _to_text(value)}
            for offset, value in enumerate(values)
        ]
        if not params:
            return
        try:
            with self.engine.begin() as conn:
                conn.execute(
                    sql_text(
                        "DELETE FROM sheet_cells "
                        "WHERE sheet_name = :s AND row_index = :r AND column_index = :c"
                    ),
                    [{k: p[k] for k in ("s", "r", "c")} for p in params],
                )
                conn.execute(
                    sql_text(
                        "INSERT INTO sheet_cells (sheet_name, row_index, column_index, value) "
                        "VALUES (:s, :r, :c, :v)"
                    ),
                    params,
                )
        except SQLAlchemyError as e:
            raise SheetBackendError(f"write failed sheet={self.name} row={row}: {e}") from e


class SqlWorkbook(Workbook):
    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def get_sheet(self, name: str) -> SqlSheet | None:
        return SqlSheet(self.engine, name) if name in self.sheet_names() else None

    def sheet_names(self) -> list[str]:
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(sql_text("SELECT sheet_name FROM sheets ORDER BY sheet_name")).fetchall()
        except SQLAlchemyError as e:
            raise SheetBackendError(f"listing sheets failed: {e}") from e
        return [str(r[0]) for r in rows]

    def create_sheet(self, name: str, header: Sequence[str] = HEADER_ROW) -> SqlSheet:
        if name in self.sheet_names():
            return SqlSheet(self.engine, name)
        try:
            with self.engine.begin() as conn:
                conn.execute(
                    sql_text("INSERT INTO sheets (sheet_name, created_at) VALUES (:s, :t)"),
                    {"s": name, "t": datetime.now(timezone.utc).isoformat()},
                )
        except SQLAlchemyError as e:
            raise SheetBackendError(f"creating sheet {name} failed: {e}") from e
        sheet = SqlSheet(self.engine, name)
        sheet.set_row(1, 1, list(header))
        logger.info("sheet_created backend=sql name=%s", name)
        return sheet


__all__ = ["SqlSheet", "SqlWorkbook"]
