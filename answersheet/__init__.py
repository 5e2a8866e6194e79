"""Answer-sheet service.

A FastAPI application that stores and serves quiz answers for a browser
extension, using a two-sheet spreadsheet (word-meaning and fill-blank) as
its datastore. Cross-cutting wiring lives in `answersheet.main`; the store
in `answersheet/logic/` and the workbook backends in `answersheet/sheets/`.
"""

from __future__ import annotations

from answersheet.main import create_app

__all__ = ["create_app"]
