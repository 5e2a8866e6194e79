"""Database bootstrap utilities for the SQL sheet backend.

Exposes engine construction and the migrations runner that creates the
`sheets` and `sheet_cells` tables.
"""

from answersheet.db.base import build_engine, get_engine
from answersheet.db.migrations_runner import apply_migrations

__all__ = [
    "build_engine",
    "get_engine",
    "apply_migrations",
]
