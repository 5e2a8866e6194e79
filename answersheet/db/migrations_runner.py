"""Lightweight SQL migrations runner.

Applies .sql files in lexical order from `answersheet/db/migrations/` and
records applied filenames in a `schema_migrations` table of the target
database, so each database (including fresh in-memory SQLite ones) carries
its own journal. Rollback scripts are skipped.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


def _iter_sql_files(root: Path) -> Iterable[Path]:
    for p in sorted(root.glob("*.sql")):
        if "rollback" in p.name.lower():
            continue
        yield p


def _split_statements(sql: str) -> list[str]:
    """Split a script on ';', dropping comment-only and empty segments.

    SQLite's DB-API refuses multiple statements per execute() call, so every
    dialect receives one statement at a time.
    """
    statements: list[str] = []
    for chunk in sql.split(";"):
        lines = [ln for ln in chunk.splitlines() if not ln.strip().startswith("--")]
        stmt = "\n".join(lines).strip()
        if stmt:
            statements.append(stmt)
    return statements


def _ensure_journal(conn: Connection) -> set[str]:
    conn.execute(sql_text(
        "CREATE TABLE IF NOT EXISTS schema_migrations ("
        "filename VARCHAR(255) PRIMARY KEY, applied_at VARCHAR(32) NOT NULL)"
    ))
    rows = conn.execute(sql_text("SELECT filename FROM schema_migrations")).fetchall()
    return {str(r[0]) for r in rows}


def apply_migrations(engine: Engine, migrations_dir: str | os.PathLike[str] | None = None) -> list[str]:
    """Apply pending migrations and return the filenames applied by this call."""
    root = Path(migrations_dir) if migrations_dir is not None else MIGRATIONS_DIR
    if not root.exists():
        logger.warning("migrations_dir_missing path=%s", root)
        return []

    applied_now: list[str] = []
    with engine.begin() as conn:
        applied = _ensure_journal(conn)
        for sql_path in _iter_sql_files(root):
            fname = sql_path.name
            if fname in applied:
                continue
            for stmt in _split_statements(sql_path.read_text(encoding="utf-8")):
                conn.exec_driver_sql(stmt)
            conn.execute(
                sql_text("INSERT INTO schema_migrations (filename, applied_at) VALUES (:f, :t)"),
                {
                    "f": fname,
                    # ISO-8601 UTC without fractional seconds
                    "t": datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z"),
                },
            )
            applied_now.append(fname)
            logger.info("migration_applied file=%s", fname)
    return applied_now


__all__ = ["MIGRATIONS_DIR", "apply_migrations"]
