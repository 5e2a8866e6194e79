"""Workbook backends for the answer store and the factory that selects one."""

from __future__ import annotations

import logging

from answersheet.config import AppConfig, StoreConfig
from answersheet.sheets.base import HEADER_ROW, Sheet, Workbook, is_empty
from answersheet.sheets.memory import InMemorySheet, InMemoryWorkbook

logger = logging.getLogger(__name__)


def build_workbook(config: AppConfig) -> Workbook:
    """Construct the workbook named by `config.backend.kind`."""
    kind = config.backend.kind
    if kind == "memory":
        return InMemoryWorkbook()
    if kind == "sql":
        from answersheet.db.base import get_engine
        from answersheet.db.migrations_runner import apply_migrations
        from answersheet.sheets.sql import SqlWorkbook

        engine = get_engine(config.backend.database_url)
        if config.backend.auto_apply_migrations:
            apply_migrations(engine)
        return SqlWorkbook(engine)
    if kind == "gsheets":
        from answersheet.sheets.gsheets import GoogleSheetsWorkbook

        if not config.store.spreadsheet_id:
            raise ValueError("store.spreadsheet_id is required for the gsheets backend")
        return GoogleSheetsWorkbook.from_service_account(
            str(config.backend.credentials_file), config.store.spreadsheet_id
        )
    raise ValueError(f"unknown backend kind: {kind}")


def provision_workbook(workbook: Workbook, store: StoreConfig) -> list[str]:
    """Create any missing partition sheets; return the names created."""
    existing = set(workbook.sheet_names())
    created: list[str] = []
    for name in (store.word_meaning_sheet, store.fill_blank_sheet):
        if name not in existing:
            workbook.create_sheet(name, HEADER_ROW)
            created.append(name)
    if created:
        logger.info("workbook_provisioned created=%s", created)
    return created


__all__ = [
    "HEADER_ROW",
    "Sheet",
    "Workbook",
    "InMemorySheet",
    "InMemoryWorkbook",
    "build_workbook",
    "provision_workbook",
    "is_empty",
]
