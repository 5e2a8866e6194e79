"""Functional tests for the SQLAlchemy workbook and the migrations runner.

Each test builds its own in-memory SQLite engine so state never leaks.
"""

from __future__ import annotations

import pytest
from sqlalchemy import text as sql_text

from answersheet.config import AppConfig, BackendConfig, StoreConfig
from answersheet.db import apply_migrations, build_engine
from answersheet.logic.answer_store import AnswerStore
from answersheet.sheets import HEADER_ROW, build_workbook, provision_workbook
from answersheet.sheets.sql import SqlWorkbook

from conftest import frozen_clock


@pytest.fixture()
def engine():
    eng = build_engine("sqlite+pysqlite:///:memory:")
    apply_migrations(eng)
    yield eng
    eng.dispose()


def test_migrations_are_applied_once(engine) -> None:
    assert apply_migrations(engine) == []
    with engine.connect() as conn:
        applied = [r[0] for r in conn.execute(sql_text("SELECT filename FROM schema_migrations ORDER BY filename"))]
    assert applied == ["001_create_sheets.sql", "002_sheet_cells_key_index.sql"]


def test_create_sheet_writes_header(engine) -> None:
    wb = SqlWorkbook(engine)
    assert wb.get_sheet("単語の意味") is None

    sheet = wb.create_sheet("単語の意味")
    assert wb.sheet_names() == ["単語の意味"]
    assert sheet.get_rows([1, 2], len(HEADER_ROW)) == {1: list(HEADER_ROW)}
    # Creating again is a no-op
    wb.create_sheet("単語の意味")
    assert wb.sheet_names() == ["単語の意味"]


def test_cells_round_trip_as_text(engine) -> None:
    sheet = SqlWorkbook(engine).create_sheet("s")
    sheet.set_row(3, 2, [7, None, "x"])
    sheet.set_row(3, 2, [8])

    assert sheet.get_value(3, 2) == "8"
    assert sheet.get_value(3, 3) is None
    assert sheet.get_value(9, 9) is None
    assert sheet.get_rows([3, 4], 4) == {3: [None, "8", None, "x"]}
    assert sheet.get_rows([3], 2) == {3: [None, "8"]}
    assert sheet.get_rows([], 4) == {}


def test_store_round_trip_over_sql(engine) -> None:
    config = StoreConfig()
    wb = SqlWorkbook(engine)
    provision_workbook(wb, config)
    store = AnswerStore(config, wb, clock=frozen_clock)

    assert store.set([
        {"question_number": 5, "question_type": "word-meaning", "question_answer_1": "apple", "question_answer_2": "a fruit"},
    ]).updated_count == 1
    # Key column now holds the text "5"; the guard still recognises it
    assert store.set([
        {"question_number": 5, "question_type": "word-meaning", "question_answer_1": "pear"},
    ]).updated_count == 0

    records = store.get([(5, "word-meaning"), (6, "word-meaning")])
    assert [r.as_row() for r in records] == [[5, "apple", "a fruit"]]


def test_build_workbook_applies_migrations() -> None:
    config = AppConfig(
        store=StoreConfig(),
        backend=BackendConfig(kind="sql", database_url="sqlite+pysqlite:///:memory:"),
    )
    wb = build_workbook(config)
    assert isinstance(wb, SqlWorkbook)
    assert provision_workbook(wb, config.store) == ["単語の意味", "空所補充"]
    assert provision_workbook(wb, config.store) == []


def test_sparse_reads_ignore_far_rows(engine) -> None:
    config = StoreConfig()
    wb = SqlWorkbook(engine)
    provision_workbook(wb, config)
    store = AnswerStore(config, wb, clock=frozen_clock)

    far = 10**12
    store.set([{"question_number": far, "question_type": "fill-blank", "question_answer_1": "far"}])
    assert store.get([(1, "fill-blank")]) == []
    assert [r.as_row() for r in store.get([(far, "fill-blank")])] == [[far, "far", None]]
