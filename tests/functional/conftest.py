"""Shared fixtures for the functional tests.

Stores run against an in-memory workbook with a frozen clock; the HTTP tests
drive the FastAPI app in-process through TestClient.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from answersheet.config import AppConfig, StoreConfig
from answersheet.logic.answer_store import AnswerStore
from answersheet.main import create_app
from answersheet.sheets import InMemoryWorkbook, provision_workbook

FROZEN_NOW = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def frozen_clock() -> datetime:
    return FROZEN_NOW


@pytest.fixture()
def store_config() -> StoreConfig:
    return StoreConfig()


@pytest.fixture()
def workbook(store_config: StoreConfig) -> InMemoryWorkbook:
    wb = InMemoryWorkbook()
    provision_workbook(wb, store_config)
    return wb


@pytest.fixture()
def store(store_config: StoreConfig, workbook: InMemoryWorkbook) -> AnswerStore:
    return AnswerStore(store_config, workbook, clock=frozen_clock)


@pytest.fixture()
def app_config() -> AppConfig:
    return AppConfig()


@pytest.fixture()
def client(app_config: AppConfig, workbook: InMemoryWorkbook) -> TestClient:
    app = create_app(config=app_config, workbook=workbook, clock=frozen_clock)
    return TestClient(app)
