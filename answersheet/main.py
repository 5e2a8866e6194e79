"""FastAPI application factory for the answer-sheet service."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from answersheet.config import AppConfig, load_config
from answersheet.http.envelope import (
    handle_http_exception,
    handle_request_validation_error,
    handle_unexpected_error,
)
from answersheet.logging_setup import configure_logging
from answersheet.logic.answer_store import AnswerStore
from answersheet.routes import api_router
from answersheet.sheets import Workbook, build_workbook, provision_workbook

logger = logging.getLogger(__name__)


def create_app(
    config: AppConfig | None = None,
    workbook: Workbook | None = None,
    clock: Callable[[], datetime] | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    `config` defaults to `load_config()`; `workbook` defaults to the backend
    named by the configuration. Missing partitions are created when
    `store.auto_provision` is enabled, otherwise requests answer with the
    "Required sheets not found" envelope until they exist.
    """
    try:
        configure_logging()
    except Exception:
        logging.getLogger(__name__).error("global_logging_configuration_failed", exc_info=True)

    config = config or load_config()
    workbook = workbook if workbook is not None else build_workbook(config)
    if config.store.auto_provision:
        provision_workbook(workbook, config.store)

    app = FastAPI(title="Answer Sheet Service")
    app.state.config = config
    app.state.answer_store = AnswerStore(config.store, workbook, clock=clock)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors.allow_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
    app.include_router(api_router)

    logger.info(
        "app_created backend=%s sheets=%s layout=%s",
        config.backend.kind,
        app.state.answer_store.partition_names,
        config.response.layout,
    )
    return app


__all__ = ["create_app"]
