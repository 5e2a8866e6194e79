"""Response envelope helpers and global exception handlers.

Every response body is `{"status": "success", ...}` or `{"status":
"error", "message": ...}`; the handlers below convert anything that escapes
a route into the same shape so clients never have to parse a transport
fault.
"""

from __future__ import annotations

import logging
import traceback
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)

STATUS_SUCCESS = "success"
STATUS_ERROR = "error"

MSG_INVALID_REQUEST_TYPE = "Invalid request_type"
MSG_INVALID_GET = "Invalid or missing question_number array or question_type string"
MSG_INVALID_SET = "Invalid or missing content array"


def success_envelope(*, content: Any = None, message: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"status": STATUS_SUCCESS}
    if content is not None:
        body["content"] = content
    if message is not None:
        body["message"] = message
    return body


def error_envelope(message: str) -> dict[str, Any]:
    return {"status": STATUS_ERROR, "message": message}


def unexpected_error_envelope(exc: BaseException, include_stack: bool = False) -> dict[str, Any]:
    body = error_envelope(f"An error occurred: {exc}")
    if include_stack:
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return body


def updated_message(count: int) -> str:
    return f"{count} questions updated."


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:  # noqa: D401
    status_code = int(getattr(exc, "status_code", 500) or 500)
    detail = getattr(exc, "detail", None)
    message = detail if isinstance(detail, str) and detail else "HTTP error"
    headers = exc.headers if isinstance(getattr(exc, "headers", None), dict) else None
    return JSONResponse(error_envelope(message), status_code=status_code, headers=headers)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: D401
    logger.warning("request_validation_failed path=%s errors=%s", request.url.path, len(exc.errors()))
    return JSONResponse(error_envelope(f"An error occurred: {exc}"), status_code=200)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    logger.error("unexpected_error path=%s", request.url.path, exc_info=exc)
    config = getattr(request.app.state, "config", None)
    include_stack = bool(config is not None and config.errors.include_stack)
    return JSONResponse(unexpected_error_envelope(exc, include_stack), status_code=200)


__all__ = [
    "STATUS_SUCCESS",
    "STATUS_ERROR",
    "MSG_INVALID_REQUEST_TYPE",
    "MSG_INVALID_GET",
    "MSG_INVALID_SET",
    "success_envelope",
    "error_envelope",
    "unexpected_error_envelope",
    "updated_message",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_unexpected_error",
]
