"""POST endpoint receiving the browser extension's get/set envelopes.

The body is read raw and decoded here so that invalid JSON still yields the
error envelope with HTTP 200, as the extension expects.
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from answersheet.config import AppConfig
from answersheet.http.envelope import unexpected_error_envelope
from answersheet.logic.answer_store import AnswerStore
from answersheet.logic.dispatch import handle_request
from answersheet.routes.deps import get_answer_store, get_app_config

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", summary="Get or set stored answers")
@router.post("/exec", summary="Get or set stored answers (web-app path)")
async def post_request(
    request: Request,
    store: AnswerStore = Depends(get_answer_store),
    config: AppConfig = Depends(get_app_config),
) -> JSONResponse:
    raw = await request.body()
    try:
        payload = json.loads(raw.decode("utf-8")) if raw else None
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("request_body_not_json bytes=%s", len(raw))
        return JSONResponse(unexpected_error_envelope(e, config.errors.include_stack))
    body = handle_request(
        payload,
        store,
        layout=config.response.layout,
        include_stack=config.errors.include_stack,
    )
    return JSONResponse(body)


__all__ = ["router"]
