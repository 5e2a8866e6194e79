"""Request envelope dispatch.

Branches on `request_type`, validates the envelope, calls the store and
shapes the reply. `handle_request` never raises: every failure becomes an
error envelope.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from answersheet.errors import MalformedRequestError, StoreNotProvisionedError
from answersheet.http.envelope import (
    MSG_INVALID_GET,
    MSG_INVALID_REQUEST_TYPE,
    MSG_INVALID_SET,
    error_envelope,
    success_envelope,
    unexpected_error_envelope,
    updated_message,
)
from answersheet.logic.answer_store import AnswerStore
from answersheet.models.question_type import QuestionType
from answersheet.models.records import AnswerRecord
from answersheet.models.requests import GetEnvelope, SetEnvelope

logger = logging.getLogger(__name__)

LAYOUT_COMPACT = "compact"
LAYOUT_EXTENSION = "extension"


def format_row(record: AnswerRecord, layout: str = LAYOUT_COMPACT) -> list[Any]:
    """Shape one found record for the response `content` array.

    The extension layout is the six-slot row the browser extension reads:
    word-meaning answers fill slots 1-2, a fill-blank answer fills slot 3.
    """
    if layout != LAYOUT_EXTENSION:
        return record.as_row()
    if record.question_type is QuestionType.WORD_MEANING:
        return [record.question_number, record.answer_1, record.answer_2, None, None, None]
    return [record.question_number, None, None, record.answer_1, None, None]


def handle_get(payload: dict, store: AnswerStore, layout: str = LAYOUT_COMPACT) -> dict[str, Any]:
    try:
        envelope = GetEnvelope.model_validate(payload)
    except ValidationError as e:
        logger.warning("get_rejected errors=%s", e.error_count())
        return error_envelope(MSG_INVALID_GET)
    records = store.get(envelope.lookups())
    return success_envelope(content=[format_row(r, layout) for r in records])


def handle_set(payload: dict, store: AnswerStore) -> dict[str, Any]:
    try:
        envelope = SetEnvelope.model_validate(payload)
    except ValidationError as e:
        logger.warning("set_rejected errors=%s", e.error_count())
        return error_envelope(MSG_INVALID_SET)
    result = store.set(envelope.content)
    return success_envelope(message=updated_message(result.updated_count))


def handle_request(
    payload: Any,
    store: AnswerStore,
    *,
    layout: str = LAYOUT_COMPACT,
    include_stack: bool = False,
) -> dict[str, Any]:
    """Process one decoded request body and return the reply envelope."""
    try:
        request_type = payload.get("request_type") if isinstance(payload, dict) else None
        logger.info("request_received request_type=%s", request_type)
        if request_type == "get":
            return handle_get(payload, store, layout)
        if request_type == "set":
            return handle_set(payload, store)
        return error_envelope(MSG_INVALID_REQUEST_TYPE)
    except (StoreNotProvisionedError, MalformedRequestError) as e:
        return error_envelope(str(e))
    except Exception as e:
        logger.error("request_failed", exc_info=True)
        return unexpected_error_envelope(e, include_stack)


__all__ = ["format_row", "handle_get", "handle_set", "handle_request"]
