"""Pydantic models and enums shared by the store, dispatcher and routes."""

from answersheet.models.outcome import ItemOutcome, OutcomeStatus, SetResult
from answersheet.models.question_type import QuestionType
from answersheet.models.records import AnswerItem, AnswerKey, AnswerRecord
from answersheet.models.requests import GetEnvelope, SetEnvelope

__all__ = [
    "AnswerItem",
    "AnswerKey",
    "AnswerRecord",
    "GetEnvelope",
    "ItemOutcome",
    "OutcomeStatus",
    "QuestionType",
    "SetEnvelope",
    "SetResult",
]
