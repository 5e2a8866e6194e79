"""Pydantic models for the JSON request envelope.

The envelope is validated in the dispatcher rather than by FastAPI so that
malformed bodies still produce the `{status, message}` error envelope.
"""

from __future__ import annotations

from typing import Any, List, Union

from pydantic import BaseModel, field_validator, model_validator

from answersheet.models.records import AnswerKey


class GetEnvelope(BaseModel):
    request_type: str = "get"
    question_number: List[int]
    # A single type shared by the batch, or one type per question number
    question_type: Union[str, List[str]]

    @field_validator("question_number", mode="before")
    @classmethod
    def numbers_must_not_be_bools(cls, v: Any) -> Any:
        if isinstance(v, list) and any(isinstance(n, bool) for n in v):
            raise ValueError("question_number entries must be integers")
        return v

    @field_validator("question_type")
    @classmethod
    def type_must_be_non_empty(cls, v: Union[str, List[str]]) -> Union[str, List[str]]:
        if isinstance(v, str) and not v.strip():
            raise ValueError("question_type must be a non-empty string")
        return v

    @model_validator(mode="after")
    def parallel_types_match_numbers(self) -> "GetEnvelope":
        if isinstance(self.question_type, list) and len(self.question_type) != len(self.question_number):
            raise ValueError("question_type array must match question_number array length")
        return self

    def lookups(self) -> list[AnswerKey]:
        if isinstance(self.question_type, str):
            return [AnswerKey(n, self.question_type) for n in self.question_number]
        return [AnswerKey(n, t) for n, t in zip(self.question_number, self.question_type)]


class SetEnvelope(BaseModel):
    request_type: str = "set"
    # Items are validated one by one by the store so a bad item cannot sink the batch
    content: List[Any]


__all__ = ["GetEnvelope", "SetEnvelope"]
