"""Pydantic models for stored answers and the items written to the store."""

from __future__ import annotations

from typing import Any, NamedTuple

from pydantic import BaseModel, Field, field_validator

from answersheet.models.question_type import QuestionType


class AnswerKey(NamedTuple):
    """Address of one record: the row number within a partition plus its type."""

    question_number: int
    question_type: QuestionType | str


class AnswerRecord(BaseModel):
    question_number: int
    question_type: QuestionType
    answer_1: str | None = None
    answer_2: str | None = None
    timestamp: str | None = None

    def as_row(self) -> list[Any]:
        """Logical `[question_number, answer_1, answer_2]` shape."""
        return [self.question_number, self.answer_1, self.answer_2]


class AnswerItem(BaseModel):
    """One entry of a `set` batch, using the wire field names."""

    question_number: int = Field(gt=0)
    question_type: str
    question_answer_1: str | None = None
    question_answer_2: str | None = None

    @field_validator("question_number", mode="before")
    @classmethod
    def number_must_not_be_bool(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("question_number must be an integer")
        return v

    @field_validator("question_type", mode="before")
    @classmethod
    def type_to_text(cls, v: Any) -> Any:
        if isinstance(v, QuestionType):
            return v.value
        return v

    @field_validator("question_answer_1", "question_answer_2", mode="before")
    @classmethod
    def answers_to_text(cls, v: Any) -> Any:
        # Spreadsheets store numbers and text alike; keep the payload opaque
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


__all__ = ["AnswerKey", "AnswerRecord", "AnswerItem"]
