"""FastAPI dependencies exposing objects created by the app factory."""

from __future__ import annotations

from fastapi import Request

from answersheet.config import AppConfig
from answersheet.logic.answer_store import AnswerStore


def get_answer_store(request: Request) -> AnswerStore:
    return request.app.state.answer_store


def get_app_config(request: Request) -> AppConfig:
    return request.app.state.config
