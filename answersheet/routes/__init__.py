"""APIRouter registration for the answer-sheet service."""

from __future__ import annotations

from fastapi import APIRouter

from answersheet.routes.health import router as health_router
from answersheet.routes.requests import router as requests_router

api_router = APIRouter()
api_router.include_router(requests_router, tags=["Answers"])
api_router.include_router(health_router, tags=["Health"])

__all__ = ["api_router"]
