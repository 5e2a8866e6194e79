"""Health check reporting whether both partitions are provisioned."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from answersheet.errors import SheetBackendError
from answersheet.logic.answer_store import AnswerStore
from answersheet.routes.deps import get_answer_store

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", summary="Service health")
def health(store: AnswerStore = Depends(get_answer_store)) -> dict:
    try:
        missing = store.missing_partitions()
    except SheetBackendError as e:
        logger.error("health_backend_unavailable", exc_info=True)
        return {"status": "degraded", "missing_sheets": store.partition_names, "reason": str(e)}
    return {"status": "ok" if not missing else "degraded", "missing_sheets": missing}


__all__ = ["router"]
