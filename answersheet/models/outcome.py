"""Per-item outcomes of a `set` batch."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class OutcomeStatus(str, Enum):
    WRITTEN = "written"
    SKIPPED = "skipped"
    FAILED = "failed"


# Reasons attached to SKIPPED outcomes
REASON_ALREADY_FILLED = "already_filled"
REASON_UNKNOWN_TYPE = "unknown_question_type"


class ItemOutcome(BaseModel):
    index: int
    question_number: int | None = None
    status: OutcomeStatus
    reason: str | None = None


class SetResult(BaseModel):
    outcomes: list[ItemOutcome]

    @property
    def updated_count(self) -> int:
        return sum(1 for o in self.outcomes if o.status is OutcomeStatus.WRITTEN)

    @property
    def skipped(self) -> list[ItemOutcome]:
        return [o for o in self.outcomes if o.status is OutcomeStatus.SKIPPED]

    @property
    def failed(self) -> list[ItemOutcome]:
        return [o for o in self.outcomes if o.status is OutcomeStatus.FAILED]


__all__ = [
    "OutcomeStatus",
    "ItemOutcome",
    "SetResult",
    "REASON_ALREADY_FILLED",
    "REASON_UNKNOWN_TYPE",
]
