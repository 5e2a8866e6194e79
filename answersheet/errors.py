"""Exception hierarchy for the answer-sheet service.

Only batch-level failures are raised as exceptions; per-item problems inside
a batch are reported as outcomes by the store.
"""

from __future__ import annotations

from typing import Sequence


class AnswerSheetError(Exception):
    """Base class for all service errors."""


class MalformedRequestError(AnswerSheetError):
    """The batch input is not a list or contains malformed pairs."""


class StoreNotProvisionedError(AnswerSheetError):
    """One or more required partitions (sheets) do not exist."""

    def __init__(self, missing: Sequence[str], required: Sequence[str]) -> None:
        self.missing = list(missing)
        self.required = list(required)
        quoted = " and ".join(f"'{name}'" for name in self.required)
        super().__init__(f"Required sheets not found. Please create sheets: {quoted}")


class SheetBackendError(AnswerSheetError):
    """A read or write against the backing workbook failed."""


__all__ = [
    "AnswerSheetError",
    "MalformedRequestError",
    "StoreNotProvisionedError",
    "SheetBackendError",
]
