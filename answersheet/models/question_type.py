"""QuestionType enumeration selecting the partition a record lives in."""

from __future__ import annotations

from enum import Enum
from typing import Mapping


class QuestionType(str, Enum):
    WORD_MEANING = "word-meaning"
    FILL_BLANK = "fill-blank"

    @classmethod
    def parse(cls, raw: object, labels: Mapping[str, "QuestionType"] | None = None) -> "QuestionType | None":
        """Resolve `raw` to a QuestionType, or None when unrecognized.

        Accepts the canonical value, the member name (any case, dashes or
        underscores) and any partition label in `labels`, which lets clients
        send the sheet names themselves.
        """
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        token = raw.strip()
        if labels and token in labels:
            return labels[token]
        normalized = token.lower().replace("_", "-")
        for member in cls:
            if normalized == member.value:
                return member
        return None


__all__ = ["QuestionType"]
