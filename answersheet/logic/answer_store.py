"""Row-addressed answer store over a two-partition workbook.

Each question type owns one sheet. Row 1 of a sheet is the header and row
`N` holds the record whose question number is `N - 1`, in the columns
timestamp, question_number, answer_1, answer_2. Columns past the fourth are
reserved and ignored.

Writes are guarded fills: a row is written only while its key cell is empty
or holds a different number, so the first writer of a key wins and later
writes of the same key are no-ops. A filled row is never rewritten.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping, Sequence

from answersheet.config import StoreConfig
from answersheet.errors import MalformedRequestError, StoreNotProvisionedError
from answersheet.models.outcome import (
    REASON_ALREADY_FILLED,
    REASON_UNKNOWN_TYPE,
    ItemOutcome,
    OutcomeStatus,
    SetResult,
)
from answersheet.models.question_type import QuestionType
from answersheet.models.records import AnswerItem, AnswerKey, AnswerRecord
from answersheet.sheets.base import Sheet, Workbook, is_empty

logger = logging.getLogger(__name__)

HEADER_ROWS = 1
TIMESTAMP_COLUMN = 1
KEY_COLUMN = 2
ANSWER_1_COLUMN = 3
ANSWER_2_COLUMN = 4

# Guard-and-write critical sections are serialized per (sheet, row) stripe
_LOCK_STRIPES = 64


def row_for(question_number: int) -> int:
    return question_number + HEADER_ROWS


def same_key(stored: Any, question_number: int) -> bool:
    """True when a stored key cell holds `question_number`.

    Backends hand back ints, floats or text ("5", "5.0") for the same key.
    """
    if is_empty(stored) or isinstance(stored, bool):
        return False
    if isinstance(stored, int):
        return stored == question_number
    try:
        as_float = float(str(stored).strip())
    except ValueError:
        return False
    return as_float.is_integer() and int(as_float) == question_number


def _cell(cells: Sequence[Any], column: int) -> Any:
    return cells[column - 1] if len(cells) >= column else None


def _text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AnswerStore:
    """Maps (question_number, question_type) to stored answers."""

    def __init__(
        self,
        config: StoreConfig,
        workbook: Workbook,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config
        self.workbook = workbook
        self.clock = clock or _utcnow
        self._partitions = {
            QuestionType.WORD_MEANING: config.word_meaning_sheet,
            QuestionType.FILL_BLANK: config.fill_blank_sheet,
        }
        # Clients may send the sheet label itself as the question type
        self._labels = {name: qt for qt, name in self._partitions.items()}
        self._locks = [threading.Lock() for _ in range(_LOCK_STRIPES)]

    # ------------------------------------------------------------------
    # Partition resolution
    # ------------------------------------------------------------------

    @property
    def partition_names(self) -> list[str]:
        return list(self._partitions.values())

    def partition_name(self, question_type: QuestionType) -> str:
        return self._partitions[question_type]

    def resolve_type(self, raw: object) -> QuestionType | None:
        return QuestionType.parse(raw, self._labels)

    def missing_partitions(self) -> list[str]:
        existing = set(self.workbook.sheet_names())
        return [name for name in self.partition_names if name not in existing]

    def _require_partitions(self) -> dict[QuestionType, Sheet]:
        sheets: dict[QuestionType, Sheet] = {}
        missing: list[str] = []
        for qt, name in self._partitions.items():
            sheet = self.workbook.get_sheet(name)
            if sheet is None:
                missing.append(name)
            else:
                sheets[qt] = sheet
        if missing:
            logger.error("partitions_missing missing=%s", missing)
            raise StoreNotProvisionedError(missing, self.partition_names)
        return sheets

    def _lock_for(self, sheet_name: str, row: int) -> threading.Lock:
        return self._locks[hash((sheet_name, row)) % _LOCK_STRIPES]

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @staticmethod
    def _coerce_key(pair: Any) -> AnswerKey:
        if isinstance(pair, AnswerKey):
            number, qtype = pair
        elif isinstance(pair, Mapping):
            if "question_number" not in pair or "question_type" not in pair:
                raise MalformedRequestError(f"lookup is missing question_number or question_type: {pair!r}")
            number, qtype = pair["question_number"], pair["question_type"]
        elif isinstance(pair, (list, tuple)) and len(pair) == 2:
            number, qtype = pair
        else:
            raise MalformedRequestError(f"lookup must be a (question_number, question_type) pair: {pair!r}")
        if isinstance(number, bool) or not isinstance(number, int):
            raise MalformedRequestError(f"question_number must be an integer: {number!r}")
        return AnswerKey(number, qtype)

    def get(self, requests: Iterable[Any]) -> list[AnswerRecord]:
        """Look up a batch of keys; misses are omitted, hits keep input order."""
        if isinstance(requests, (str, bytes, Mapping)) or not isinstance(requests, Iterable):
            raise MalformedRequestError("lookups must be a list of (question_number, question_type) pairs")
        keys = [self._coerce_key(p) for p in requests]
        sheets = self._require_partitions()

        lookups: list[tuple[int, QuestionType]] = []
        for key in keys:
            qt = self.resolve_type(key.question_type)
            if qt is None:
                logger.warning(
                    "get_skipped question_number=%s question_type=%r reason=unknown_question_type",
                    key.question_number,
                    key.question_type,
                )
                continue
            if key.question_number < 1:
                logger.warning(
                    "get_skipped question_number=%s reason=non_positive_question_number", key.question_number
                )
                continue
            lookups.append((key.question_number, qt))

        # One read per partition per batch, limited to the requested rows
        wanted: dict[QuestionType, set[int]] = {}
        for number, qt in lookups:
            wanted.setdefault(qt, set()).add(row_for(number))
        rows_by_type = {qt: sheets[qt].get_rows(rows, ANSWER_2_COLUMN) for qt, rows in wanted.items()}

        results: list[AnswerRecord] = []
        misses = 0
        for number, qt in lookups:
            cells = rows_by_type[qt].get(row_for(number), [])
            if not same_key(_cell(cells, KEY_COLUMN), number):
                misses += 1
                logger.debug("get_miss question_number=%s question_type=%s", number, qt.value)
                continue
            results.append(
                AnswerRecord(
                    question_number=number,
                    question_type=qt,
                    answer_1=_text(_cell(cells, ANSWER_1_COLUMN)),
                    answer_2=_text(_cell(cells, ANSWER_2_COLUMN)),
                    timestamp=_text(_cell(cells, TIMESTAMP_COLUMN)),
                )
            )
        logger.info("get_completed requested=%s found=%s misses=%s", len(keys), len(results), misses)
        return results

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set(self, items: Iterable[Any]) -> SetResult:
        """Write each item whose row is still empty; see module docstring."""
        if isinstance(items, (str, bytes, Mapping)) or not isinstance(items, Iterable):
            raise MalformedRequestError("items must be a list of answer objects")
        items = list(items)
        sheets = self._require_partitions()

        outcomes: list[ItemOutcome] = []
        for index, raw in enumerate(items):
            outcomes.append(self._set_one(index, raw, sheets))

        result = SetResult(outcomes=outcomes)
        logger.info(
            "set_completed submitted=%s written=%s skipped=%s failed=%s",
            len(items),
            result.updated_count,
            len(result.skipped),
            len(result.failed),
        )
        return result

    def _set_one(self, index: int, raw: Any, sheets: dict[QuestionType, Sheet]) -> ItemOutcome:
        number_hint = raw.get("question_number") if isinstance(raw, Mapping) else getattr(raw, "question_number", None)
        if not isinstance(number_hint, int) or isinstance(number_hint, bool):
            number_hint = None
        try:
            item = raw if isinstance(raw, AnswerItem) else AnswerItem.model_validate(raw)
            qt = self.resolve_type(item.question_type)
            if qt is None:
                logger.warning(
                    "set_skipped question_number=%s question_type=%r reason=%s",
                    item.question_number,
                    item.question_type,
                    REASON_UNKNOWN_TYPE,
                )
                return ItemOutcome(
                    index=index,
                    question_number=item.question_number,
                    status=OutcomeStatus.SKIPPED,
                    reason=REASON_UNKNOWN_TYPE,
                )

            sheet = sheets[qt]
            row = row_for(item.question_number)
            with self._lock_for(sheet.name, row):
                existing = sheet.get_value(row, KEY_COLUMN)
                if same_key(existing, item.question_number):
                    logger.debug(
                        "set_skipped question_number=%s question_type=%s reason=%s",
                        item.question_number,
                        qt.value,
                        REASON_ALREADY_FILLED,
                    )
                    return ItemOutcome(
                        index=index,
                        question_number=item.question_number,
                        status=OutcomeStatus.SKIPPED,
                        reason=REASON_ALREADY_FILLED,
                    )
                sheet.set_row(
                    row,
                    TIMESTAMP_COLUMN,
                    [
                        self.clock().isoformat(),
                        item.question_number,
                        item.question_answer_1,
                        item.question_answer_2,
                    ],
                )
            return ItemOutcome(index=index, question_number=item.question_number, status=OutcomeStatus.WRITTEN)
        except Exception as e:
            logger.error("set_item_failed index=%s question_number=%s", index, number_hint, exc_info=True)
            return ItemOutcome(
                index=index,
                question_number=number_hint,
                status=OutcomeStatus.FAILED,
                reason=str(e) or e.__class__.__name__,
            )


__all__ = ["AnswerStore", "row_for", "same_key"]
