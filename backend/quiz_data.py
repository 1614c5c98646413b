"""In-memory question pool.

The pool is an immutable tuple of QuestionRecord that gets swapped out
wholesale on every successful refresh. Readers grab one snapshot per request.
"""
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

MIN_CHOICES = 3


class InvalidQuestion(ValueError):
    """Raised when a raw question object doesn't have the expected shape."""


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class QuestionRecord:
    id: int
    text: str
    choices: tuple
    correct_choice_index: int
    explanation: str = ""

    @classmethod
    def from_payload(cls, payload, record_id):
        if not isinstance(payload, dict):
            raise InvalidQuestion(f"expected an object, got {type(payload).__name__}")

        # Older prompts used "question" / "correctAnswerIndex"
        text = payload.get("text", payload.get("question"))
        if not isinstance(text, str) or not text.strip():
            raise InvalidQuestion("missing question text")

        choices = payload.get("choices")
        if not isinstance(choices, list) or len(choices) < MIN_CHOICES:
            raise InvalidQuestion(f"need at least {MIN_CHOICES} choices")
        if not all(isinstance(c, str) for c in choices):
            raise InvalidQuestion("choices must be strings")

        index = payload.get("correctChoiceIndex", payload.get("correctAnswerIndex"))
        if not _is_int(index) or not 0 <= index < len(choices):
            raise InvalidQuestion(f"correct choice index {index!r} out of range")

        explanation = payload.get("explanation") or ""
        if not isinstance(explanation, str):
            explanation = str(explanation)

        return cls(
            id=record_id,
            text=text.strip(),
            choices=tuple(choices),
            correct_choice_index=index,
            explanation=explanation,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "text": self.text,
            "choices": list(self.choices),
            "correctChoiceIndex": self.correct_choice_index,
            "explanation": self.explanation,
        }


def build_records(payloads):
    """Turn raw question objects into records with ids 1..n in arrival order.

    Malformed entries are logged and skipped; ids stay dense over what's kept.
    """
    records = []
    for position, payload in enumerate(payloads):
        try:
            record = QuestionRecord.from_payload(payload, record_id=len(records) + 1)
        except InvalidQuestion as e:
            logger.warning("Skipping question #%d from source: %s", position, e)
            continue
        records.append(record)
    return tuple(records)


class QuizPool:
    """Holds the current question snapshot."""

    def __init__(self, records=()):
        self._lock = threading.Lock()
        self._records = tuple(records)
        self._updated_at = datetime.now(timezone.utc) if self._records else None

    def snapshot(self):
        with self._lock:
            return self._records

    def replace(self, records):
        records = tuple(records)
        with self._lock:
            self._records = records
            self._updated_at = datetime.now(timezone.utc)
        return records

    @property
    def updated_at(self):
        with self._lock:
            return self._updated_at

    def is_empty(self):
        return len(self.snapshot()) == 0

    def __len__(self):
        return len(self.snapshot())
