"""Deterministic daily question selection.

The selection for a day depends only on the UTC date key (YYYYMMDD) and the
pool's contents and order, so it is stable across repeated calls and across
restarts. Seeding goes through random.Random with a str seed (hashed with
SHA-512), which does not depend on PYTHONHASHSEED.
"""
import random
from collections.abc import Mapping
from datetime import datetime, timezone

from quiz_data import QuestionRecord

DEFAULT_DAILY_COUNT = 5

PUBLIC_FIELDS = ("id", "text", "choices", "explanation")


def daily_seed(today=None):
    """Return the UTC calendar day as a YYYYMMDD key."""
    if today is None:
        today = datetime.now(timezone.utc)
    if isinstance(today, datetime):
        if today.tzinfo is not None:
            today = today.astimezone(timezone.utc)
        today = today.date()
    return f"{today.year:04d}{today.month:02d}{today.day:02d}"


def seeded_shuffle(items, seed):
    """Fisher-Yates shuffle of a copy of ``items``, driven by ``seed``."""
    rng = random.Random(seed)
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = int(rng.random() * (i + 1))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def select(pool, today=None, k=DEFAULT_DAILY_COUNT):
    """Pick the first min(k, len(pool)) items of the day's shuffle."""
    count = min(max(k, 0), len(pool))
    if count == 0:
        return []
    return seeded_shuffle(pool, daily_seed(today))[:count]


def _as_dict(question):
    if isinstance(question, QuestionRecord):
        return question.to_dict()
    return question


def redact(questions):
    """Strip the correct answer, keeping id, text, choices and explanation."""
    safe = []
    for q in questions:
        q = _as_dict(q)
        safe.append({name: q[name] for name in PUBLIC_FIELDS if name in q})
    return safe


def answer_key(questions):
    """Map str(id) -> correct choice index.

    Entries without an integer id and an integer index are skipped.
    """
    key = {}
    for q in questions:
        q = _as_dict(q)
        if not isinstance(q, Mapping):
            continue
        qid = q.get("id")
        index = q.get("correctChoiceIndex")
        if isinstance(qid, bool) or isinstance(index, bool):
            continue
        if isinstance(qid, int) and isinstance(index, int):
            key[str(qid)] = index
    return key
