import dataclasses

import pytest

from conftest import make_payloads
from quiz_data import InvalidQuestion, QuestionRecord, QuizPool, build_records


def test_build_records_assigns_sequential_ids(payloads):
    records = build_records(payloads)
    assert [r.id for r in records] == list(range(1, 11))
    assert records[0].text == "Question 1?"
    assert records[0].correct_choice_index == 1


def test_build_records_skips_malformed_and_keeps_ids_dense():
    payloads = make_payloads(3)
    payloads.insert(1, {"text": "Too few choices", "choices": ["a", "b"], "correctChoiceIndex": 0})
    payloads.append({"text": "Bad index", "choices": ["a", "b", "c"], "correctChoiceIndex": 3})
    records = build_records(payloads)
    assert [r.id for r in records] == [1, 2, 3]
    assert [r.text for r in records] == ["Question 1?", "Question 2?", "Question 3?"]


def test_from_payload_accepts_legacy_field_names():
    record = QuestionRecord.from_payload(
        {"question": "Capital of France?", "choices": ["Paris", "Rome", "Oslo"], "correctAnswerIndex": 0},
        record_id=1,
    )
    assert record.text == "Capital of France?"
    assert record.correct_choice_index == 0
    assert record.explanation == ""


@pytest.mark.parametrize("payload", [
    "not a dict",
    {"text": "", "choices": ["a", "b", "c"], "correctChoiceIndex": 0},
    {"text": "Q?", "choices": "abc", "correctChoiceIndex": 0},
    {"text": "Q?", "choices": ["a", "b", 3], "correctChoiceIndex": 0},
    {"text": "Q?", "choices": ["a", "b", "c"], "correctChoiceIndex": -1},
    {"text": "Q?", "choices": ["a", "b", "c"], "correctChoiceIndex": True},
    {"text": "Q?", "choices": ["a", "b", "c"]},
])
def test_from_payload_rejects_malformed(payload):
    with pytest.raises(InvalidQuestion):
        QuestionRecord.from_payload(payload, record_id=1)


def test_records_are_immutable(records):
    with pytest.raises(dataclasses.FrozenInstanceError):
        records[0].correct_choice_index = 3


def test_to_dict_uses_wire_names(records):
    assert records[1].to_dict() == {
        "id": 2,
        "text": "Question 2?",
        "choices": ["Question 2 choice a", "Question 2 choice b",
                    "Question 2 choice c", "Question 2 choice d"],
        "correctChoiceIndex": 2,
        "explanation": "Because of reason 2.",
    }


def test_pool_starts_empty():
    pool = QuizPool()
    assert pool.is_empty()
    assert len(pool) == 0
    assert pool.snapshot() == ()
    assert pool.updated_at is None


def test_pool_replace_is_wholesale(records):
    pool = QuizPool(records)
    replacement = build_records(make_payloads(2, prefix="New"))
    pool.replace(replacement)
    assert pool.snapshot() == replacement
    assert [r.text for r in pool.snapshot()] == ["New 1?", "New 2?"]
    assert pool.updated_at is not None


def test_old_snapshot_survives_replace(records):
    pool = QuizPool(records)
    old = pool.snapshot()
    pool.replace(build_records(make_payloads(4, prefix="New")))
    assert old == records
    assert len(pool) == 4
