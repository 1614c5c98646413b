from datetime import date

import pytest

from app import create_app
from quiz_data import QuizPool, build_records
from settings import Settings

FIXED_DAY = date(2024, 1, 1)


def make_payloads(count, prefix="Question"):
    """Raw question objects shaped the way Gemini returns them."""
    return [
        {
            "text": f"{prefix} {n}?",
            "choices": [f"{prefix} {n} choice {c}" for c in "abcd"],
            "correctChoiceIndex": n % 4,
            "explanation": f"Because of reason {n}.",
        }
        for n in range(1, count + 1)
    ]


@pytest.fixture
def payloads():
    return make_payloads(10)


@pytest.fixture
def records(payloads):
    return build_records(payloads)


@pytest.fixture
def pool(records):
    return QuizPool(records)


@pytest.fixture
def settings():
    return Settings(gemini_api_key="test-key", daily_question_count=5)


@pytest.fixture
def client(pool, settings):
    app = create_app(pool, settings, today=lambda: FIXED_DAY)
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture
def empty_client(settings):
    app = create_app(QuizPool(), settings, today=lambda: FIXED_DAY)
    app.config["TESTING"] = True
    return app.test_client()
