"""Fetches fresh quiz questions from the Gemini generateContent API."""
import copy
import json
import logging
import re
import time

import requests

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = (
    "You are an expert at writing general-knowledge quiz questions. "
    "Never reuse a question you have generated before. "
    "Draw on a completely different field than previous requests "
    "(e.g. science, history, geography, society, coding, digital literacy, "
    "economics, politics, language and spelling, sports) and write {count} "
    "unique, new general-knowledge quiz questions. "
    "Each question must match this JSON shape exactly: "
    '{{"text": string, "choices": [at least 3 strings], '
    '"explanation": string, "correctChoiceIndex": 0-based integer}}. '
    "Return only the JSON array with no other commentary. "
    "[REQUEST_ID: {request_id}]"
)

GENERATION_REQUEST = {
    "contents": [
        {
            "role": "user",
            "parts": [{"text": ""}],
        }
    ],
    "generationConfig": {
        "responseMimeType": "application/json",
        "temperature": 0.9,
    },
}

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


class QuestionSourceError(Exception):
    """The provider could not give us a usable question list."""

    def __init__(self, message, status=None, body=None):
        super().__init__(message)
        self.status = status
        self.body = body


def strip_code_fences(text):
    """Remove markdown code fences the model sometimes wraps JSON in."""
    return _FENCE_RE.sub("", text).strip()


def parse_questions(text):
    """Parse the model's answer into a non-empty list of question objects."""
    cleaned = strip_code_fences(text or "")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise QuestionSourceError(f"Response is not valid JSON: {e}") from e

    if not isinstance(data, list) or not data:
        raise QuestionSourceError("Did not get a non-empty quiz array from Gemini")
    if not all(isinstance(item, dict) for item in data):
        raise QuestionSourceError("Quiz array contains non-object entries")
    return data


class GeminiQuestionSource:
    def __init__(self, api_key, model="gemini-2.5-flash",
                 api_base="https://generativelanguage.googleapis.com/v1beta",
                 timeout=60, question_count=5, temperature=0.9, session=None):
        self.api_key = api_key
        self.model = model
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.question_count = question_count
        self.temperature = temperature
        self.session = session or requests.Session()

    @property
    def url(self):
        return f"{self.api_base}/models/{self.model}:generateContent"

    def build_request(self, request_id=None):
        if request_id is None:
            request_id = int(time.time() * 1000)
        body = copy.deepcopy(GENERATION_REQUEST)
        body["contents"][0]["parts"][0]["text"] = PROMPT_TEMPLATE.format(
            count=self.question_count, request_id=request_id
        )
        body["generationConfig"]["temperature"] = self.temperature
        return body

    def fetch(self):
        """Ask Gemini for a new batch; raises QuestionSourceError on any failure."""
        if not self.api_key:
            raise QuestionSourceError("GEMINI_API_KEY is not configured")

        logger.info("Requesting new quiz data from Gemini (%s)", self.model)
        try:
            resp = self.session.post(
                self.url,
                params={"key": self.api_key},
                json=self.build_request(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise QuestionSourceError(f"Network error talking to Gemini: {e}") from e

        if not resp.ok:
            raise QuestionSourceError(
                f"Gemini returned HTTP {resp.status_code}",
                status=resp.status_code,
                body=resp.text,
            )

        try:
            payload = resp.json()
        except ValueError as e:
            raise QuestionSourceError("Gemini response body is not JSON",
                                      status=resp.status_code, body=resp.text) from e

        try:
            text = payload["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise QuestionSourceError("No usable candidate in Gemini response",
                                      status=resp.status_code, body=resp.text) from e

        return parse_questions(text)
