import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv()


def _env_int(name, default, minimum=None):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring malformed %s=%r, using %s", name, raw, default)
        return default
    if minimum is not None and value < minimum:
        logger.warning("Ignoring malformed %s=%r (must be >= %s), using %s", name, raw, minimum, default)
        return default
    return value


def _env_float(name, default):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring malformed %s=%r, using %s", name, raw, default)
        return default


@dataclass
class Settings:
    """Runtime configuration, read from the environment (and a local .env)."""

    gemini_api_key: str = field(default_factory=lambda: os.getenv("GEMINI_API_KEY", ""))
    gemini_model: str = field(default_factory=lambda: os.getenv("GEMINI_MODEL", "gemini-2.5-flash"))
    gemini_api_base: str = field(
        default_factory=lambda: os.getenv(
            "GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta"
        )
    )
    gemini_timeout: float = field(default_factory=lambda: _env_float("GEMINI_TIMEOUT_SECONDS", 60.0))
    generation_count: int = field(default_factory=lambda: _env_int("QUIZ_GENERATION_COUNT", 5, minimum=1))
    temperature: float = field(default_factory=lambda: _env_float("QUIZ_TEMPERATURE", 0.9))
    daily_question_count: int = field(default_factory=lambda: _env_int("DAILY_QUESTION_COUNT", 5, minimum=1))
    refresh_interval: int = field(default_factory=lambda: _env_int("REFRESH_INTERVAL_SECONDS", 7200, minimum=1))
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: _env_int("PORT", 8080, minimum=1))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_format: str = field(default_factory=lambda: os.getenv("LOG_FORMAT", "text"))


def get_settings():
    return Settings()
