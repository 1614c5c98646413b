"""Background refresh of the question pool."""
import logging
import threading

from question_source import QuestionSourceError
from quiz_data import build_records

logger = logging.getLogger(__name__)


def refresh_pool(pool, source):
    """Fetch a new batch and publish it. Returns True if the pool was replaced.

    Failures are logged and the current pool is kept as-is.
    """
    try:
        payloads = source.fetch()
        records = build_records(payloads)
        if not records:
            raise QuestionSourceError("No valid questions in Gemini response")
    except QuestionSourceError as e:
        logger.error("Failed to fetch quiz data, keeping existing data: %s", e)
        if e.status is not None:
            logger.error("API response status: %s", e.status)
            logger.error("API response body: %s", e.body)
        return False
    except Exception:
        logger.exception("Unexpected error while refreshing quiz data, keeping existing data")
        return False

    pool.replace(records)
    logger.info("Quiz data refreshed: %d questions loaded from Gemini", len(records))
    return True


class PoolRefresher:
    """Refreshes the pool once on start, then every ``interval`` seconds."""

    def __init__(self, pool, source, interval=7200):
        if interval <= 0:
            raise ValueError(f"refresh interval must be positive, got {interval!r}")
        self.pool = pool
        self.source = source
        self.interval = interval
        self._stop = threading.Event()
        self._thread = None

    def start(self):
        if self._thread is not None and self._thread.is_alive():
            return self
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="quiz-refresher", daemon=True)
        self._thread.start()
        return self

    def stop(self, timeout=None):
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)

    def _run(self):
        refresh_pool(self.pool, self.source)
        while not self._stop.wait(self.interval):
            refresh_pool(self.pool, self.source)
