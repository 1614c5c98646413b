import logging

from flask import Flask, jsonify, request
from flask_cors import CORS

from daily_sampler import answer_key, daily_seed, redact, select
from logging_config import setup_logging
from question_source import GeminiQuestionSource
from quiz_data import QuizPool
from refresher import PoolRefresher
from settings import get_settings

logger = logging.getLogger(__name__)


def create_app(pool=None, settings=None, today=None):
    """Build the Flask app around a question pool.

    ``today`` is an optional zero-arg callable returning the date to sample
    for; by default the current UTC date is used.
    """
    pool = pool if pool is not None else QuizPool()
    settings = settings or get_settings()

    app = Flask(__name__)
    app.config["QUIZ_POOL"] = pool
    app.config["QUIZ_SETTINGS"] = settings
    CORS(app)

    def todays_questions(snapshot):
        day = today() if today else None
        return select(snapshot, day, settings.daily_question_count)

    @app.route('/api/health', methods=['GET'])
    def health():
        updated_at = pool.updated_at
        return jsonify({
            "status": "ok",
            "questions_count": len(pool),
            "daily_seed": daily_seed(today() if today else None),
            "last_refresh": updated_at.isoformat() if updated_at else None,
        })

    @app.route('/api/quiz', methods=['GET'])
    def get_quiz():
        """Returns today's questions without the correct answers."""
        snapshot = pool.snapshot()
        if not snapshot:
            return jsonify({
                "errorCode": "DATA_UNAVAILABLE",
                "message": "Quiz data is currently loading or unavailable. Please wait for initial data fetch."
            }), 503

        try:
            return jsonify(redact(todays_questions(snapshot))), 200
        except Exception:
            logger.exception("Quiz API error")
            return jsonify({
                "errorCode": "SERVER_ERROR",
                "message": "Internal server error occurred during data retrieval."
            }), 500

    @app.route('/api/answer-key', methods=['GET'])
    def get_answer_key():
        """Returns {question id: correct choice index} for today's questions."""
        snapshot = pool.snapshot()
        if not snapshot:
            return jsonify({"error": "Data unavailable"}), 503

        try:
            return jsonify(answer_key(todays_questions(snapshot))), 200
        except Exception:
            logger.exception("Answer key API error")
            return jsonify({"error": "Internal server error"}), 500

    @app.errorhandler(404)
    def not_found(e):
        if request.path.startswith('/api/'):
            return jsonify({"error": "Not found"}), 404
        return e

    return app


def main():
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    pool = QuizPool()
    app = create_app(pool, settings)

    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY is not set; quiz data refreshes will fail until it is configured")

    source = GeminiQuestionSource(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        api_base=settings.gemini_api_base,
        timeout=settings.gemini_timeout,
        question_count=settings.generation_count,
        temperature=settings.temperature,
    )

    logger.info("Quiz API server listening on port %s", settings.port)
    logger.info("Today's seed: %s", daily_seed())
    logger.info("Quiz data refreshes every %g hours", settings.refresh_interval / 3600)

    # Initial load happens on the refresher thread so the server is up right away
    refresher = PoolRefresher(pool, source, settings.refresh_interval).start()
    try:
        app.run(host=settings.host, port=settings.port)
    finally:
        refresher.stop(timeout=5)


if __name__ == '__main__':
    main()
