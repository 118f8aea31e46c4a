"""
Initialize database: create all tables. Run once manually before first app launch.

Usage (from backend directory):
  python -m scripts.init_db

The application does not create or migrate the database on startup.

Tables Created:
  - users, ai_providers, ai_models, ai_usage_logs: provider configs and usage accounting
  - curricula, topics, learning_objectives: curriculum structure read by the generators
  - exercises, exercise_hints, exercise_test_cases: coding exercises
  - quizzes, quiz_questions, quiz_question_options: quizzes
  - topic_content_variations, topic_reviews: AI-written topic content
"""

from learnhub.core.config import get_database_url
from learnhub.core.database import init_db
from learnhub.core.logging import get_logger

logger = get_logger()


def main():
    logger.info("Initializing database at %s ...", get_database_url())
    init_db()
    logger.info(
        "Database initialization complete. Run the application with: python -m uvicorn main:app --host 0.0.0.0 --port 8090"
    )


if __name__ == "__main__":
    main()
