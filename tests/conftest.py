"""
Shared fixtures: SQLite session, quiz type catalog, seeded quizzes, API client
"""
import os
import tempfile

# Settings are read at import time; configure before importing the app
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["CACHE_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "ERROR"
os.environ["DOCUMENT_STORAGE_DIR"] = tempfile.mkdtemp(prefix="quiz-docs-")
os.environ["RATE_LIMIT_PER_MINUTE"] = "1000"
os.environ["RATE_LIMIT_PER_HOUR"] = "10000"

import uuid
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base
from app.models import Quiz, QuizContent, QuizType


OWNER_ID = uuid.UUID("11111111-1111-4111-8111-111111111111")
STUDENT_ID = uuid.UUID("22222222-2222-4222-8222-222222222222")


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def quiz_types(db):
    """MCQ, Descriptive, Numerical in display order"""
    types = {}
    for order, name in enumerate(["MCQ", "Descriptive", "Numerical"]):
        quiz_type = QuizType(type_id=uuid.uuid4(), type_name=name, order=order, created_by=OWNER_ID)
        db.add(quiz_type)
        types[name] = quiz_type
    db.commit()
    return types


def make_question(prompt, answer, difficulty, options=None, explanation="Because."):
    question = {
        "question": prompt,
        "answer": answer,
        "explanation": explanation,
        "difficulty": difficulty,
    }
    if options:
        question["options"] = options
    return question


@pytest.fixture
def seeded_quiz(db, quiz_types):
    """Completed quiz: 2 easy + 1 medium MCQ, 1 hard descriptive, 1 easy numerical"""
    quiz = Quiz(
        quiz_id=uuid.uuid4(),
        quiz_name="Algebra basics",
        description="Linear equations",
        document_urls=["http://docs/ch1.pdf"],
        is_private=False,
        quick_quiz=False,
        created_by=OWNER_ID,
        subject="Mathematics",
        is_completed=True,
    )
    db.add(quiz)
    db.commit()

    db.add(QuizContent.from_buckets(quiz.quiz_id, quiz_types["MCQ"].type_id, {
        "easy": [
            make_question("2 + 2 = ?", "4", "easy", options=["3", "4", "5", "6"]),
            make_question("3 x 3 = ?", "9", "easy", options=["6", "9", "12", "3"]),
        ],
        "medium": [
            make_question("Solve x + 3 = 10", "7", "medium", options=["3", "7", "10", "13"]),
        ],
    }))
    db.add(QuizContent.from_buckets(quiz.quiz_id, quiz_types["Descriptive"].type_id, {
        "hard": [make_question("Explain the distributive law", "a(b + c) = ab + ac", "hard")],
    }))
    db.add(QuizContent.from_buckets(quiz.quiz_id, quiz_types["Numerical"].type_id, {
        "easy": [make_question("What is 12 / 4?", "3", "easy")],
    }))
    db.commit()
    return quiz


@pytest.fixture
def mock_llm_client():
    """LLM service client whose endpoints are AsyncMocks"""
    client = AsyncMock()
    client.create_quiz = AsyncMock()
    client.feedback = AsyncMock(return_value={"score": 100, "feedback": "Well done"})
    return client


@pytest.fixture
def api_client(db, monkeypatch):
    """FastAPI test client bound to the test session"""
    from fastapi.testclient import TestClient
    from app.database import get_db
    from app.main import app
    from app.utils.rate_limiter import rate_limiter

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    rate_limiter.minute_tracker.clear()
    rate_limiter.hour_tracker.clear()

    yield TestClient(app)

    app.dependency_overrides.clear()
