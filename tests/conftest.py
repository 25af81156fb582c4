import os
# Override DATABASE_URL before any app imports to avoid PostgreSQL driver requirement
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
# Gemini stays disabled; tests inject fake collaborators where they need one
os.environ["GEMINI_API_KEY"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from placement_coach.databases.postgres.database import Base, get_db
from placement_coach.main import app
from placement_coach.services.feedback_service import FeedbackSummaryBuilder, get_feedback_builder
from placement_coach.scripts.seed_database import seed
import placement_coach.databases.postgres.model as models

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

STUDENT_EMAIL = "student@example.com"
ADMIN_EMAIL = "admin@example.com"

# Enable foreign key support for SQLite
@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


class FakeAI:
    """Stands in for GeminiServices; replies with a fixed text or raises"""

    def __init__(self, reply: str = "", error: Exception = None):
        self.reply = reply
        self.error = error
        self.prompts = []

    async def generate_with_retry(self, prompt, temperature=None, json_mode=False):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture(scope="function")
def db():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    yield db
    db.close()
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(scope="function")
def seeded_db(db):
    seed(db)
    return db

@pytest.fixture(scope="function")
def feedback_builder():
    return FeedbackSummaryBuilder(None)

@pytest.fixture(scope="function")
def client(seeded_db, feedback_builder):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_feedback_builder] = lambda: feedback_builder
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def identity_headers(email: str = STUDENT_EMAIL, role: str = "student") -> dict:
    return {"X-User-Email": email, "X-User-Role": role}

def answer_key(db, title: str, correct_count: int) -> dict:
    """Answers for a seeded test with the first ``correct_count`` questions right"""
    test = db.query(models.Test).filter(models.Test.title == title).first()
    answers = {}
    for idx, question in enumerate(test.questions):
        correct = next(o.text for o in question.options if o.is_correct)
        wrong = next(o.text for o in question.options if not o.is_correct)
        answers[question.id] = correct if idx < correct_count else wrong
    return answers
