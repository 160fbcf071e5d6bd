import os

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("OPENAI_API_KEY", "")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from wordsy.core.exceptions import ContentGenerationError
from wordsy.database import Base, get_db
from wordsy.main import app
from wordsy.services import quiz_service
from wordsy.services.content_service import get_content_generator
import wordsy.models  # noqa: F401


class FakeContentGenerator:
    """Deterministic stand-in for the OpenAI generator"""

    def __init__(self):
        self.quiz_calls = []
        self.sentence_calls = []
        self.chat_calls = []
        self.questions = None
        self.error = None

    def _fail_if_needed(self):
        if self.error:
            raise ContentGenerationError(self.error)

    def generate_quiz_questions(self, words, quiz_type="standard", language="en",
                                group_name="", group_description="", question_count=10):
        self._fail_if_needed()
        self.quiz_calls.append({"words": words, "quiz_type": quiz_type, "language": language})
        if self.questions is not None:
            return self.questions
        return [
            {
                "type": "multipleChoice",
                "question": f"What does '{item['word']}' mean?",
                "correctAnswer": f"meaning of {item['word']}",
                "options": [f"meaning of {item['word']}", "option a", "option b", "option c"],
            }
            for item in words
        ]

    def generate_example_sentences(self, word, group_name="", group_description="", language="", count=5):
        self._fail_if_needed()
        self.sentence_calls.append({"word": word, "language": language, "count": count})
        return [
            {"text": f"Sentence {i + 1} with {word}.", "difficulty": "easy"}
            for i in range(count)
        ]

    def translate(self, text, target_language):
        self._fail_if_needed()
        return f"{text} ({target_language})"

    def get_word_info(self, word, source_language="", translate_language="en"):
        self._fail_if_needed()
        return {"type": "noun", "meaning": f"a {word}", "translation": f"{word}-{translate_language}"}

    def chat(self, messages, language):
        self._fail_if_needed()
        self.chat_calls.append({"messages": messages, "language": language})
        return f"Reply in {language} to: {messages[-1]['content']}"


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
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def generator():
    return FakeContentGenerator()


@pytest.fixture(autouse=True)
def clear_active_quizzes():
    quiz_service.active_quizzes.clear()
    yield
    quiz_service.active_quizzes.clear()


@pytest.fixture
def client(session_factory, generator):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_content_generator] = lambda: generator
    yield TestClient(app)
    app.dependency_overrides.clear()
