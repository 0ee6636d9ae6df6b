from __future__ import annotations

import os

# before any stemspark import: no real database file, no audio device
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SPEECH_ENABLED"] = "0"

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from stemspark.db import Base, get_db
from stemspark.deps import get_quiz_registry, get_read_aloud_monitor, get_speech_controller
from stemspark.domain.quiz.engine import QuizRegistry
from stemspark.domain.speech.controller import SpeechController
from stemspark.domain.speech.monitor import ReadAloudMonitor
from stemspark.domain.speech.voices import Voice
from stemspark.main import app
from stemspark.models import history_entry, preference  # noqa: F401

VOICES = [
    Voice(name="Google US English", lang="en-US", default=True, voice_uri="google-us", local_service=False),
    Voice(name="Samantha", lang="en-US", default=False, voice_uri="samantha", local_service=True),
    Voice(name="Daniel", lang="en-GB", default=False, voice_uri="daniel", local_service=True),
    Voice(name="Monica", lang="es-ES", default=False, voice_uri="monica", local_service=False),
    Voice(name="Paulina", lang="es-MX", default=False, voice_uri="paulina", local_service=True),
]


class FakePlatform:
    """In-memory speech platform; tests fire end/error events by hand."""

    def __init__(self, voices: list[Voice] | None = None) -> None:
        self.voices = list(VOICES if voices is None else voices)
        self.listeners = []
        self.spoken = []
        self.cancels = 0
        self.speaking = False
        self.paused = False
        self.closed = False

    def get_voices(self) -> list[Voice]:
        return list(self.voices)

    def on_voices_changed(self, callback) -> None:
        self.listeners.append(callback)

    def publish_voices(self, voices: list[Voice]) -> None:
        self.voices = list(voices)
        for cb in self.listeners:
            cb()

    def speak(self, utterance, on_end, on_error) -> None:
        self.spoken.append((utterance, on_end, on_error))
        self.speaking = True
        self.paused = False

    def cancel(self) -> None:
        self.cancels += 1
        self.speaking = False
        self.paused = False

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def shutdown(self) -> None:
        self.closed = True

    # ---- event helpers ----
    def finish(self, index: int = -1) -> None:
        _, on_end, _ = self.spoken[index]
        self.speaking = False
        on_end()

    def fail(self, code: str, index: int = -1) -> None:
        _, _, on_error = self.spoken[index]
        self.speaking = False
        on_error(code)

    @property
    def last_utterance(self):
        return self.spoken[-1][0]


@pytest.fixture
def platform() -> FakePlatform:
    return FakePlatform()


@pytest.fixture
def controller(platform: FakePlatform) -> SpeechController:
    return SpeechController(platform)


@pytest.fixture
def db_session() -> Iterator[Session]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def quizzes() -> QuizRegistry:
    return QuizRegistry()


@pytest.fixture
def monitor() -> ReadAloudMonitor:
    return ReadAloudMonitor()


@pytest.fixture
def client(db_session: Session, controller: SpeechController, quizzes: QuizRegistry,
           monitor: ReadAloudMonitor) -> Iterator[TestClient]:
    def _db():
        yield db_session

    app.dependency_overrides[get_db] = _db
    app.dependency_overrides[get_speech_controller] = lambda: controller
    app.dependency_overrides[get_quiz_registry] = lambda: quizzes
    app.dependency_overrides[get_read_aloud_monitor] = lambda: monitor
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


def quiz_payload(n: int = 3) -> list[dict]:
    return [
        {
            "question": f"Question {i + 1}?",
            "options": ["Lava", "Ice", "Sand"],
            "correctAnswerIndex": i % 3,
            "explanation": f"Because of reason {i + 1}.",
        }
        for i in range(n)
    ]
