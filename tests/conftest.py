import asyncio

import pytest

from brainflip_app.core.models import Answer, Question, Quiz
from brainflip_app.core.quiz_manager import QuizManager
from brainflip_app.core.services.favorites_ledger import FavoritesLedger
from brainflip_app.core.services.quiz_repository import QuizRepository
from brainflip_app.core.settings import AppSettings
from brainflip_app.core.storage.key_value_store import InMemoryKeyValueStore


def run(coro):
    return asyncio.run(coro)


def make_question(question_id: str, correct: str = "1", count: int = 2, text: str | None = None) -> Question:
    answers = tuple(
        Answer(id=str(index + 1), text=f"Option {index + 1}", is_correct=str(index + 1) == correct)
        for index in range(count)
    )
    return Question(
        id=question_id,
        question_text=text or f"Question {question_id}?",
        answers=answers,
        correct_answer=correct,
    )


def make_quiz(quiz_id: str, title: str = "Sample quiz", corrects: tuple[str, ...] = ("1", "2")) -> Quiz:
    return Quiz(
        id=quiz_id,
        title=title,
        questions=tuple(
            make_question(f"{quiz_id}-q{index + 1}", correct=correct)
            for index, correct in enumerate(corrects)
        ),
        created_at="2024-01-01T00:00:00+00:00",
    )


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def repository(store):
    return QuizRepository(store)


@pytest.fixture
def ledger(store):
    return FavoritesLedger(store)


@pytest.fixture
def settings():
    return AppSettings(answer_grace_period_ms=0)


@pytest.fixture
def manager(store, settings):
    return QuizManager(store, settings)
