"""Domain models for BrainFlip quizzes, favorites and flashcards."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Answer:
    """One selectable option of a question."""

    id: str
    text: str
    is_correct: bool = False


@dataclass(frozen=True, slots=True)
class Question:
    """A prompt with its answer options and the id of the correct one."""

    id: str
    question_text: str
    answers: tuple[Answer, ...] = ()
    correct_answer: str | None = None

    def find_answer(self, answer_id: str) -> Answer | None:
        return next((answer for answer in self.answers if answer.id == answer_id), None)


@dataclass(frozen=True, slots=True)
class Quiz:
    """A titled, ordered set of questions authored by the user."""

    id: str
    title: str
    questions: tuple[Question, ...] = ()
    created_at: str | None = None  # ISO-8601, UTC


@dataclass(frozen=True, slots=True)
class FavoriteEntry:
    """A bookmarked flashcard. Identity is the question text alone."""

    question: str
    answer: str


@dataclass(frozen=True, slots=True)
class Flashcard:
    """Static question/answer card shown in the browse and random views."""

    id: str
    question: str
    answer: str


@dataclass(frozen=True, slots=True)
class QuizResult:
    """Final outcome of a completed attempt."""

    score: int
    total_questions: int
    user_answers: tuple[str | None, ...] = field(default_factory=tuple)

    @property
    def percentage(self) -> int:
        return score_percentage(self.score, self.total_questions)


def score_percentage(score: int, total_questions: int) -> int:
    """Return ``score / total * 100`` rounded half-up to an integer."""
    if total_questions <= 0:
        return 0
    return (score * 200 + total_questions) // (2 * total_questions)
