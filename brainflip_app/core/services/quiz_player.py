"""Service that steps one player through a quiz and keeps the score."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum, auto
import logging

from brainflip_app.constants.quiz_constants import ANSWER_GRACE_PERIOD_MS
from brainflip_app.core.models import Question, Quiz, QuizResult, score_percentage

logger = logging.getLogger(__name__)


class PlayerState(Enum):
    IN_PROGRESS = auto()
    COMPLETED = auto()


@dataclass(frozen=True, slots=True)
class AnswerFeedback:
    """What the player chose for a question and what the correct answer was."""

    question_index: int
    question_id: str
    selected_answer: str
    correct_answer: str | None

    @property
    def is_correct(self) -> bool:
        return self.correct_answer is not None and self.selected_answer == self.correct_answer


class QuizPlayer:
    """Linear attempt over a quiz's questions.

    Selecting an answer records it and locks further selection. The attempt
    moves on (to the next question, or to completion) only when ``advance``
    runs; ``answer`` does both with the grace period in between so the
    correct answer can be revealed first.
    """

    def __init__(self, quiz: Quiz, grace_period_ms: int = ANSWER_GRACE_PERIOD_MS) -> None:
        if not quiz.questions:
            raise ValueError("Quiz must contain at least one question.")
        if grace_period_ms < 0:
            raise ValueError("Grace period must not be negative.")
        self._quiz = quiz
        self._grace_period_ms = grace_period_ms
        self._generation: int = 0  # bumped on restart so a pending delayed advance is dropped
        self._reset_attempt()

    @property
    def quiz(self) -> Quiz:
        return self._quiz

    @property
    def state(self) -> PlayerState:
        return self._state

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def total_questions(self) -> int:
        return len(self._quiz.questions)

    @property
    def user_answers(self) -> tuple[str | None, ...]:
        return tuple(self._user_answers)

    @property
    def score(self) -> int:
        return self._score

    @property
    def percentage(self) -> int:
        return score_percentage(self._score, self.total_questions)

    @property
    def is_answer_locked(self) -> bool:
        return self._answer_locked

    @property
    def is_completed(self) -> bool:
        return self._state is PlayerState.COMPLETED

    @property
    def last_feedback(self) -> AnswerFeedback | None:
        """Outcome of the most recent answer; kept after the attempt moves on."""
        return self._last_feedback

    def current_question(self) -> Question | None:
        if self.is_completed:
            return None
        return self._quiz.questions[self._current_index]

    def selected_answer(self) -> str | None:
        if self.is_completed:
            return None
        return self._user_answers[self._current_index]

    def revealed_correct_answer(self) -> str | None:
        """Correct answer id of the current question once it has been answered."""
        question = self.current_question()
        if question is None or not self._answer_locked:
            return None
        return question.correct_answer

    def select_answer(self, answer_id: str) -> bool:
        """Record the answer for the current question.

        Returns False, without changing anything, when the attempt is
        completed or the current question was already answered.
        """
        if self.is_completed or self._answer_locked:
            return False
        question = self._quiz.questions[self._current_index]
        if question.find_answer(answer_id) is None:
            raise ValueError(f"Answer '{answer_id}' is not an option of the current question.")

        self._answer_locked = True
        self._user_answers[self._current_index] = answer_id
        self._last_feedback = AnswerFeedback(
            question_index=self._current_index,
            question_id=question.id,
            selected_answer=answer_id,
            correct_answer=question.correct_answer,
        )
        logger.debug("Question %d answered with %s", self._current_index + 1, answer_id)
        return True

    def advance(self) -> PlayerState:
        """Move past an answered question. Does nothing until an answer is locked in."""
        if self.is_completed or not self._answer_locked:
            return self._state

        if self._current_index >= len(self._quiz.questions) - 1:
            self._score = self._calculate_score()
            self._state = PlayerState.COMPLETED
            logger.info(
                "Quiz %s completed: %d/%d", self._quiz.id, self._score, self.total_questions
            )
        else:
            self._current_index += 1
            self._answer_locked = False
        return self._state

    async def answer(self, answer_id: str) -> bool:
        """Select an answer, wait out the grace period, then advance."""
        if not self.select_answer(answer_id):
            return False
        generation = self._generation
        if self._grace_period_ms:
            await asyncio.sleep(self._grace_period_ms / 1000)
        if generation == self._generation:
            self.advance()
        return True

    def restart(self) -> None:
        self._generation += 1
        self._reset_attempt()

    def result(self) -> QuizResult:
        if not self.is_completed:
            raise RuntimeError("Quiz attempt is not completed yet.")
        return QuizResult(
            score=self._score,
            total_questions=self.total_questions,
            user_answers=tuple(self._user_answers),
        )

    def _reset_attempt(self) -> None:
        self._state = PlayerState.IN_PROGRESS
        self._current_index = 0
        self._user_answers: list[str | None] = [None] * len(self._quiz.questions)
        self._score = 0
        self._answer_locked = False
        self._last_feedback: AnswerFeedback | None = None

    def _calculate_score(self) -> int:
        return sum(
            1
            for question, chosen in zip(self._quiz.questions, self._user_answers)
            if chosen is not None and chosen == question.correct_answer
        )
