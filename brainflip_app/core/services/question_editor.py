"""In-memory builder for a single question draft."""

from __future__ import annotations

from dataclasses import replace
from uuid import uuid4

from brainflip_app.constants.quiz_constants import (
    MAX_ANSWERS_PER_QUESTION,
    MIN_ANSWERS_PER_QUESTION,
)
from brainflip_app.core.errors import ValidationError, ValidationIssue
from brainflip_app.core.models import Answer, Question
from brainflip_app.core.quiz_validation import validate_question


class QuestionEditor:
    """Edits one question: its text, its answer variants and the correct answer.

    Answer ids are always the contiguous strings ``"1".."n"`` in display
    order. The draft may be invalid while the user is typing; ``commit``
    refuses to hand out a question until ``validate`` passes.
    """

    def __init__(self, question: Question | None = None) -> None:
        if question is None:
            self._question_id = uuid4().hex
            self._question_text = ""
            self._answers: list[Answer] = [
                Answer(id=str(index + 1), text="") for index in range(MIN_ANSWERS_PER_QUESTION)
            ]
            self._correct_answer: str | None = None
            self._is_new = True
        else:
            self._question_id = question.id
            self._question_text = question.question_text
            self._answers = list(question.answers)
            self._correct_answer = question.correct_answer
            self._is_new = False

    @property
    def question_id(self) -> str:
        return self._question_id

    @property
    def is_new(self) -> bool:
        return self._is_new

    @property
    def question_text(self) -> str:
        return self._question_text

    @property
    def answers(self) -> tuple[Answer, ...]:
        return tuple(self._answers)

    @property
    def correct_answer(self) -> str | None:
        return self._correct_answer

    def can_add_variant(self) -> bool:
        return len(self._answers) < MAX_ANSWERS_PER_QUESTION

    def can_delete_variant(self) -> bool:
        return len(self._answers) > MIN_ANSWERS_PER_QUESTION

    def edit_text(self, question_text: str) -> None:
        self._question_text = question_text

    def edit_answer_text(self, answer_id: str, text: str) -> None:
        self._answers = [
            replace(answer, text=text) if answer.id == answer_id else answer
            for answer in self._answers
        ]

    def select_correct(self, answer_id: str) -> None:
        if not any(answer.id == answer_id for answer in self._answers):
            raise ValueError(f"Unknown answer id '{answer_id}'.")
        self._answers = [
            replace(answer, is_correct=answer.id == answer_id) for answer in self._answers
        ]
        self._correct_answer = answer_id

    def add_variant(self) -> bool:
        """Append a blank answer. Returns False once the maximum is reached."""
        if not self.can_add_variant():
            return False
        self._answers.append(Answer(id=str(len(self._answers) + 1), text=""))
        return True

    def delete_variant(self, answer_id: str) -> bool:
        """Remove an answer and renumber the rest.

        Returns False when the id is unknown or only the minimum number of
        answers is left.
        """
        if not self.can_delete_variant():
            return False
        remaining = [answer for answer in self._answers if answer.id != answer_id]
        if len(remaining) == len(self._answers):
            return False

        self._answers = [
            replace(answer, id=str(index + 1)) for index, answer in enumerate(remaining)
        ]
        # The correct answer keeps its flag through renumbering, so its new id is the reference.
        correct = next((answer for answer in self._answers if answer.is_correct), None)
        self._correct_answer = correct.id if correct is not None else None
        return True

    def snapshot(self) -> Question:
        """Return the draft as a question value without validating it."""
        return Question(
            id=self._question_id,
            question_text=self._question_text,
            answers=tuple(self._answers),
            correct_answer=self._correct_answer,
        )

    def validate(self) -> list[ValidationIssue]:
        return validate_question(self.snapshot())

    def commit(self) -> Question:
        issues = self.validate()
        if issues:
            raise ValidationError(issues)
        return Question(
            id=self._question_id,
            question_text=self._question_text.strip(),
            answers=tuple(replace(answer, text=answer.text.strip()) for answer in self._answers),
            correct_answer=self._correct_answer,
        )
