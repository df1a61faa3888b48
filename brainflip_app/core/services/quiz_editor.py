"""In-memory builder for a whole quiz before it is handed to the repository."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from brainflip_app.core.errors import NotFoundError, ValidationError, ValidationIssue
from brainflip_app.core.models import Question, Quiz
from brainflip_app.core.quiz_validation import validate_quiz
from brainflip_app.core.services.question_editor import QuestionEditor


class QuizEditor:
    """Owns an unsaved copy of a quiz until it is built and saved."""

    def __init__(self, quiz: Quiz | None = None) -> None:
        if quiz is None:
            self._quiz_id = uuid4().hex
            self._title = ""
            self._questions: list[Question] = []
            self._created_at: str | None = datetime.now(timezone.utc).isoformat()
            self._is_editing = False
        else:
            self._quiz_id = quiz.id
            self._title = quiz.title
            self._questions = list(quiz.questions)
            self._created_at = quiz.created_at
            self._is_editing = True

    @property
    def quiz_id(self) -> str:
        return self._quiz_id

    @property
    def is_editing(self) -> bool:
        return self._is_editing

    @property
    def title(self) -> str:
        return self._title

    @property
    def questions(self) -> tuple[Question, ...]:
        return tuple(self._questions)

    def set_title(self, title: str) -> None:
        self._title = title

    def new_question(self) -> QuestionEditor:
        return QuestionEditor()

    def edit_question(self, question_id: str) -> QuestionEditor:
        return QuestionEditor(self._questions[self._index_of(question_id)])

    def commit_question(self, editor: QuestionEditor) -> Question:
        """Store the editor's question, replacing an existing one with the same id."""
        question = editor.commit()
        existing = next(
            (index for index, q in enumerate(self._questions) if q.id == question.id), None
        )
        if existing is None:
            self._questions.append(question)
        else:
            self._questions[existing] = question
        return question

    def load_questions(self, questions: list[Question]) -> None:
        """Replace the whole question list, e.g. with one submitted in a single request."""
        self._questions = list(questions)

    def delete_question(self, question_id: str) -> None:
        self._questions.pop(self._index_of(question_id))

    def move_question(self, question_id: str, offset: int) -> None:
        """Shift a question up (negative) or down (positive), clamped to the list."""
        index = self._index_of(question_id)
        target = max(0, min(len(self._questions) - 1, index + offset))
        question = self._questions.pop(index)
        self._questions.insert(target, question)

    def snapshot(self) -> Quiz:
        return Quiz(
            id=self._quiz_id,
            title=self._title,
            questions=tuple(self._questions),
            created_at=self._created_at,
        )

    def validate(self) -> list[ValidationIssue]:
        # Questions were validated on commit; re-checking guards against a corrupted list.
        return validate_quiz(self.snapshot())

    def build(self) -> Quiz:
        issues = self.validate()
        if issues:
            raise ValidationError(issues)
        return Quiz(
            id=self._quiz_id,
            title=self._title.strip(),
            questions=tuple(self._questions),
            created_at=self._created_at,
        )

    def _index_of(self, question_id: str) -> int:
        for index, question in enumerate(self._questions):
            if question.id == question_id:
                return index
        raise NotFoundError(f"Question '{question_id}' is not part of this quiz.")
