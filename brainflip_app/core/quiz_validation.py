"""Validation rules for questions and quizzes.

Both checks return every violated rule in a fixed order (question text,
answer count, answer texts, correct answer) so the caller can show each
message next to its field. An empty list means the value may be saved.
"""

from __future__ import annotations

from brainflip_app.constants.quiz_constants import (
    MAX_ANSWERS_PER_QUESTION,
    MAX_TITLE_LENGTH,
    MIN_ANSWERS_PER_QUESTION,
)
from brainflip_app.core.errors import ValidationIssue
from brainflip_app.core.models import Question, Quiz


def validate_question(question: Question, field_prefix: str = "") -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []

    if not question.question_text.strip():
        issues.append(ValidationIssue(f"{field_prefix}questionText", "Question is required."))

    answer_count = len(question.answers)
    if answer_count < MIN_ANSWERS_PER_QUESTION:
        issues.append(
            ValidationIssue(
                f"{field_prefix}answers",
                f"At least {MIN_ANSWERS_PER_QUESTION} answers are required.",
            )
        )
    elif answer_count > MAX_ANSWERS_PER_QUESTION:
        issues.append(
            ValidationIssue(
                f"{field_prefix}answers",
                f"Maximum {MAX_ANSWERS_PER_QUESTION} answers allowed.",
            )
        )

    seen_ids: set[str] = set()
    for index, answer in enumerate(question.answers):
        if answer.id in seen_ids:
            issues.append(
                ValidationIssue(f"{field_prefix}answers[{index}].id", f"Duplicate answer id '{answer.id}'.")
            )
        seen_ids.add(answer.id)
        if not answer.text.strip():
            issues.append(
                ValidationIssue(f"{field_prefix}answers[{index}].text", "Answer text is required.")
            )

    correct = [answer for answer in question.answers if answer.is_correct]
    if len(correct) != 1:
        message = (
            "Please select a correct answer."
            if not correct
            else "Only one answer can be marked correct."
        )
        issues.append(ValidationIssue(f"{field_prefix}correctAnswer", message))
    elif question.correct_answer != correct[0].id:
        issues.append(
            ValidationIssue(
                f"{field_prefix}correctAnswer",
                "Correct answer does not match the answer marked correct.",
            )
        )

    return issues


def validate_title(title: str) -> list[ValidationIssue]:
    cleaned = title.strip()
    if not cleaned:
        return [ValidationIssue("title", "Quiz title is required.")]
    if len(cleaned) > MAX_TITLE_LENGTH:
        return [
            ValidationIssue("title", f"Quiz title must be at most {MAX_TITLE_LENGTH} characters.")
        ]
    return []


def validate_quiz(quiz: Quiz) -> list[ValidationIssue]:
    issues = validate_title(quiz.title)
    if not quiz.questions:
        issues.append(ValidationIssue("questions", "Add at least one question."))

    seen_ids: set[str] = set()
    for index, question in enumerate(quiz.questions):
        if question.id in seen_ids:
            issues.append(
                ValidationIssue(f"questions[{index}].id", f"Duplicate question id '{question.id}'.")
            )
        seen_ids.add(question.id)
        issues.extend(validate_question(question, field_prefix=f"questions[{index}]."))
    return issues
