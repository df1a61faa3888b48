"""Utilities for exporting quizzes to the plain-text format used for imports."""

from __future__ import annotations

from pathlib import Path

from brainflip_app.core.models import Question, Quiz
from brainflip_app.core.quiz_importer import OPTION_LETTERS


def save_quiz_to_file(file_path: Path, quiz: Quiz) -> None:
    """Persist the quiz to disk in the text import format."""

    if not quiz.questions:
        raise ValueError("Cannot export an empty quiz.")

    file_path = file_path.resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(serialize_quiz(quiz), encoding="utf-8")


def serialize_quiz(quiz: Quiz) -> str:
    blocks = [_serialize_question(question) for question in quiz.questions]
    return f"TITLE: {quiz.title}\n\n" + "\n\n---\n\n".join(blocks) + "\n"


def _serialize_question(question: Question) -> str:
    if len(question.answers) > len(OPTION_LETTERS):
        raise ValueError(f"Question {question.id} has more options than the format allows.")
    lines: list[str] = []

    question_lines = _text_lines(question.question_text, question.id)
    lines.append(f"Q: {question_lines[0]}")
    lines.extend(question_lines[1:])

    correct_letter: str | None = None
    for letter, answer in zip(OPTION_LETTERS, question.answers):
        option_lines = _text_lines(answer.text, question.id)
        lines.append(f"{letter}: {option_lines[0]}")
        lines.extend(option_lines[1:])
        if answer.id == question.correct_answer:
            correct_letter = letter

    if correct_letter is not None:
        lines.append(f"CORRECT: {correct_letter}")

    return "\n".join(lines)


def _text_lines(text: str, question_id: str) -> list[str]:
    lines = text.strip().splitlines() or [""]
    # A blank line ends a block on import, so it cannot appear inside a text.
    if any(not line.strip() for line in lines[1:]):
        raise ValueError(
            f"Question {question_id} contains a blank line, which the text format cannot represent."
        )
    return lines
