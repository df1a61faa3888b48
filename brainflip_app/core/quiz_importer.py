"""Utilities for importing quizzes from a human-friendly text file.

File format (an optional title line, then blocks separated by blank lines
or '---'):

    TITLE: Quiz title (optional, the file name is used otherwise)

    Q: Question text (supports markdown). Additional lines until the
       next marker are treated as part of the question.
    A: First option text
    B: Second option text
    ...            (2 to 6 options, lettered A-F without gaps)
    CORRECT: A-F

Example:

    TITLE: Capitals

    Q: What is the capital of France?
    A: London
    B: Paris
    C: Toulouse
    CORRECT: B
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4

from brainflip_app.constants.quiz_constants import (
    MAX_ANSWERS_PER_QUESTION,
    MIN_ANSWERS_PER_QUESTION,
)
from brainflip_app.core.models import Answer, Question, Quiz
from brainflip_app.core.quiz_validation import validate_quiz


class QuizImportError(Exception):
    """Raised when a quiz definition cannot be parsed."""


OPTION_LETTERS = ("A", "B", "C", "D", "E", "F")


def load_quiz_from_file(file_path: Path) -> Quiz:
    text = file_path.read_text(encoding="utf-8")
    return parse_quiz_text(text, default_title=file_path.stem)


def parse_quiz_text(text: str, default_title: str = "") -> Quiz:
    title, body = _split_title(text)
    questions = [_parse_block(block) for block in _split_blocks(body)]
    if not questions:
        raise QuizImportError("Quiz file did not contain any questions.")

    quiz = Quiz(
        id=uuid4().hex,
        title=(title or default_title).strip(),
        questions=tuple(questions),
        created_at=datetime.now(timezone.utc).isoformat(),
    )
    issues = validate_quiz(quiz)
    if issues:
        raise QuizImportError("; ".join(issue.message for issue in issues))
    return quiz


def _split_title(text: str) -> tuple[str | None, str]:
    lines = text.splitlines()
    for index, raw_line in enumerate(lines):
        stripped = raw_line.strip()
        if not stripped:
            continue
        if stripped.upper().startswith("TITLE:"):
            return stripped.split(":", 1)[1].strip(), "\n".join(lines[index + 1:])
        break
    return None, text


def _split_blocks(text: str) -> list[str]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            # Blank line encountered after content - finalize current block
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())
    return [block for block in blocks if block]


def _parse_block(block: str) -> Question:
    question_lines: list[str] = []
    options: dict[str, str] = {}
    correct_letter: str | None = None
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("CORRECT:"):
            correct_letter = line.split(":", 1)[1].strip().upper()
            current_section = None
            continue

        if len(line) > 2 and line[0].upper() in OPTION_LETTERS and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section in OPTION_LETTERS:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise QuizImportError(
                f"Encountered text outside of a known section: '{line}'."
            )

    if not question_lines:
        raise QuizImportError("Question text missing (Q: ...)")

    option_count = len(options)
    if not MIN_ANSWERS_PER_QUESTION <= option_count <= MAX_ANSWERS_PER_QUESTION:
        raise QuizImportError(
            f"Each question must define {MIN_ANSWERS_PER_QUESTION} to "
            f"{MAX_ANSWERS_PER_QUESTION} options."
        )
    expected_letters = OPTION_LETTERS[:option_count]
    if set(options) != set(expected_letters):
        raise QuizImportError(
            f"Options must be lettered {expected_letters[0]}-{expected_letters[-1]} without gaps."
        )

    if correct_letter is None:
        raise QuizImportError("Each question needs a CORRECT: line.")
    if correct_letter not in expected_letters:
        raise QuizImportError(
            f"CORRECT must be one of {', '.join(expected_letters)}."
        )
    correct_id = str(expected_letters.index(correct_letter) + 1)

    answers = tuple(
        Answer(
            id=str(index + 1),
            text=options[letter].strip(),
            is_correct=str(index + 1) == correct_id,
        )
        for index, letter in enumerate(expected_letters)
    )
    if any(not answer.text for answer in answers):
        raise QuizImportError("Option text cannot be empty.")

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise QuizImportError("Question text cannot be empty.")

    return Question(
        id=uuid4().hex,
        question_text=question_text,
        answers=answers,
        correct_answer=correct_id,
    )
