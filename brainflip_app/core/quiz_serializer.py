"""JSON encoding for the collections kept in the key-value store.

The stored shape uses camelCase field names so that collections written by
earlier builds of the app keep loading:

    [{"id": "...", "title": "...", "createdAt": "...",
      "questions": [{"id": "...", "questionText": "...",
                     "correctAnswer": "2",
                     "answers": [{"id": "1", "text": "...", "isCorrect": false}, ...]}]}]

A second, older question shape (``answers`` as plain strings and a numeric
``correctAnswer`` index) is migrated to the structured shape on decode.
Anything else is rejected entry by entry.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from brainflip_app.core.models import Answer, FavoriteEntry, Flashcard, Question, Quiz

logger = logging.getLogger(__name__)


def dumps_quizzes(quizzes: list[Quiz]) -> str:
    return json.dumps([quiz_to_dict(quiz) for quiz in quizzes], ensure_ascii=False)


def loads_quizzes(payload: str) -> list[Quiz]:
    """Decode a stored quiz collection.

    Raises ``ValueError`` when the payload is not a JSON list. Individual
    entries that cannot be decoded are skipped and logged.
    """
    raw_items = _load_json_list(payload)
    quizzes: list[Quiz] = []
    for position, raw in enumerate(raw_items):
        try:
            quizzes.append(quiz_from_dict(raw))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping malformed quiz at position %d: %s", position, exc)
    return quizzes


def quiz_to_dict(quiz: Quiz) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": quiz.id,
        "title": quiz.title,
        "questions": [question_to_dict(question) for question in quiz.questions],
    }
    if quiz.created_at is not None:
        data["createdAt"] = quiz.created_at
    return data


def question_to_dict(question: Question) -> dict[str, Any]:
    return {
        "id": question.id,
        "questionText": question.question_text,
        "answers": [
            {"id": answer.id, "text": answer.text, "isCorrect": answer.is_correct}
            for answer in question.answers
        ],
        "correctAnswer": question.correct_answer,
    }


def quiz_from_dict(data: dict[str, Any]) -> Quiz:
    if not isinstance(data, dict):
        raise TypeError("Quiz entry must be an object.")
    raw_questions = data.get("questions") or []
    if not isinstance(raw_questions, list):
        raise TypeError("Quiz questions must be a list.")
    created_at = data.get("createdAt")
    return Quiz(
        id=str(data["id"]),
        title=str(data.get("title", "")),
        questions=tuple(
            question_from_dict(raw, position) for position, raw in enumerate(raw_questions)
        ),
        created_at=str(created_at) if created_at is not None else None,
    )


def question_from_dict(data: dict[str, Any], position: int = 0) -> Question:
    if not isinstance(data, dict):
        raise TypeError("Question entry must be an object.")
    raw_answers = data.get("answers")
    if not isinstance(raw_answers, list):
        raise TypeError("Question answers must be a list.")
    if raw_answers and all(isinstance(item, str) for item in raw_answers):
        return _migrate_legacy_question(data, raw_answers, position)

    answers = tuple(
        Answer(
            id=str(raw["id"]),
            text=str(raw.get("text", "")),
            is_correct=bool(raw.get("isCorrect", False)),
        )
        for raw in raw_answers
    )
    correct_answer = data.get("correctAnswer")
    correct_answer = str(correct_answer) if correct_answer not in (None, "") else None
    return Question(
        id=str(data["id"]),
        question_text=str(data.get("questionText", "")),
        answers=answers,
        correct_answer=correct_answer,
    )


def _migrate_legacy_question(data: dict[str, Any], raw_answers: list[str], position: int) -> Question:
    correct_index = data.get("correctAnswer")
    if isinstance(correct_index, bool) or not isinstance(correct_index, int):
        raise ValueError("Legacy question needs a numeric correctAnswer index.")
    if not 0 <= correct_index < len(raw_answers):
        raise ValueError(f"Legacy correctAnswer index {correct_index} is out of range.")

    answers = tuple(
        Answer(id=str(index + 1), text=text, is_correct=index == correct_index)
        for index, text in enumerate(raw_answers)
    )
    text = data.get("questionText", data.get("question", ""))
    question_id = data.get("id", position + 1)
    logger.warning("Migrated legacy question shape for question %s", question_id)
    return Question(
        id=str(question_id),
        question_text=str(text),
        answers=answers,
        correct_answer=str(correct_index + 1),
    )


def dumps_favorites(favorites: list[FavoriteEntry]) -> str:
    return json.dumps(
        [{"question": entry.question, "answer": entry.answer} for entry in favorites],
        ensure_ascii=False,
    )


def loads_favorites(payload: str) -> list[FavoriteEntry]:
    favorites: list[FavoriteEntry] = []
    for raw in _load_json_list(payload):
        if isinstance(raw, dict) and "question" in raw:
            favorites.append(
                FavoriteEntry(question=str(raw["question"]), answer=str(raw.get("answer", "")))
            )
        else:
            logger.warning("Skipping malformed favorite entry: %r", raw)
    return favorites


def dumps_flashcards(cards: list[Flashcard]) -> str:
    return json.dumps(
        [{"id": card.id, "question": card.question, "answer": card.answer} for card in cards],
        ensure_ascii=False,
    )


def loads_flashcards(payload: str) -> list[Flashcard]:
    cards: list[Flashcard] = []
    for raw in _load_json_list(payload):
        try:
            cards.append(
                Flashcard(id=str(raw["id"]), question=str(raw["question"]), answer=str(raw["answer"]))
            )
        except (KeyError, TypeError) as exc:
            logger.warning("Skipping malformed flashcard %r: %s", raw, exc)
    return cards


def _load_json_list(payload: str) -> list[Any]:
    try:
        decoded = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Stored payload is not valid JSON: {exc}") from exc
    if decoded is None:
        return []
    if not isinstance(decoded, list):
        raise ValueError("Stored payload must be a JSON list.")
    return decoded
