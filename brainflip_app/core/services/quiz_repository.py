"""Service for loading and saving the quiz collection."""

from __future__ import annotations

import logging

from brainflip_app.constants.storage_constants import (
    LEGACY_QUIZZES_STORAGE_KEY,
    QUIZZES_STORAGE_KEY,
)
from brainflip_app.core.errors import NotFoundError, StorageError, ValidationError
from brainflip_app.core.models import Quiz
from brainflip_app.core.quiz_serializer import dumps_quizzes, loads_quizzes
from brainflip_app.core.quiz_validation import validate_quiz
from brainflip_app.core.storage.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)


class QuizRepository:
    """Keeps every quiz as one serialized collection under a single store key.

    Each mutation reads the whole collection, changes the in-memory copy and
    writes it back with one ``set`` call. There is no lock: two overlapping
    mutations end with whichever write lands last.
    """

    def __init__(
        self,
        store: KeyValueStore,
        storage_key: str = QUIZZES_STORAGE_KEY,
        legacy_keys: tuple[str, ...] = (LEGACY_QUIZZES_STORAGE_KEY,),
    ) -> None:
        self._store = store
        self._storage_key = storage_key
        self._legacy_keys = tuple(key for key in legacy_keys if key != storage_key)

    @property
    def storage_key(self) -> str:
        return self._storage_key

    async def list_quizzes(self) -> list[Quiz]:
        """Return every stored quiz, or an empty list if nothing usable is stored."""
        try:
            payload = await self._store.get(self._storage_key)
            source_key = self._storage_key
            if payload is None:
                for legacy_key in self._legacy_keys:
                    payload = await self._store.get(legacy_key)
                    if payload is not None:
                        logger.warning("Reading quizzes from legacy key '%s'", legacy_key)
                        source_key = legacy_key
                        break
        except StorageError as exc:
            logger.warning("Could not read quizzes: %s", exc)
            return []

        if payload is None:
            return []
        try:
            return loads_quizzes(payload)
        except ValueError as exc:
            logger.warning("Treating unparsable quiz collection under '%s' as empty: %s", source_key, exc)
            return []

    async def find_quiz(self, quiz_id: str) -> Quiz | None:
        return next((quiz for quiz in await self.list_quizzes() if quiz.id == quiz_id), None)

    async def get_quiz(self, quiz_id: str) -> Quiz:
        quiz = await self.find_quiz(quiz_id)
        if quiz is None:
            raise NotFoundError(f"Quiz '{quiz_id}' was not found.")
        return quiz

    async def save_quiz(self, quiz: Quiz, is_editing: bool) -> None:
        """Append a new quiz or replace the stored quiz with the same id."""
        issues = validate_quiz(quiz)
        if issues:
            raise ValidationError(issues)

        quizzes = await self.list_quizzes()
        if is_editing:
            index = next((i for i, stored in enumerate(quizzes) if stored.id == quiz.id), None)
            if index is None:
                raise NotFoundError(f"Quiz '{quiz.id}' was not found.")
            quizzes[index] = quiz
        else:
            quizzes.append(quiz)

        await self._write(quizzes)
        logger.info("Saved quiz %s (%s)", quiz.id, "updated" if is_editing else "created")

    async def delete_quiz(self, quiz_id: str) -> None:
        quizzes = await self.list_quizzes()
        remaining = [quiz for quiz in quizzes if quiz.id != quiz_id]
        await self._write(remaining)
        logger.info("Deleted quiz %s", quiz_id)

    async def _write(self, quizzes: list[Quiz]) -> None:
        await self._store.set(self._storage_key, dumps_quizzes(quizzes))
