"""Business logic shared by every client of the app (API, scripts, tests)."""

from __future__ import annotations

import logging

from brainflip_app.core.errors import NotFoundError
from brainflip_app.core.models import FavoriteEntry, Flashcard, Quiz
from brainflip_app.core.services.favorites_ledger import FavoritesLedger
from brainflip_app.core.services.flashcard_deck import FlashcardDeck
from brainflip_app.core.services.quiz_editor import QuizEditor
from brainflip_app.core.services.quiz_player import QuizPlayer
from brainflip_app.core.services.quiz_repository import QuizRepository
from brainflip_app.core.settings import AppSettings
from brainflip_app.core.storage.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)


class QuizManager:
    """Facade for quiz services: Repository, Favorites, Flashcards and the active attempt."""

    def __init__(self, store: KeyValueStore, settings: AppSettings | None = None) -> None:
        self._settings = settings or AppSettings()

        # Services
        self._repository = QuizRepository(store, storage_key=self._settings.quiz_storage_key)
        self._favorites = FavoritesLedger(store)
        self._flashcards = FlashcardDeck(store)
        self._player: QuizPlayer | None = None

    @property
    def repository(self) -> QuizRepository:
        return self._repository

    @property
    def favorites(self) -> FavoritesLedger:
        return self._favorites

    @property
    def flashcards(self) -> FlashcardDeck:
        return self._flashcards

    # --- Quiz Repository Delegation ---

    async def list_quizzes(self) -> list[Quiz]:
        return await self._repository.list_quizzes()

    async def get_quiz(self, quiz_id: str) -> Quiz:
        return await self._repository.get_quiz(quiz_id)

    async def open_editor(self, quiz_id: str | None = None) -> QuizEditor:
        """Editor for a new quiz when ``quiz_id`` is None, else for the stored quiz."""
        if quiz_id is None:
            return QuizEditor()
        return QuizEditor(await self._repository.get_quiz(quiz_id))

    async def save_editor(self, editor: QuizEditor) -> Quiz:
        quiz = editor.build()
        await self._repository.save_quiz(quiz, is_editing=editor.is_editing)
        return quiz

    async def delete_quiz(self, quiz_id: str) -> None:
        await self._repository.delete_quiz(quiz_id)
        if self._player is not None and self._player.quiz.id == quiz_id:
            self._player = None

    # --- Player Delegation ---

    async def start_attempt(self, quiz_id: str) -> QuizPlayer:
        quiz = await self._repository.get_quiz(quiz_id)
        self._player = QuizPlayer(quiz, grace_period_ms=self._settings.answer_grace_period_ms)
        logger.info("Started attempt on quiz %s", quiz_id)
        return self._player

    def current_attempt(self) -> QuizPlayer:
        if self._player is None:
            raise NotFoundError("No quiz attempt is in progress.")
        return self._player

    async def submit_answer(self, answer_id: str) -> bool:
        """Answer the current question; returns False if the answer was ignored."""
        return await self.current_attempt().answer(answer_id)

    def restart_attempt(self) -> QuizPlayer:
        player = self.current_attempt()
        player.restart()
        return player

    def close_attempt(self) -> None:
        self._player = None

    # --- Favorites Delegation ---

    async def list_favorites(self) -> list[FavoriteEntry]:
        return await self._favorites.list_favorites()

    async def toggle_favorite(self, question: str, answer: str) -> bool:
        return await self._favorites.toggle_favorite(question, answer)

    async def is_favorite(self, question: str) -> bool:
        return await self._favorites.is_favorite(question)

    # --- Flashcard Delegation ---

    async def list_flashcards(self) -> list[Flashcard]:
        return await self._flashcards.list_flashcards()

    async def add_flashcard(self, question: str, answer: str) -> Flashcard:
        return await self._flashcards.add_flashcard(question, answer)

    async def random_flashcard(self, exclude_id: str | None = None) -> Flashcard | None:
        return await self._flashcards.pick_random(exclude_id)
