"""Service for the list of liked flashcards."""

from __future__ import annotations

import logging

from brainflip_app.constants.storage_constants import FAVORITES_STORAGE_KEY
from brainflip_app.core.errors import StorageError
from brainflip_app.core.models import FavoriteEntry
from brainflip_app.core.quiz_serializer import dumps_favorites, loads_favorites
from brainflip_app.core.storage.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)


class FavoritesLedger:
    """Favorites keyed by question text.

    Two cards whose question text is identical count as the same favorite,
    whatever their answers are.
    """

    def __init__(self, store: KeyValueStore, storage_key: str = FAVORITES_STORAGE_KEY) -> None:
        self._store = store
        self._storage_key = storage_key

    async def list_favorites(self) -> list[FavoriteEntry]:
        try:
            payload = await self._store.get(self._storage_key)
        except StorageError as exc:
            logger.warning("Could not read favorites: %s", exc)
            return []
        if payload is None:
            return []
        try:
            return loads_favorites(payload)
        except ValueError as exc:
            logger.warning("Treating unparsable favorites as empty: %s", exc)
            return []

    async def is_favorite(self, question: str) -> bool:
        return any(entry.question == question for entry in await self.list_favorites())

    async def toggle_favorite(self, question: str, answer: str) -> bool:
        """Add or remove the card. Returns True when it is a favorite afterwards."""
        favorites = await self.list_favorites()
        remaining = [entry for entry in favorites if entry.question != question]
        if len(remaining) != len(favorites):
            await self._store.set(self._storage_key, dumps_favorites(remaining))
            logger.debug("Removed favorite %r", question)
            return False

        favorites.append(FavoriteEntry(question=question, answer=answer))
        await self._store.set(self._storage_key, dumps_favorites(favorites))
        logger.debug("Added favorite %r", question)
        return True
