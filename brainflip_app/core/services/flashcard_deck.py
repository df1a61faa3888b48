"""Service for the static flashcard deck and the cards the user adds to it."""

from __future__ import annotations

import logging
import random
import time

from brainflip_app.constants.storage_constants import FLASHCARDS_STORAGE_KEY
from brainflip_app.core.errors import StorageError, ValidationError, ValidationIssue
from brainflip_app.core.models import Flashcard
from brainflip_app.core.quiz_serializer import dumps_flashcards, loads_flashcards
from brainflip_app.core.storage.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)

# Starter deck shipped with the app, shown after any cards the user added.
_BUNDLED_FLASHCARDS = [
    Flashcard(id="1", question="What does HTTP stand for?", answer="HyperText Transfer Protocol"),
    Flashcard(id="2", question="What is the time complexity of binary search?", answer="O(log n)"),
    Flashcard(id="3", question="Which data structure works first-in, first-out?", answer="A queue"),
    Flashcard(id="4", question="What does JSON stand for?", answer="JavaScript Object Notation"),
    Flashcard(id="5", question="What is a closure?", answer="A function bundled with the variables of the scope it was defined in"),
    Flashcard(id="6", question="What port does HTTPS use by default?", answer="443"),
    Flashcard(id="7", question="What does SQL stand for?", answer="Structured Query Language"),
    Flashcard(id="8", question="What is idempotence?", answer="Applying an operation twice has the same effect as applying it once"),
]


class FlashcardDeck:
    """Browsable question/answer cards with random selection."""

    def __init__(
        self,
        store: KeyValueStore,
        storage_key: str = FLASHCARDS_STORAGE_KEY,
        bundled: list[Flashcard] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._store = store
        self._storage_key = storage_key
        self._bundled = list(_BUNDLED_FLASHCARDS if bundled is None else bundled)
        self._rng = rng or random.Random()

    async def list_user_cards(self) -> list[Flashcard]:
        try:
            payload = await self._store.get(self._storage_key)
        except StorageError as exc:
            logger.warning("Could not read flashcards: %s", exc)
            return []
        if payload is None:
            return []
        try:
            return loads_flashcards(payload)
        except ValueError as exc:
            logger.warning("Treating unparsable flashcards as empty: %s", exc)
            return []

    async def list_flashcards(self) -> list[Flashcard]:
        return await self.list_user_cards() + self._bundled

    async def add_flashcard(self, question: str, answer: str) -> Flashcard:
        issues: list[ValidationIssue] = []
        if not question.strip():
            issues.append(ValidationIssue("question", "Question is required."))
        if not answer.strip():
            issues.append(ValidationIssue("answer", "Answer is required."))
        if issues:
            raise ValidationError(issues)

        cards = await self.list_user_cards()
        card = Flashcard(id=self._next_card_id(cards), question=question, answer=answer)
        await self._store.set(self._storage_key, dumps_flashcards([card, *cards]))
        logger.info("Added flashcard %s", card.id)
        return card

    async def pick_random(self, exclude_id: str | None = None) -> Flashcard | None:
        """Pick a card, avoiding ``exclude_id`` whenever another card exists."""
        cards = await self.list_flashcards()
        if not cards:
            return None
        candidates = [card for card in cards if card.id != exclude_id] or cards
        return self._rng.choice(candidates)

    def _next_card_id(self, cards: list[Flashcard]) -> str:
        taken = {card.id for card in cards} | {card.id for card in self._bundled}
        candidate = int(time.time() * 1000)
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)
