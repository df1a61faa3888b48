import random

import pytest

from brainflip_app.core.errors import ValidationError
from brainflip_app.core.models import Flashcard
from brainflip_app.core.services.flashcard_deck import FlashcardDeck

from conftest import run

_BUNDLED = [Flashcard("1", "Q1", "A1"), Flashcard("2", "Q2", "A2")]


def test_added_cards_come_first(store):
    deck = FlashcardDeck(store, bundled=_BUNDLED)
    first = run(deck.add_flashcard("First?", "one"))
    second = run(deck.add_flashcard("Second?", "two"))
    cards = run(deck.list_flashcards())
    assert [card.id for card in cards] == [second.id, first.id, "1", "2"]
    assert first.id != second.id


def test_blank_fields_are_rejected(store):
    deck = FlashcardDeck(store, bundled=_BUNDLED)
    with pytest.raises(ValidationError) as excinfo:
        run(deck.add_flashcard("  ", ""))
    assert [issue.field for issue in excinfo.value.issues] == ["question", "answer"]
    assert store.write_count == 0


def test_random_pick_avoids_excluded_card(store):
    deck = FlashcardDeck(store, bundled=_BUNDLED, rng=random.Random(3))
    for _ in range(20):
        assert run(deck.pick_random(exclude_id="1")).id == "2"


def test_random_pick_with_single_card_may_repeat(store):
    deck = FlashcardDeck(store, bundled=[Flashcard("1", "Q1", "A1")])
    assert run(deck.pick_random(exclude_id="1")).id == "1"


def test_random_pick_on_empty_deck(store):
    assert run(FlashcardDeck(store, bundled=[]).pick_random()) is None
