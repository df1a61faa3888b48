import json

import pytest

from brainflip_app.core.errors import StorageError
from brainflip_app.core.models import FavoriteEntry
from brainflip_app.core.services.favorites_ledger import FavoritesLedger
from brainflip_app.core.storage.key_value_store import InMemoryKeyValueStore

from conftest import run


def test_toggle_twice_adds_then_removes(ledger):
    before = len(run(ledger.list_favorites()))
    assert run(ledger.toggle_favorite("Q1", "A1")) is True
    assert run(ledger.is_favorite("Q1"))
    assert run(ledger.toggle_favorite("Q1", "A1")) is False
    assert not run(ledger.is_favorite("Q1"))
    assert len(run(ledger.list_favorites())) == before


def test_favorites_are_stored_as_json_under_favorites_key(store, ledger):
    run(ledger.toggle_favorite("Q1", "A1"))
    assert json.loads(store.snapshot()["favorites"]) == [{"question": "Q1", "answer": "A1"}]


def test_identity_is_question_text_only(ledger):
    # Two different cards that share question text are the same favorite.
    assert run(ledger.toggle_favorite("Same question", "First answer"))
    assert run(ledger.is_favorite("Same question"))
    assert run(ledger.toggle_favorite("Same question", "Other answer")) is False
    assert run(ledger.list_favorites()) == []


def test_order_is_preserved(ledger):
    for question in ("Q1", "Q2", "Q3"):
        run(ledger.toggle_favorite(question, "A"))
    run(ledger.toggle_favorite("Q2", "A"))
    assert run(ledger.list_favorites()) == [FavoriteEntry("Q1", "A"), FavoriteEntry("Q3", "A")]


def test_corrupted_favorites_read_as_empty():
    ledger = FavoritesLedger(InMemoryKeyValueStore({"favorites": "[oops"}))
    assert run(ledger.list_favorites()) == []
    assert not run(ledger.is_favorite("Q1"))


def test_write_failure_propagates(store, ledger):
    store.fail_on_write = True
    with pytest.raises(StorageError):
        run(ledger.toggle_favorite("Q1", "A1"))
