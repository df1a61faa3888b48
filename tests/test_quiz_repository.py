import json

import pytest

from brainflip_app.core.errors import NotFoundError, StorageError, ValidationError
from brainflip_app.core.models import Quiz
from brainflip_app.core.quiz_serializer import dumps_quizzes
from brainflip_app.core.services.quiz_repository import QuizRepository
from brainflip_app.core.storage.key_value_store import InMemoryKeyValueStore

from conftest import make_quiz, run


def test_empty_store_lists_no_quizzes(repository):
    assert run(repository.list_quizzes()) == []


def test_save_then_load_round_trips_collection(repository):
    quizzes = [make_quiz("a"), make_quiz("b", title="Second", corrects=("2", "1", "1"))]
    for quiz in quizzes:
        run(repository.save_quiz(quiz, is_editing=False))
    assert run(repository.list_quizzes()) == quizzes


def test_saving_new_quiz_appends(repository):
    run(repository.save_quiz(make_quiz("a"), is_editing=False))
    run(repository.save_quiz(make_quiz("b"), is_editing=False))
    assert [quiz.id for quiz in run(repository.list_quizzes())] == ["a", "b"]


def test_editing_replaces_only_matching_quiz(repository):
    for quiz_id in ("a", "b", "c"):
        run(repository.save_quiz(make_quiz(quiz_id), is_editing=False))
    before = run(repository.list_quizzes())

    edited = make_quiz("b", title="Renamed", corrects=("1",))
    run(repository.save_quiz(edited, is_editing=True))

    after = run(repository.list_quizzes())
    assert [quiz.id for quiz in after] == ["a", "b", "c"]
    assert after[0] == before[0]
    assert after[1] == edited
    assert after[2] == before[2]


def test_editing_unknown_quiz_raises_not_found(repository):
    with pytest.raises(NotFoundError):
        run(repository.save_quiz(make_quiz("ghost"), is_editing=True))


def test_invalid_quiz_is_not_written(store, repository):
    invalid = Quiz(id="x", title="", questions=())
    with pytest.raises(ValidationError) as excinfo:
        run(repository.save_quiz(invalid, is_editing=False))
    assert [issue.field for issue in excinfo.value.issues] == ["title", "questions"]
    assert store.write_count == 0


def test_title_longer_than_fifty_characters_is_rejected(repository):
    with pytest.raises(ValidationError):
        run(repository.save_quiz(make_quiz("a", title="x" * 51), is_editing=False))
    run(repository.save_quiz(make_quiz("b", title="x" * 50), is_editing=False))


def test_delete_filters_collection(repository):
    for quiz_id in ("a", "b", "c"):
        run(repository.save_quiz(make_quiz(quiz_id), is_editing=False))
    run(repository.delete_quiz("b"))
    assert [quiz.id for quiz in run(repository.list_quizzes())] == ["a", "c"]


def test_find_and_get_quiz(repository):
    run(repository.save_quiz(make_quiz("a"), is_editing=False))
    assert run(repository.find_quiz("a")).id == "a"
    assert run(repository.find_quiz("missing")) is None
    with pytest.raises(NotFoundError):
        run(repository.get_quiz("missing"))


def test_every_mutation_is_a_single_store_write(store, repository):
    run(repository.save_quiz(make_quiz("a"), is_editing=False))
    run(repository.save_quiz(make_quiz("a", title="New"), is_editing=True))
    run(repository.delete_quiz("a"))
    assert store.write_count == 3


def test_unparsable_collection_reads_as_empty():
    store = InMemoryKeyValueStore({"brain_flip_quizzes": "{not json"})
    assert run(QuizRepository(store).list_quizzes()) == []


def test_non_list_collection_reads_as_empty():
    store = InMemoryKeyValueStore({"brain_flip_quizzes": json.dumps({"id": "a"})})
    assert run(QuizRepository(store).list_quizzes()) == []


def test_write_failure_raises_storage_error(store, repository):
    store.fail_on_write = True
    with pytest.raises(StorageError):
        run(repository.save_quiz(make_quiz("a"), is_editing=False))


def test_legacy_key_is_read_when_canonical_key_is_absent():
    legacy = [{"id": 7, "title": "Old", "questions": []}]
    store = InMemoryKeyValueStore({"quizzes": json.dumps(legacy)})
    repository = QuizRepository(store)

    quizzes = run(repository.list_quizzes())
    assert [quiz.id for quiz in quizzes] == ["7"]

    run(repository.save_quiz(make_quiz("new"), is_editing=False))
    snapshot = store.snapshot()
    assert [item["id"] for item in json.loads(snapshot["brain_flip_quizzes"])] == ["7", "new"]
    assert snapshot["quizzes"] == json.dumps(legacy)


def test_canonical_key_wins_over_legacy_key():
    store = InMemoryKeyValueStore(
        {
            "brain_flip_quizzes": json.dumps([{"id": "new", "title": "New", "questions": []}]),
            "quizzes": json.dumps([{"id": "old", "title": "Old", "questions": []}]),
        }
    )
    assert [quiz.id for quiz in run(QuizRepository(store).list_quizzes())] == ["new"]


def test_last_write_wins_when_mutations_overlap(store):
    first = QuizRepository(store)
    second = QuizRepository(store)
    run(first.save_quiz(make_quiz("base"), is_editing=False))

    async def interleaved():
        stale = await second.list_quizzes()
        await first.save_quiz(make_quiz("lost"), is_editing=False)
        # Second writer saves from its stale copy and overwrites the first one's addition.
        await store.set(second.storage_key, dumps_quizzes([*stale, make_quiz("kept")]))

    run(interleaved())
    assert [quiz.id for quiz in run(first.list_quizzes())] == ["base", "kept"]
