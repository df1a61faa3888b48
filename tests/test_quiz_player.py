import asyncio

import pytest

from brainflip_app.core.models import Quiz, QuizResult, score_percentage
from brainflip_app.core.services.quiz_player import PlayerState, QuizPlayer

from conftest import make_quiz, run


def _play(player: QuizPlayer, *answers: str) -> None:
    for answer_id in answers:
        assert player.select_answer(answer_id)
        player.advance()


def test_new_attempt_starts_at_first_question():
    player = QuizPlayer(make_quiz("a"), grace_period_ms=0)
    assert player.state is PlayerState.IN_PROGRESS
    assert player.current_index == 0
    assert player.user_answers == (None, None)
    assert player.score == 0
    assert not player.is_answer_locked


def test_all_correct_answers_score_full_marks():
    player = QuizPlayer(make_quiz("a", corrects=("1", "2")), grace_period_ms=0)
    _play(player, "1", "2")
    assert player.state is PlayerState.COMPLETED
    assert player.score == 2
    assert player.percentage == 100
    assert player.result() == QuizResult(score=2, total_questions=2, user_answers=("1", "2"))


def test_all_wrong_answers_score_zero():
    player = QuizPlayer(make_quiz("a", corrects=("1", "2")), grace_period_ms=0)
    _play(player, "2", "1")
    assert player.state is PlayerState.COMPLETED
    assert player.score == 0
    assert player.percentage == 0


def test_answer_is_locked_until_advance():
    player = QuizPlayer(make_quiz("a"), grace_period_ms=0)
    assert player.select_answer("1")
    assert not player.select_answer("2")
    assert player.user_answers == ("1", None)
    assert player.revealed_correct_answer() == "1"

    player.advance()
    assert player.current_index == 1
    assert not player.is_answer_locked
    assert player.revealed_correct_answer() is None


def test_advance_without_answer_does_nothing():
    player = QuizPlayer(make_quiz("a"), grace_period_ms=0)
    assert player.advance() is PlayerState.IN_PROGRESS
    assert player.current_index == 0


def test_unknown_answer_id_is_rejected():
    player = QuizPlayer(make_quiz("a"), grace_period_ms=0)
    with pytest.raises(ValueError):
        player.select_answer("9")
    assert not player.is_answer_locked


def test_selection_after_completion_is_ignored():
    player = QuizPlayer(make_quiz("a", corrects=("1",)), grace_period_ms=0)
    _play(player, "1")
    assert not player.select_answer("1")
    assert player.current_question() is None


def test_restart_from_completed_resets_attempt():
    player = QuizPlayer(make_quiz("a", corrects=("1", "2")), grace_period_ms=0)
    _play(player, "1", "2")
    assert player.score == 2

    player.restart()
    assert player.state is PlayerState.IN_PROGRESS
    assert player.current_index == 0
    assert player.user_answers == (None, None)
    assert player.score == 0
    assert not player.is_answer_locked


def test_restart_mid_attempt_abandons_progress():
    player = QuizPlayer(make_quiz("a", corrects=("1", "2", "1")), grace_period_ms=0)
    _play(player, "1")
    player.select_answer("2")
    player.restart()
    assert player.current_index == 0
    assert player.user_answers == (None, None, None)


def test_result_requires_completion():
    player = QuizPlayer(make_quiz("a"), grace_period_ms=0)
    with pytest.raises(RuntimeError):
        player.result()


def test_quiz_without_questions_cannot_be_played():
    with pytest.raises(ValueError):
        QuizPlayer(Quiz(id="empty", title="Empty"), grace_period_ms=0)


def test_answer_waits_for_grace_period_before_advancing():
    player = QuizPlayer(make_quiz("a", corrects=("1", "2")), grace_period_ms=50)

    async def scenario():
        pending = asyncio.create_task(player.answer("1"))
        await asyncio.sleep(0)
        # Still showing the answered question while the grace period runs.
        assert player.current_index == 0
        assert player.is_answer_locked
        assert not await player.answer("2")
        assert await pending
        assert player.current_index == 1

    run(scenario())
    assert player.user_answers == ("1", None)


def test_restart_during_grace_period_discards_pending_advance():
    player = QuizPlayer(make_quiz("a", corrects=("1", "2")), grace_period_ms=50)

    async def scenario():
        pending = asyncio.create_task(player.answer("1"))
        await asyncio.sleep(0)
        player.restart()
        await pending

    run(scenario())
    assert player.current_index == 0
    assert player.user_answers == (None, None)
    assert player.state is PlayerState.IN_PROGRESS


def test_async_answers_complete_quiz():
    player = QuizPlayer(make_quiz("a", corrects=("1", "2")), grace_period_ms=0)

    async def scenario():
        await player.answer("1")
        await player.answer("1")

    run(scenario())
    assert player.state is PlayerState.COMPLETED
    assert player.score == 1
    assert player.percentage == 50


@pytest.mark.parametrize(
    "score,total,expected",
    [(0, 3, 0), (1, 3, 33), (2, 3, 67), (3, 3, 100), (1, 8, 13), (0, 0, 0)],
)
def test_percentage_rounds_half_up(score, total, expected):
    assert score_percentage(score, total) == expected


def test_feedback_survives_advance_and_clears_on_restart():
    player = QuizPlayer(make_quiz("a", corrects=("1", "2")), grace_period_ms=0)
    assert player.last_feedback is None

    player.select_answer("2")
    player.advance()

    feedback = player.last_feedback
    assert player.current_index == 1
    assert feedback.question_index == 0
    assert feedback.question_id == "a-q1"
    assert feedback.selected_answer == "2"
    assert feedback.correct_answer == "1"
    assert not feedback.is_correct

    player.restart()
    assert player.last_feedback is None
