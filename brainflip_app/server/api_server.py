"""FastAPI server that exposes the quiz, favorites and flashcard operations."""

from __future__ import annotations

import logging
from uuid import uuid4

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field
import uvicorn

from brainflip_app.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION
from brainflip_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from brainflip_app.core.errors import NotFoundError, StorageError, ValidationError
from brainflip_app.core.markdown_renderer import renderer
from brainflip_app.core.models import Answer, Flashcard, Question, Quiz
from brainflip_app.core.quiz_exporter import serialize_quiz
from brainflip_app.core.quiz_importer import QuizImportError, parse_quiz_text
from brainflip_app.core.quiz_manager import QuizManager
from brainflip_app.core.quiz_serializer import quiz_to_dict
from brainflip_app.core.services.quiz_player import PlayerState, QuizPlayer

logger = logging.getLogger(__name__)


class AnswerPayload(BaseModel):
    """One answer option as sent by clients."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    text: str = ""
    is_correct: bool = Field(default=False, alias="isCorrect")


class QuestionPayload(BaseModel):
    """Question schema; ``id`` may be omitted for new questions."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    question_text: str = Field(default="", alias="questionText")
    answers: list[AnswerPayload] = Field(default_factory=list)
    correct_answer: str | None = Field(default=None, alias="correctAnswer")

    def to_question(self) -> Question:
        return Question(
            id=self.id or uuid4().hex,
            question_text=self.question_text,
            answers=tuple(
                Answer(id=answer.id, text=answer.text, is_correct=answer.is_correct)
                for answer in self.answers
            ),
            correct_answer=self.correct_answer or None,
        )


class QuizPayload(BaseModel):
    """Payload schema for creating or replacing a quiz."""

    title: str
    questions: list[QuestionPayload] = Field(default_factory=list)


class SelectAnswerPayload(BaseModel):
    """Payload schema for answering the current question."""

    model_config = ConfigDict(populate_by_name=True)

    answer_id: str = Field(alias="answerId")


class FavoritePayload(BaseModel):
    """Payload schema for toggling a favorite card."""

    question: str
    answer: str


class FlashcardPayload(BaseModel):
    """Payload schema for adding a flashcard."""

    question: str
    answer: str


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def _validation_detail(exc: ValidationError) -> list[dict[str, str]]:
    return [{"field": issue.field, "message": issue.message} for issue in exc.issues]


def _flashcard_to_dict(card: Flashcard) -> dict[str, object]:
    return {"id": card.id, "question": card.question, "answer": card.answer}


def _attempt_to_dict(player: QuizPlayer) -> dict[str, object]:
    question = player.current_question()
    question_view = None
    if question is not None:
        question_view = {
            "id": question.id,
            "questionText": question.question_text,
            "questionHtml": renderer.render_fragment(question.question_text),
            "answers": [
                {"id": answer.id, "text": answer.text, "textHtml": renderer.render_inline(answer.text)}
                for answer in question.answers
            ],
        }
    feedback = player.last_feedback
    feedback_view = None
    if feedback is not None:
        feedback_view = {
            "questionIndex": feedback.question_index,
            "questionId": feedback.question_id,
            "selectedAnswer": feedback.selected_answer,
            "correctAnswer": feedback.correct_answer,
            "isCorrect": feedback.is_correct,
        }
    return {
        "quizId": player.quiz.id,
        "title": player.quiz.title,
        "state": "completed" if player.state is PlayerState.COMPLETED else "in_progress",
        "currentIndex": player.current_index,
        "totalQuestions": player.total_questions,
        "answerLocked": player.is_answer_locked,
        "selectedAnswer": player.selected_answer(),
        "correctAnswer": player.revealed_correct_answer(),
        "question": question_view,
        "lastAnswer": feedback_view,
        "userAnswers": list(player.user_answers),
        "score": player.score,
        "percentage": player.percentage,
    }


async def _save_payload(manager: QuizManager, payload: QuizPayload, quiz_id: str | None) -> Quiz:
    try:
        editor = await manager.open_editor(quiz_id)
        editor.set_title(payload.title)
        editor.load_questions([question.to_question() for question in payload.questions])
        return await manager.save_editor(editor)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=_validation_detail(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except StorageError as exc:
        logger.error("Could not save quiz: %s", exc)
        raise HTTPException(status_code=503, detail="Failed to save quiz") from exc


def create_api_app(quiz_manager: QuizManager) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)

    @app.get("/about")
    def about() -> dict[str, str]:
        return {
            "name": APP_NAME,
            "version": APP_VERSION,
            "license": APP_LICENSE,
            "about": APP_ABOUT_TEXT,
        }

    # --- Quizzes ---

    @app.get("/quizzes")
    async def list_quizzes(manager: QuizManager = Depends(quiz_manager_dep)) -> list[dict[str, object]]:
        return [quiz_to_dict(quiz) for quiz in await manager.list_quizzes()]

    @app.get("/quizzes/{quiz_id}")
    async def get_quiz(quiz_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        try:
            return quiz_to_dict(await manager.get_quiz(quiz_id))
        except NotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc

    @app.post("/quizzes", status_code=201)
    async def create_quiz(
        payload: QuizPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        return quiz_to_dict(await _save_payload(manager, payload, quiz_id=None))

    @app.put("/quizzes/{quiz_id}")
    async def update_quiz(
        quiz_id: str,
        payload: QuizPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        return quiz_to_dict(await _save_payload(manager, payload, quiz_id=quiz_id))

    @app.delete("/quizzes/{quiz_id}", status_code=204)
    async def delete_quiz(quiz_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> None:
        try:
            await manager.delete_quiz(quiz_id)
        except StorageError as exc:
            logger.error("Could not delete quiz %s: %s", quiz_id, exc)
            raise HTTPException(status_code=503, detail="Failed to delete quiz") from exc

    @app.post("/quizzes/import", status_code=201)
    async def import_quiz(request: Request, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        text = (await request.body()).decode("utf-8", errors="replace")
        try:
            quiz = parse_quiz_text(text)
            await manager.repository.save_quiz(quiz, is_editing=False)
        except QuizImportError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except StorageError as exc:
            raise HTTPException(status_code=503, detail="Failed to save quiz") from exc
        return quiz_to_dict(quiz)

    @app.get("/quizzes/{quiz_id}/export", response_class=PlainTextResponse)
    async def export_quiz(quiz_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> str:
        try:
            return serialize_quiz(await manager.get_quiz(quiz_id))
        except NotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc

    # --- Attempt ---

    @app.post("/quizzes/{quiz_id}/attempt", status_code=201)
    async def start_attempt(quiz_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        try:
            player = await manager.start_attempt(quiz_id)
        except NotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _attempt_to_dict(player)

    @app.get("/attempt")
    def get_attempt(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        try:
            return _attempt_to_dict(manager.current_attempt())
        except NotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc

    @app.post("/attempt/answer")
    async def submit_answer(
        payload: SelectAnswerPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            accepted = await manager.submit_answer(payload.answer_id)
        except NotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        if not accepted:
            raise HTTPException(status_code=409, detail="This question has already been answered.")
        return _attempt_to_dict(manager.current_attempt())

    @app.post("/attempt/restart")
    def restart_attempt(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        try:
            return _attempt_to_dict(manager.restart_attempt())
        except NotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc

    # --- Favorites ---

    @app.get("/favorites")
    async def list_favorites(manager: QuizManager = Depends(quiz_manager_dep)) -> list[dict[str, str]]:
        return [
            {"question": entry.question, "answer": entry.answer}
            for entry in await manager.list_favorites()
        ]

    @app.post("/favorites/toggle")
    async def toggle_favorite(
        payload: FavoritePayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            is_favorite = await manager.toggle_favorite(payload.question, payload.answer)
        except StorageError as exc:
            raise HTTPException(status_code=503, detail="Failed to update favorites") from exc
        return {"question": payload.question, "isFavorite": is_favorite}

    @app.get("/favorites/status")
    async def favorite_status(question: str, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        return {"question": question, "isFavorite": await manager.is_favorite(question)}

    # --- Flashcards ---

    @app.get("/flashcards")
    async def list_flashcards(manager: QuizManager = Depends(quiz_manager_dep)) -> list[dict[str, object]]:
        return [_flashcard_to_dict(card) for card in await manager.list_flashcards()]

    @app.post("/flashcards", status_code=201)
    async def add_flashcard(
        payload: FlashcardPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            card = await manager.add_flashcard(payload.question, payload.answer)
        except ValidationError as exc:
            raise HTTPException(status_code=422, detail=_validation_detail(exc)) from exc
        except StorageError as exc:
            raise HTTPException(status_code=503, detail="Failed to save flashcard") from exc
        return _flashcard_to_dict(card)

    @app.get("/flashcards/random")
    async def random_flashcard(
        exclude_id: str | None = None,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        card = await manager.random_flashcard(exclude_id)
        if card is None:
            raise HTTPException(status_code=404, detail="No flashcards available.")
        return _flashcard_to_dict(card)

    return app


def run_api_server(
    quiz_manager: QuizManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    log_level: str = "info",
) -> None:
    """Serve the API until the process is interrupted."""
    app = create_api_app(quiz_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level=log_level)
    server = uvicorn.Server(config)
    server.run()
