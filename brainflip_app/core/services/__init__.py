"""Services composing the BrainFlip core."""

from .favorites_ledger import FavoritesLedger
from .flashcard_deck import FlashcardDeck
from .question_editor import QuestionEditor
from .quiz_editor import QuizEditor
from .quiz_player import AnswerFeedback, PlayerState, QuizPlayer
from .quiz_repository import QuizRepository

__all__ = [
    "AnswerFeedback",
    "FavoritesLedger",
    "FlashcardDeck",
    "PlayerState",
    "QuestionEditor",
    "QuizEditor",
    "QuizPlayer",
    "QuizRepository",
]
