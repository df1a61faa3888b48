"""Static metadata describing BrainFlip."""

APP_NAME = "BrainFlip"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "BrainFlip is a flashcard and quiz companion. Browse question cards, keep the ones "
    "you like in favorites, author your own quizzes and take them with scored feedback."
)
