"""Key-value store keys and file names used for persistence."""

QUIZZES_STORAGE_KEY: str = "brain_flip_quizzes"
# Older builds wrote the same collection under this key; it is only ever read.
LEGACY_QUIZZES_STORAGE_KEY: str = "quizzes"
FAVORITES_STORAGE_KEY: str = "favorites"
FLASHCARDS_STORAGE_KEY: str = "questions"

DEFAULT_DATA_DIR: str = ".brainflip"
DEFAULT_STORE_FILE_NAME: str = "store.json"
