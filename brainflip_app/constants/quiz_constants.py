"""Quiz-related constants shared across the editor, player and API layers."""

MIN_ANSWERS_PER_QUESTION: int = 2
MAX_ANSWERS_PER_QUESTION: int = 6
MAX_TITLE_LENGTH: int = 50
ANSWER_GRACE_PERIOD_MS: int = 1000
