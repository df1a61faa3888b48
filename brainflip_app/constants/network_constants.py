"""Network configuration constants for the BrainFlip API."""

DEFAULT_HOST: str = "127.0.0.1"
DEFAULT_PORT: int = 8000
