"""Runtime settings, overridable through ``BRAINFLIP_*`` environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from brainflip_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from brainflip_app.constants.quiz_constants import ANSWER_GRACE_PERIOD_MS
from brainflip_app.constants.storage_constants import (
    DEFAULT_DATA_DIR,
    DEFAULT_STORE_FILE_NAME,
    QUIZZES_STORAGE_KEY,
)


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BRAINFLIP_", env_file=".env", extra="ignore")

    data_dir: Path = Path(DEFAULT_DATA_DIR)
    store_file_name: str = DEFAULT_STORE_FILE_NAME
    quiz_storage_key: str = QUIZZES_STORAGE_KEY
    answer_grace_period_ms: int = ANSWER_GRACE_PERIOD_MS

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    @property
    def store_path(self) -> Path:
        return self.data_dir / self.store_file_name
