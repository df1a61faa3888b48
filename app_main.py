"""Application entry point for the BrainFlip API."""

from __future__ import annotations

from brainflip_app.core.quiz_manager import QuizManager
from brainflip_app.core.settings import AppSettings
from brainflip_app.core.storage.key_value_store import JsonFileKeyValueStore
from brainflip_app.server.api_server import run_api_server
from brainflip_app.utils.logging_config import configure_logging


def main() -> None:
    """Load settings, initialize logging, and serve the API."""
    settings = AppSettings()
    logger = configure_logging(settings.log_level.upper())
    logger.info("Starting BrainFlip…")

    store = JsonFileKeyValueStore(settings.store_path)
    logger.info("Using data store at %s", store.file_path.resolve())
    quiz_manager = QuizManager(store, settings)

    logger.info("API available at http://%s:%d/", settings.host, settings.port)
    run_api_server(
        quiz_manager=quiz_manager,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
