"""Key-value stores that hold the serialized collections.

Every store exposes the same four async operations. Values are JSON text;
the stores never look inside them.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
import json
import logging
import os
from pathlib import Path
import stat
import tempfile
import threading

from brainflip_app.core.errors import StorageError

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Durable string-keyed storage with no transactions and no schema."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the value stored under ``key`` or None when absent."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Delete ``key``. Removing an absent key is not an error."""

    @abstractmethod
    async def clear(self) -> None:
        """Delete every key."""


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})
        self.fail_on_write: bool = False
        self.write_count: int = 0

    async def get(self, key: str) -> str | None:
        return self._values.get(key)

    async def set(self, key: str, value: str) -> None:
        self._check_writable()
        self._values[key] = value
        self.write_count += 1

    async def remove(self, key: str) -> None:
        self._check_writable()
        self._values.pop(key, None)

    async def clear(self) -> None:
        self._check_writable()
        self._values.clear()

    def snapshot(self) -> dict[str, str]:
        return dict(self._values)

    def _check_writable(self) -> None:
        if self.fail_on_write:
            raise StorageError("Store is not writable.")


class JsonFileKeyValueStore(KeyValueStore):
    """Single-file store: one JSON object mapping each key to its value text.

    Writes land in a temporary file next to the target and replace it in one
    step, so a crash mid-write leaves the previous contents intact. Each
    read-modify-write of the file holds one lock, so concurrent writes to
    different keys never drop each other.
    """

    def __init__(self, file_path: Path) -> None:
        self._file_path = Path(file_path)
        self._lock = threading.Lock()

    @property
    def file_path(self) -> Path:
        return self._file_path

    async def get(self, key: str) -> str | None:
        values = await asyncio.to_thread(self._read_all)
        return values.get(key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._update, key, value)

    async def remove(self, key: str) -> None:
        await asyncio.to_thread(self._update, key, None)

    async def clear(self) -> None:
        await asyncio.to_thread(self._clear)

    def _update(self, key: str, value: str | None) -> None:
        with self._lock:
            values = self._read_all()
            if value is None:
                values.pop(key, None)
            else:
                values[key] = value
            self._write_all(values)

    def _clear(self) -> None:
        with self._lock:
            self._write_all({})

    def _read_all(self) -> dict[str, str]:
        if not self._file_path.exists():
            return {}
        try:
            text = self._file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Could not read store file %s: %s", self._file_path, exc)
            raise StorageError(f"Could not read {self._file_path}: {exc}") from exc
        if not text.strip():
            return {}
        try:
            decoded = json.loads(text)
        except json.JSONDecodeError as exc:
            logger.error("Store file %s is corrupted: %s", self._file_path, exc)
            raise StorageError(f"Store file {self._file_path} is corrupted.") from exc
        if not isinstance(decoded, dict):
            raise StorageError(f"Store file {self._file_path} must contain a JSON object.")
        return {str(key): str(value) for key, value in decoded.items()}

    def _write_all(self, values: dict[str, str]) -> None:
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(
                prefix=f".{self._file_path.name}.", dir=self._file_path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(values, handle, ensure_ascii=False)
                if self._file_path.exists():
                    # mkstemp creates the file as 0600; keep the mode of the file being replaced
                    os.chmod(temp_name, stat.S_IMODE(self._file_path.stat().st_mode))
                os.replace(temp_name, self._file_path)
            except BaseException:
                Path(temp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            logger.error("Could not write store file %s: %s", self._file_path, exc)
            raise StorageError(f"Could not write {self._file_path}: {exc}") from exc
