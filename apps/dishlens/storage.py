"""
Device-local key/value storage.

Everything the client remembers between runs (table session, cart, device
id, last order) goes through ``LocalStorage``. Backends only move strings;
``LocalStorage`` adds JSON encoding and swallows backend failures, so a
device without usable storage simply behaves statelessly.
"""

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from apps.dishlens.config import settings
from apps.dishlens.exceptions import StorageError

logger = logging.getLogger(__name__)


@runtime_checkable
class StorageBackend(Protocol):
    """Minimal string store. Implementations raise ``StorageError`` on failure."""

    def get_item(self, key: str) -> str | None:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...


class MemoryBackend:
    """
    In-process backend for tests and short-lived processes.

    Usage:
        storage = LocalStorage(MemoryBackend())
        broken = LocalStorage(MemoryBackend(unavailable=True))
    """

    def __init__(
        self, initial: dict[str, str] | None = None, unavailable: bool = False
    ) -> None:
        """
        Args:
            initial: Values to start with.
            unavailable: If True, every operation fails like blocked storage.
        """
        self._data: dict[str, str] = dict(initial or {})
        self._unavailable = unavailable

    def _check(self) -> None:
        if self._unavailable:
            raise StorageError("Storage is unavailable")

    def get_item(self, key: str) -> str | None:
        self._check()
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._check()
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._check()
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class FileBackend:
    """Backend that keeps all keys in one JSON document on disk."""

    FILENAME = "dishlens-storage.json"

    def __init__(self, directory: str | Path) -> None:
        self.path = Path(directory) / self.FILENAME

    def _load(self) -> dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e

        try:
            data = json.loads(raw)
        except ValueError as e:
            raise StorageError(f"Corrupt storage file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Corrupt storage file {self.path}: not an object")
        return {str(k): str(v) for k, v in data.items()}

    def _dump(self, data: dict[str, str]) -> None:
        tmp: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh)
            os.replace(tmp, self.path)
        except OSError as e:
            if tmp is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp)
            raise StorageError(f"Cannot write {self.path}: {e}") from e

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)


class LocalStorage:
    """JSON values over a backend; failures are logged and never raised."""

    def __init__(self, backend: StorageBackend | None) -> None:
        """
        Args:
            backend: Where values live. ``None`` means no storage at all
                (e.g. server-side rendering), which is never an error.
        """
        self._backend = backend

    @classmethod
    def from_settings(cls) -> "LocalStorage":
        """File-backed when ``DISHLENS_STORAGE_DIR`` is set, in-memory otherwise."""
        if settings.STORAGE_DIR:
            return cls(FileBackend(settings.STORAGE_DIR))
        return cls(MemoryBackend())

    @property
    def available(self) -> bool:
        return self._backend is not None

    def get_raw(self, key: str) -> str | None:
        if self._backend is None:
            return None
        try:
            return self._backend.get_item(key)
        except StorageError as e:
            logger.warning("Storage read failed for %s: %s", key, e.message)
            return None

    def set_raw(self, key: str, value: str) -> bool:
        if self._backend is None:
            return False
        try:
            self._backend.set_item(key, value)
        except StorageError as e:
            logger.warning("Storage write failed for %s: %s", key, e.message)
            return False
        return True

    def get_json(self, key: str) -> Any | None:
        raw = self.get_raw(key)
        if not raw:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Ignoring unparseable stored value for %s", key)
            return None

    def set_json(self, key: str, value: Any) -> bool:
        """Store ``value`` as JSON. Returns False if it could not be persisted."""
        return self.set_raw(key, json.dumps(value))

    def remove(self, key: str) -> None:
        if self._backend is None:
            return
        try:
            self._backend.remove_item(key)
        except StorageError as e:
            logger.warning("Storage delete failed for %s: %s", key, e.message)
