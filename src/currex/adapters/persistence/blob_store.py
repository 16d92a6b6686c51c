# src/currex/adapters/persistence/blob_store.py
"""
Blob Store - Shared Key-Value Storage Between Processes

This module provides the storage under the widget handoff: a tiny key-value
store of opaque byte payloads. FileBlobStore keeps one file per key in a
directory both processes can see and replaces files atomically, so a reader
gets either the previous payload or the new one, never a mix.

Files that USE this module:
- currex.adapters.persistence.widget_store (WidgetRateStore reads/writes payloads)
- currex.app (creates the FileBlobStore in settings.shared_store_dir)

Files that this module USES:
- None
"""
from __future__ import annotations

import logging
import os
import re
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

log = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r'^[A-Za-z0-9_.-]+$')


def _check_key(key: str) -> str:
    if not key or not _KEY_PATTERN.match(key) or key.startswith("."):
        raise ValueError(f"Invalid store key: {key!r}")
    return key


class SharedBlobStore(ABC):
    @abstractmethod
    def write(self, key: str, data: bytes) -> None:
        """Replace the payload stored under key."""
        raise NotImplementedError

    @abstractmethod
    def read(self, key: str) -> Optional[bytes]:
        """Return the payload stored under key, or None if never written."""
        raise NotImplementedError


class MemoryBlobStore(SharedBlobStore):
    """In-process store, for tests and single-process hosts."""

    def __init__(self):
        self._data: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    def write(self, key: str, data: bytes) -> None:
        _check_key(key)
        with self._lock:
            self._data[key] = bytes(data)

    def read(self, key: str) -> Optional[bytes]:
        _check_key(key)
        with self._lock:
            return self._data.get(key)


class FileBlobStore(SharedBlobStore):
    """One file per key in a shared directory."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{_check_key(key)}.blob"

    def write(self, key: str, data: bytes) -> None:
        """
        Save a payload using atomic write.

        Uses temporary file + atomic rename so readers in another process
        never observe a partially written payload.

        Raises:
            RuntimeError: If the payload could not be written
        """
        path = self._path(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            temp_fd, temp_path = tempfile.mkstemp(suffix=".tmp", dir=str(self.directory))
        except OSError as e:
            raise RuntimeError(f"Shared store directory unusable: {self.directory}: {e}") from e

        try:
            with os.fdopen(temp_fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())

            os.replace(temp_path, str(path))
        except Exception as e:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise RuntimeError(f"Failed to write shared store key {key!r}: {e}") from e

    def read(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        try:
            with path.open("rb") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            log.warning("Failed to read shared store key %s: %s", key, e)
            return None
