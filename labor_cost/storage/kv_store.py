"""Key-value stores holding the persisted record lists as JSON text.

Each key maps to one text value. ``FileKeyValueStore`` keeps one file per
key in a data directory and writes atomically (temp file + rename), so a
value is never left half written.
"""

import logging
import os
import re
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

from labor_cost.errors import StorageError

logger = logging.getLogger(__name__)

_VALID_KEY = re.compile(r"^[A-Za-z][A-Za-z0-9_-]*$")


class KeyValueStore(ABC):
    """Minimal text key-value store."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored text for ``key``, or None if absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Replace the stored text for ``key``."""


class InMemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store, used by tests and dry runs."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value


class FileKeyValueStore(KeyValueStore):
    """Store that keeps each key in ``<data_dir>/<key>.json``.

    Example:
        >>> store = FileKeyValueStore("/tmp/labor-cost")
        >>> store.set("projects", "[]")
        >>> store.get("projects")
        '[]'
    """

    def __init__(self, data_dir: Union[str, Path]):
        """
        Initialize the store.

        Args:
            data_dir: Directory holding one JSON file per key; created on
                first write
        """
        self.data_dir = Path(data_dir)
        self._lock = threading.Lock()

    def _path(self, key: str) -> Path:
        if not _VALID_KEY.match(key):
            raise ValueError(f"Invalid store key: {key!r}")
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            logger.debug(f"No stored value for '{key}' at {path}")
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning(f"Failed to read '{key}' from {path}: {e}")
            return None

    def set(self, key: str, value: str) -> None:
        """
        Write ``value`` atomically.

        Raises:
            StorageError: If the value cannot be written
        """
        path = self._path(key)
        with self._lock:
            try:
                self.data_dir.mkdir(parents=True, exist_ok=True)
                temp_fd, temp_path = tempfile.mkstemp(dir=self.data_dir, suffix=".tmp")
                try:
                    with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                        f.write(value)
                    # Atomic rename (overwrites existing file)
                    os.replace(temp_path, path)
                except Exception:
                    try:
                        os.unlink(temp_path)
                    except OSError:
                        pass
                    raise
            except OSError as e:
                raise StorageError(f"Failed to write '{key}' to {path}: {e}") from e

        logger.debug(f"Saved '{key}' to {path}")
