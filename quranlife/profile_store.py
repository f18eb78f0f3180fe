"""
Key-value profile storage used by front ends (goals, habits, cached daily verse).

Both stores follow the same contract: ``get`` returns the fallback instead of
raising, ``set`` and ``remove`` report success as a bool. Values must be
JSON-serializable.
"""

from __future__ import annotations

import json
import os
import threading
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from quranlife.logging_config import get_logger

logger = get_logger(__name__)


@runtime_checkable
class ProfileStore(Protocol):
    """Minimal persistence boundary for per-user data."""

    def get(self, key: str, fallback: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> bool: ...

    def remove(self, key: str) -> bool: ...


class InMemoryProfileStore:
    """Process-local store. Values are round-tripped through JSON on write."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str, fallback: Any = None) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return fallback
        return json.loads(raw)

    def set(self, key: str, value: Any) -> bool:
        try:
            self._data[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            logger.error("Failed to serialize profile value", key=key, error=str(e))
            return False
        return True

    def remove(self, key: str) -> bool:
        self._data.pop(key, None)
        return True


class JSONFileProfileStore:
    """Store backed by a single JSON object on disk.

    The whole file is rewritten on each change via a temporary file and
    ``os.replace``, so a crash mid-write leaves the previous contents intact.
    A missing or corrupt file reads as empty.
    """

    def __init__(self, path: str | os.PathLike[str]):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict[str, Any]:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning("Unreadable profile store, treating as empty", path=str(self.path), error=str(e))
            return {}
        if not isinstance(data, dict):
            logger.warning("Profile store is not a JSON object", path=str(self.path))
            return {}
        return data

    def _dump(self, data: dict[str, Any]) -> bool:
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to write profile store", path=str(self.path), error=str(e))
            tmp.unlink(missing_ok=True)
            return False
        return True

    def get(self, key: str, fallback: Any = None) -> Any:
        with self._lock:
            return self._load().get(key, fallback)

    def set(self, key: str, value: Any) -> bool:
        with self._lock:
            data = self._load()
            data[key] = value
            return self._dump(data)

    def remove(self, key: str) -> bool:
        with self._lock:
            data = self._load()
            if key not in data:
                return True
            del data[key]
            return self._dump(data)
