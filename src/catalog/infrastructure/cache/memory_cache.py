"""In-process CacheBackend with shell-style wildcard deletion."""

from __future__ import annotations

import fnmatch
import threading
from typing import Any

from catalog.domain.repository.cache_backend import CacheBackend


class InMemoryCache(CacheBackend):

    def __init__(self) -> None:
        self._store: dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            return self._store.get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._store[key] = value

    def delete_pattern(self, pattern: str) -> int:
        with self._lock:
            doomed = [key for key in self._store if fnmatch.fnmatchcase(key, pattern)]
            for key in doomed:
                del self._store[key]
            return len(doomed)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._store)
