"""Abstract key/value cache with wildcard deletion."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class CacheBackendError(Exception):
    """The cache could not be reached or refused the operation."""


class CacheBackend(ABC):

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the cached value, or None on a miss."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``."""

    @abstractmethod
    def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching the shell-style ``pattern``; return count."""
