"""Redis-backed CacheBackend, shared by every process pointing at the server.

Values are pickled; pattern deletion walks ``SCAN MATCH`` rather than
``KEYS`` so a large keyspace never blocks the server.
"""

from __future__ import annotations

import logging
import pickle
from typing import Any

import redis

from catalog.domain.repository.cache_backend import CacheBackend, CacheBackendError

logger = logging.getLogger(__name__)


class RedisCache(CacheBackend):

    def __init__(
        self,
        url: str | None = None,
        ttl_seconds: int | None = None,
        client: redis.Redis | None = None,
    ) -> None:
        if client is None:
            if not url:
                raise ValueError("RedisCache needs a url or a client")
            client = redis.Redis.from_url(
                url, socket_timeout=1.0, socket_connect_timeout=1.0
            )
        self._client = client
        self._ttl = ttl_seconds

    def get(self, key: str) -> Any | None:
        try:
            raw = self._client.get(key)
        except redis.RedisError as exc:
            raise CacheBackendError(f"Redis GET {key} failed: {exc}") from exc
        if raw is None:
            return None
        return pickle.loads(raw)

    def set(self, key: str, value: Any) -> None:
        try:
            self._client.set(key, pickle.dumps(value), ex=self._ttl)
        except redis.RedisError as exc:
            raise CacheBackendError(f"Redis SET {key} failed: {exc}") from exc

    def delete_pattern(self, pattern: str) -> int:
        try:
            keys = list(self._client.scan_iter(match=pattern))
            if not keys:
                return 0
            deleted = self._client.delete(*keys)
        except redis.RedisError as exc:
            raise CacheBackendError(f"Redis delete {pattern} failed: {exc}") from exc
        logger.debug("Deleted %d cache keys matching %s", deleted, pattern)
        return deleted
