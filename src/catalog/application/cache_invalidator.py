"""Pattern-based cache invalidation after catalog and sale mutations.

Invalidation is best-effort: the document store stays the source of
truth, so a failed delete costs at most one stale read cycle.
"""

from __future__ import annotations

import logging
from typing import Iterable

from catalog.domain.repository.cache_backend import CacheBackend, CacheBackendError

logger = logging.getLogger(__name__)

PRODUCT_LIST_PATTERN = "products*"
PRODUCT_RESPONSE_PATTERN = "response:/api/v1/products*"
CLEARANCE_LIST_PATTERN = "clearance*"
CLEARANCE_RESPONSE_PATTERN = "response:/api/v1/clearance-sale*"

CATALOG_PATTERNS = (
    PRODUCT_LIST_PATTERN,
    PRODUCT_RESPONSE_PATTERN,
    CLEARANCE_LIST_PATTERN,
    CLEARANCE_RESPONSE_PATTERN,
)


class CacheInvalidator:

    def __init__(self, cache: CacheBackend) -> None:
        self._cache = cache

    def invalidate(self, patterns: Iterable[str]) -> int:
        """Delete every key matching any of ``patterns``; return how many went."""
        removed = 0
        for pattern in patterns:
            try:
                removed += self._cache.delete_pattern(pattern)
            except CacheBackendError:
                logger.warning("Cache invalidation failed for %s", pattern, exc_info=True)
        logger.debug("Invalidated %d cache entries", removed)
        return removed

    def invalidate_catalog(self) -> int:
        """Patterns every product and clearance-sale mutation must clear."""
        return self.invalidate(CATALOG_PATTERNS)
