"""Application service: admin review decision on a product."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from catalog.application.cache_invalidator import CacheInvalidator
from catalog.domain.exceptions import EntityNotFoundError
from catalog.domain.model.product import Product, ProductStatus
from catalog.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class SetProductStatusHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        cache: CacheInvalidator,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._cache = cache
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def handle(
        self, product_id: str, status: ProductStatus, reason: str | None = None
    ) -> Product:
        """Approve, reject, suspend or re-queue a product.

        The aggregate enforces the transition table and the reason
        requirement; on failure the stored product is untouched.
        """
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError("Product not found", code="PRODUCT_NOT_FOUND")

        previous = product.status
        product.change_status(status, reason)
        product.updated_at = self._clock()

        self._product_repo.save(product)
        self._cache.invalidate_catalog()

        logger.info(
            "Product %s status %s -> %s",
            product.id,
            previous.value,
            product.status.value,
            extra={"product_id": product.id, "vendor_id": product.vendor_id},
        )
        return product
