"""Application service: Delete Product use case."""

from __future__ import annotations

import logging

from catalog.application.cache_invalidator import CacheInvalidator
from catalog.application.dto import Actor
from catalog.domain.exceptions import EntityNotFoundError, ForbiddenError
from catalog.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class DeleteProductHandler:

    def __init__(self, product_repo: ProductRepository, cache: CacheInvalidator) -> None:
        self._product_repo = product_repo
        self._cache = cache

    def handle(self, product_id: str, actor: Actor) -> None:
        """Delete a product. Vendors may only delete their own."""
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError("Product not found", code="PRODUCT_NOT_FOUND")

        if not actor.is_admin and not product.is_owned_by(actor.id):
            raise ForbiddenError(
                "Not authorized to delete this product", code="FORBIDDEN_ACCESS"
            )

        self._product_repo.delete(product_id)
        self._cache.invalidate_catalog()

        logger.info(
            "Product %s deleted by %s", product_id, actor.id,
            extra={"product_id": product_id, "vendor_id": product.vendor_id},
        )
