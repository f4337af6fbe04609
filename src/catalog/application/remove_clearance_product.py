"""Application service: take a product out of a clearance sale."""

from __future__ import annotations

import logging

from catalog.application.cache_invalidator import CacheInvalidator
from catalog.application.dto import Actor
from catalog.domain.exceptions import EntityNotFoundError
from catalog.domain.model.clearance_sale import ClearanceSaleConfig
from catalog.domain.repository.clearance_sale_repository import (
    ClearanceSaleRepository,
)

logger = logging.getLogger(__name__)


class RemoveClearanceProductHandler:

    def __init__(self, sale_repo: ClearanceSaleRepository, cache: CacheInvalidator) -> None:
        self._sale_repo = sale_repo
        self._cache = cache

    def handle(self, actor: Actor, product_id: str) -> ClearanceSaleConfig:
        """Removing a product that is not a member is a no-op."""
        updated = self._sale_repo.remove_product(actor.sale_vendor_id, product_id)
        if updated is None:
            raise EntityNotFoundError(
                "Clearance sale configuration not found", code="SALE_NOT_FOUND"
            )
        self._cache.invalidate_catalog()

        logger.info(
            "Product %s removed from clearance sale for %s", product_id, updated.owner_key
        )
        return updated
