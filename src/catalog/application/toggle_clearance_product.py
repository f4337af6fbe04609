"""Application service: show or hide one product's sale price."""

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


class ToggleClearanceProductHandler:

    def __init__(self, sale_repo: ClearanceSaleRepository, cache: CacheInvalidator) -> None:
        self._sale_repo = sale_repo
        self._cache = cache

    def handle(
        self, actor: Actor, product_id: str, is_active: bool
    ) -> ClearanceSaleConfig:
        vendor_id = actor.sale_vendor_id
        if self._sale_repo.get_by_vendor(vendor_id) is None:
            raise EntityNotFoundError(
                "Clearance sale configuration not found", code="SALE_NOT_FOUND"
            )

        updated = self._sale_repo.set_product_active(vendor_id, product_id, is_active)
        if updated is None:
            raise EntityNotFoundError(
                "Product not found in clearance sale", code="PRODUCT_NOT_FOUND"
            )
        self._cache.invalidate_catalog()

        logger.info(
            "Clearance product %s for %s is_active=%s",
            product_id,
            updated.owner_key,
            is_active,
        )
        return updated
