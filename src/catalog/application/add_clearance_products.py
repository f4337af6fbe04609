"""Application service: add products to a clearance sale.

Vendors can only add products they own; the admin-global sale can take
any existing product. Adding is an idempotent union, so retrying after a
timeout is harmless.
"""

from __future__ import annotations

import logging

from catalog.application.cache_invalidator import CacheInvalidator
from catalog.application.dto import Actor
from catalog.domain.exceptions import ForbiddenError, ValidationError
from catalog.domain.model.clearance_sale import ClearanceSaleConfig
from catalog.domain.repository.clearance_sale_repository import (
    ClearanceSaleRepository,
)
from catalog.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


def _setup_required() -> ValidationError:
    return ValidationError(
        "Please setup clearance sale configuration first", code="SETUP_REQUIRED"
    )


class AddClearanceProductsHandler:

    def __init__(
        self,
        sale_repo: ClearanceSaleRepository,
        product_repo: ProductRepository,
        cache: CacheInvalidator,
    ) -> None:
        self._sale_repo = sale_repo
        self._product_repo = product_repo
        self._cache = cache

    def handle(self, actor: Actor, product_ids: list[str]) -> ClearanceSaleConfig:
        vendor_id = actor.sale_vendor_id
        config = self._sale_repo.get_by_vendor(vendor_id)
        if config is None:
            raise _setup_required()

        ids = list(dict.fromkeys(product_ids))
        if not ids:
            return config

        if self._product_repo.count_owned(vendor_id, ids) != len(ids):
            raise ForbiddenError(
                "One or more products do not belong to you or do not exist",
                code="INVALID_PRODUCTS",
            )

        updated = self._sale_repo.add_products(vendor_id, ids)
        if updated is None:
            raise _setup_required()
        self._cache.invalidate_catalog()

        logger.info(
            "Clearance sale for %s now has %d products",
            updated.owner_key,
            len(updated.products),
            extra={"owner": updated.owner_key},
        )
        return updated
