"""Application service: Create Product use case.

Validates the draft against category state and global SKU uniqueness,
then stores the product as ``pending`` and hidden until an admin reviews
it. Nothing is written unless every check passes.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from catalog.application.cache_invalidator import CacheInvalidator
from catalog.application.dto import ProductDraft
from catalog.domain.exceptions import ValidationError
from catalog.domain.model.product import Product
from catalog.domain.model.value_objects import Money
from catalog.domain.repository.category_repository import CategoryRepository
from catalog.domain.repository.product_repository import ProductRepository
from catalog.domain.service.product_integrity import ProductIntegrityService
from catalog.domain.service.slug_generator import SlugGenerator

logger = logging.getLogger(__name__)


class CreateProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        category_repo: CategoryRepository,
        cache: CacheInvalidator,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._integrity = ProductIntegrityService(product_repo, category_repo)
        self._slugs = SlugGenerator(product_repo)
        self._cache = cache
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def handle(self, draft: ProductDraft, vendor_id: str) -> Product:
        """Create a product owned by ``vendor_id``.

        Steps:
        1. Category must exist and be active; subcategory must belong to it.
        2. Generate the slug.
        3. SKU and variation SKUs must be unique.
        4. Let the Product aggregate check quantity, media and discount.
        5. Persist and invalidate cached listings.
        """
        if not draft.name or not draft.name.strip():
            raise ValidationError("Product name is required", code="MISSING_FIELD")

        self._integrity.check_category(draft.category_id)
        if draft.sub_category_id:
            self._integrity.check_subcategory(draft.sub_category_id, draft.category_id)

        slug = self._slugs.generate(draft.name)

        self._integrity.check_sku(draft.sku)
        if draft.variations:
            self._integrity.check_variation_skus(draft.variations)

        product = Product.create(
            id=self._product_repo.next_id(),
            vendor_id=vendor_id,
            name=draft.name,
            sku=draft.sku,
            slug=slug,
            price=Money.of(draft.price),
            category_id=draft.category_id,
            images=draft.images,
            thumbnail=draft.thumbnail,
            description=draft.description,
            sub_category_id=draft.sub_category_id,
            discount=draft.discount,
            discount_type=draft.discount_type,
            quantity=draft.quantity,
            variations=draft.variations,
            search_tags=draft.search_tags,
            now=self._clock(),
        )

        self._product_repo.add(product)
        self._cache.invalidate_catalog()

        logger.info(
            "Product %s created by vendor %s (sku=%s, slug=%s)",
            product.id, vendor_id, product.sku, product.slug,
            extra={"product_id": product.id, "vendor_id": vendor_id},
        )
        return product
