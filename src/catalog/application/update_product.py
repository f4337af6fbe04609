"""Application service: Update Product use case.

Vendors edit their own products; an admin may edit any product. A vendor
content edit on an approved product sends it back to review (``pending``,
hidden). Admin edits skip both the ownership check and the re-review, but
every integrity rule and the activation gate still apply. Only an admin
may change ``is_featured``. The save is version-checked, so an edit that
races an admin status change fails with ``VERSION_CONFLICT`` instead of
overwriting it.
"""

from __future__ import annotations

import dataclasses
import logging
from datetime import datetime, timezone
from typing import Callable

from catalog.application.cache_invalidator import CacheInvalidator
from catalog.application.dto import Actor, ProductChanges
from catalog.domain.exceptions import EntityNotFoundError, ForbiddenError, ValidationError
from catalog.domain.model.product import (
    CONTENT_FIELDS,
    Product,
    ensure_discount_within_bounds,
    ensure_images,
    ensure_thumbnail,
    next_state,
    total_stock,
)
from catalog.domain.model.value_objects import Money
from catalog.domain.repository.category_repository import CategoryRepository
from catalog.domain.repository.product_repository import ProductRepository
from catalog.domain.service.product_integrity import ProductIntegrityService

logger = logging.getLogger(__name__)

_PRICING_FIELDS = frozenset({"price", "discount", "discount_type"})


class UpdateProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        category_repo: CategoryRepository,
        cache: CacheInvalidator,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._integrity = ProductIntegrityService(product_repo, category_repo)
        self._cache = cache
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def handle(self, product_id: str, changes: ProductChanges, actor: Actor) -> Product:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError("Product not found", code="PRODUCT_NOT_FOUND")

        if not actor.is_admin and not product.is_owned_by(actor.id):
            raise ForbiddenError(
                "Not authorized to update this product", code="FORBIDDEN_ACCESS"
            )
        if not actor.is_admin and changes.is_featured is not None:
            raise ForbiddenError(
                "Only an admin can feature products", code="FORBIDDEN_ACCESS"
            )

        touched = changes.touched()
        status, is_active = next_state(
            product.status,
            product.is_active,
            content_changed=bool(touched & CONTENT_FIELDS),
            requested_active=changes.is_active,
            require_review=not actor.is_admin,
        )

        if changes.name is not None and not changes.name.strip():
            raise ValidationError("Product name is required", code="MISSING_FIELD")

        # Category / subcategory
        category_id = changes.category_id or product.category_id
        if changes.category_id is not None:
            self._integrity.check_category(changes.category_id)
        if changes.sub_category_id:
            self._integrity.check_subcategory(changes.sub_category_id, category_id)

        # Pricing, checked against the effective values
        price = Money.of(changes.price) if changes.price is not None else product.price
        discount = changes.discount if changes.discount is not None else product.discount
        discount_type = changes.discount_type or product.discount_type
        if touched & _PRICING_FIELDS:
            ensure_discount_within_bounds(price, discount, discount_type)

        # Media
        if changes.images is not None:
            ensure_images(changes.images)
        if changes.thumbnail is not None:
            ensure_thumbnail(changes.thumbnail)

        # SKUs, excluding this product from the collision checks
        if changes.sku is not None and changes.sku != product.sku:
            self._integrity.check_sku(changes.sku, exclude_id=product.id)
        if changes.variations:
            self._integrity.check_variation_skus(changes.variations, exclude_id=product.id)

        variations = changes.variations if changes.variations is not None else product.variations
        if variations:
            quantity = total_stock(variations)
        elif changes.quantity is not None:
            quantity = changes.quantity
        else:
            quantity = product.quantity
        if quantity < 0:
            raise ValidationError("Quantity cannot be negative")

        updated = dataclasses.replace(
            product,
            name=changes.name.strip() if changes.name is not None else product.name,
            description=_pick(changes.description, product.description),
            sku=_pick(changes.sku, product.sku),
            price=price,
            category_id=category_id,
            sub_category_id=_pick(changes.sub_category_id, product.sub_category_id),
            images=list(_pick(changes.images, product.images)),
            thumbnail=_pick(changes.thumbnail, product.thumbnail),
            discount=discount,
            discount_type=discount_type,
            quantity=quantity,
            variations=list(variations),
            search_tags=list(_pick(changes.search_tags, product.search_tags)),
            is_featured=_pick(changes.is_featured, product.is_featured),
            status=status,
            is_active=is_active,
            updated_at=self._clock(),
        )

        self._product_repo.save(updated)
        self._cache.invalidate_catalog()

        if status is not product.status:
            logger.info(
                "Product %s edited while %s, moved to %s for review",
                product.id, product.status.value, status.value,
            )
        logger.info(
            "Product %s updated by %s %s (fields=%s)",
            product.id,
            "admin" if actor.is_admin else "vendor",
            actor.id,
            ",".join(sorted(touched)),
            extra={"product_id": product.id, "vendor_id": product.vendor_id},
        )
        return updated


def _pick(new, current):
    return current if new is None else new
