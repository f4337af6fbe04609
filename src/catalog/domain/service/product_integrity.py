"""Domain service: Product integrity checks.

These rules need more than the Product aggregate itself: category state
lives in the category store, and SKU uniqueness spans every product. Both
create and update run them before anything is written.
"""

from __future__ import annotations

from catalog.domain.exceptions import ConflictError, ValidationError
from catalog.domain.model.product import Variation, ensure_unique_variation_skus
from catalog.domain.repository.category_repository import CategoryRepository
from catalog.domain.repository.product_repository import ProductRepository


class ProductIntegrityService:

    def __init__(
        self,
        product_repo: ProductRepository,
        category_repo: CategoryRepository,
    ) -> None:
        self._product_repo = product_repo
        self._category_repo = category_repo

    def check_category(self, category_id: str) -> None:
        category = self._category_repo.get_category(category_id) if category_id else None
        if category is None:
            raise ValidationError("Category not found", code="CATEGORY_NOT_FOUND")
        if not category.is_active:
            raise ValidationError("Category is not active", code="CATEGORY_INACTIVE")

    def check_subcategory(self, sub_category_id: str, category_id: str) -> None:
        """The subcategory must exist and hang under ``category_id``."""
        subcategory = self._category_repo.get_subcategory(sub_category_id)
        if subcategory is None:
            raise ValidationError("SubCategory not found", code="SUBCATEGORY_NOT_FOUND")
        if subcategory.category_id != category_id:
            raise ValidationError(
                "SubCategory does not belong to selected category",
                code="SUBCATEGORY_MISMATCH",
            )

    def check_sku(self, sku: str, exclude_id: str | None = None) -> None:
        if not sku or not sku.strip():
            raise ValidationError("SKU is required", code="MISSING_FIELD")
        if self._product_repo.find_by_sku(sku, exclude_id=exclude_id) is not None:
            raise ConflictError(f"SKU '{sku}' already exists", code="DUPLICATE_SKU")

    def check_variation_skus(
        self, variations: list[Variation], exclude_id: str | None = None
    ) -> None:
        """Unique within the payload first, then against every other product."""
        ensure_unique_variation_skus(variations)
        for variation in variations:
            if self._product_repo.find_by_variation_sku(
                variation.sku, exclude_id=exclude_id
            ) is not None:
                raise ConflictError(
                    f"Variation SKU '{variation.sku}' already exists",
                    code="DUPLICATE_VARIATION_SKU",
                )
