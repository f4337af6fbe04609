"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, in-memory) live in the
infrastructure layer and the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from catalog.domain.model.product import Product, ProductStatus


@dataclass(frozen=True)
class ProductFilter:
    """Criteria for listing and counting products. ``None`` means "any"."""

    vendor_id: str | None = None
    status: ProductStatus | None = None
    is_active: bool | None = None
    is_featured: bool | None = None
    category_id: str | None = None
    in_stock: bool | None = None
    search: str | None = None
    tags_any: tuple[str, ...] | None = None
    exclude_id: str | None = None

    def matches(self, product: Product) -> bool:
        if self.vendor_id is not None and product.vendor_id != self.vendor_id:
            return False
        if self.status is not None and product.status is not self.status:
            return False
        if self.is_active is not None and product.is_active != self.is_active:
            return False
        if self.is_featured is not None and product.is_featured != self.is_featured:
            return False
        if self.category_id is not None and product.category_id != self.category_id:
            return False
        if self.in_stock is not None and product.in_stock != self.in_stock:
            return False
        if self.exclude_id is not None and product.id == self.exclude_id:
            return False
        if self.tags_any is not None and not set(self.tags_any) & set(product.search_tags):
            return False
        if self.search:
            needle = self.search.lower()
            haystack = " ".join([product.name, product.description, *product.search_tags])
            if needle not in haystack.lower():
                return False
        return True


class ProductRepository(ABC):

    @abstractmethod
    def next_id(self) -> str:
        """Generate a new unique product ID."""

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def slug_exists(self, slug: str) -> bool:
        """True if any product already uses ``slug``."""

    @abstractmethod
    def find_by_sku(self, sku: str, exclude_id: str | None = None) -> Product | None:
        """Return the product whose own SKU is ``sku``."""

    @abstractmethod
    def find_by_variation_sku(
        self, sku: str, exclude_id: str | None = None
    ) -> Product | None:
        """Return a product having a variation with SKU ``sku``."""

    @abstractmethod
    def count_owned(self, vendor_id: str | None, product_ids: list[str]) -> int:
        """Count products among ``product_ids`` owned by ``vendor_id``.

        ``vendor_id=None`` counts existing products regardless of owner.
        """

    @abstractmethod
    def find(
        self, criteria: ProductFilter, page: int = 1, limit: int = 20
    ) -> tuple[list[Product], int]:
        """Return one page of matches (newest first) and the total match count."""

    @abstractmethod
    def count(self, criteria: ProductFilter) -> int:
        """Count products matching ``criteria``."""

    @abstractmethod
    def add(self, product: Product) -> None:
        """Insert a new product.

        Must reject an sku or slug collision atomically with ConflictError.
        """

    @abstractmethod
    def save(self, product: Product) -> None:
        """Replace an existing product document by ID.

        Compare-and-swap on ``product.version``: if the stored document has
        been written since ``product`` was read, raise ConflictError
        (``VERSION_CONFLICT``) and leave it untouched. On success the stored
        version and ``product.version`` are both bumped. A missing product
        raises EntityNotFoundError.
        """

    @abstractmethod
    def delete(self, product_id: str) -> bool:
        """Remove a product; False if it was not there."""
