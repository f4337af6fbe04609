"""In-memory fake repositories for testing.

These implement the same abstract interfaces as the JSON repositories
but keep everything in a dict. No file I/O, no side effects. Stored
documents are deep-copied in and out, like a real document store.
"""

from __future__ import annotations

import copy
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from catalog.domain.exceptions import ConflictError, EntityNotFoundError
from catalog.domain.model.category import Category, CategoryStatus, SubCategory
from catalog.domain.model.clearance_sale import ClearanceSaleConfig
from catalog.domain.model.product import (
    DiscountType,
    MediaRef,
    Product,
    ProductStatus,
    Variation,
)
from catalog.domain.model.value_objects import Money
from catalog.domain.repository.cache_backend import CacheBackend, CacheBackendError
from catalog.domain.repository.category_repository import CategoryRepository
from catalog.domain.repository.clearance_sale_repository import (
    ClearanceSaleRepository,
)
from catalog.domain.repository.product_repository import ProductFilter, ProductRepository

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def fixed_clock(now: datetime = NOW):
    return lambda: now


def make_product(**overrides: Any) -> Product:
    """Build a stored product with sensible defaults."""
    values: dict[str, Any] = dict(
        id="p1",
        vendor_id="v1",
        name="Canvas Sneaker",
        sku="SKU-1",
        slug="canvas-sneaker",
        price=Money.of("200"),
        category_id="shoes",
        images=[MediaRef(url="https://cdn.example/1.jpg")],
        thumbnail=MediaRef(url="https://cdn.example/t.jpg"),
        discount=Decimal("0"),
        discount_type=DiscountType.PERCENT,
        quantity=10,
        created_at=NOW,
        updated_at=NOW,
    )
    values.update(overrides)
    return Product(**values)


def approved(**overrides: Any) -> Product:
    overrides.setdefault("status", ProductStatus.APPROVED)
    overrides.setdefault("is_active", True)
    return make_product(**overrides)


def variation(sku: str, stock: int) -> Variation:
    return Variation(sku=sku, stock=stock, attributes={"size": sku[-1]})


class FakeProductRepository(ProductRepository):

    def __init__(self, products: list[Product] | None = None) -> None:
        self._store: dict[str, Product] = {}
        self._next_id = 1
        for p in products or []:
            self._store[p.id] = copy.deepcopy(p)

    def next_id(self) -> str:
        product_id = f"new-{self._next_id}"
        self._next_id += 1
        return product_id

    def get_by_id(self, product_id: str) -> Product | None:
        return copy.deepcopy(self._store.get(product_id))

    def slug_exists(self, slug: str) -> bool:
        return any(p.slug == slug for p in self._store.values())

    def find_by_sku(self, sku: str, exclude_id: str | None = None) -> Product | None:
        for p in self._store.values():
            if p.sku == sku and p.id != exclude_id:
                return copy.deepcopy(p)
        return None

    def find_by_variation_sku(
        self, sku: str, exclude_id: str | None = None
    ) -> Product | None:
        for p in self._store.values():
            if p.id != exclude_id and sku in p.variation_skus:
                return copy.deepcopy(p)
        return None

    def count_owned(self, vendor_id: str | None, product_ids: list[str]) -> int:
        return sum(
            1
            for pid in set(product_ids)
            if pid in self._store
            and (vendor_id is None or self._store[pid].vendor_id == vendor_id)
        )

    def find(
        self, criteria: ProductFilter, page: int = 1, limit: int = 20
    ) -> tuple[list[Product], int]:
        matches = [p for p in self._store.values() if criteria.matches(p)]
        matches.sort(key=lambda p: p.created_at, reverse=True)
        start = (page - 1) * limit
        return copy.deepcopy(matches[start:start + limit]), len(matches)

    def count(self, criteria: ProductFilter) -> int:
        return sum(1 for p in self._store.values() if criteria.matches(p))

    def add(self, product: Product) -> None:
        for p in self._store.values():
            if p.sku == product.sku:
                raise ConflictError("duplicate sku", code="DUPLICATE_SKU")
            if p.slug == product.slug:
                raise ConflictError("duplicate slug", code="DUPLICATE_SLUG")
        self._store[product.id] = copy.deepcopy(product)

    def save(self, product: Product) -> None:
        stored = self._store.get(product.id)
        if stored is None:
            raise EntityNotFoundError("missing product", code="PRODUCT_NOT_FOUND")
        if stored.version != product.version:
            raise ConflictError("stale product", code="VERSION_CONFLICT")
        product.version += 1
        self._store[product.id] = copy.deepcopy(product)

    def delete(self, product_id: str) -> bool:
        return self._store.pop(product_id, None) is not None


class FakeCategoryRepository(CategoryRepository):

    def __init__(
        self,
        categories: list[Category] | None = None,
        subcategories: list[SubCategory] | None = None,
    ) -> None:
        if categories is None:
            categories = [
                Category(id="shoes", name="Shoes"),
                Category(id="bags", name="Bags"),
                Category(id="retired", name="Retired", status=CategoryStatus.INACTIVE),
            ]
        if subcategories is None:
            subcategories = [
                SubCategory(id="sneakers", name="Sneakers", category_id="shoes"),
                SubCategory(id="totes", name="Totes", category_id="bags"),
            ]
        self._categories = {c.id: c for c in categories}
        self._subcategories = {s.id: s for s in subcategories}

    def get_category(self, category_id: str) -> Category | None:
        return self._categories.get(category_id)

    def get_subcategory(self, subcategory_id: str) -> SubCategory | None:
        return self._subcategories.get(subcategory_id)

    def list_categories(self) -> list[Category]:
        return list(self._categories.values())

    def save_category(self, category: Category) -> None:
        self._categories[category.id] = category

    def save_subcategory(self, subcategory: SubCategory) -> None:
        self._subcategories[subcategory.id] = subcategory


class FakeClearanceSaleRepository(ClearanceSaleRepository):
    """Keyed by vendor id; ``None`` holds the admin-global config."""

    def __init__(self, configs: list[ClearanceSaleConfig] | None = None) -> None:
        self._store: dict[str | None, ClearanceSaleConfig] = {}
        self._next_id = 1
        self.saves = 0
        for c in configs or []:
            self._store[c.vendor_id] = copy.deepcopy(c)

    def next_id(self) -> str:
        config_id = f"sale-{self._next_id}"
        self._next_id += 1
        return config_id

    def get_by_vendor(self, vendor_id: str | None) -> ClearanceSaleConfig | None:
        return copy.deepcopy(self._store.get(vendor_id))

    def save(self, config: ClearanceSaleConfig) -> ClearanceSaleConfig:
        existing = self._store.get(config.vendor_id)
        current = existing.version if existing is not None else 0
        if current != config.version:
            raise ConflictError("stale clearance sale", code="VERSION_CONFLICT")
        self.saves += 1
        stored = copy.deepcopy(config)
        if existing is not None:
            stored.id = existing.id
            stored.products = existing.products
            stored.created_at = existing.created_at
        else:
            stored.products = []
        stored.version = current + 1
        self._store[config.vendor_id] = stored
        return copy.deepcopy(stored)

    def add_products(
        self, vendor_id: str | None, product_ids: list[str]
    ) -> ClearanceSaleConfig | None:
        config = self._store.get(vendor_id)
        if config is None:
            return None
        config.add_products(product_ids)
        return self._touched(config)

    def remove_product(
        self, vendor_id: str | None, product_id: str
    ) -> ClearanceSaleConfig | None:
        config = self._store.get(vendor_id)
        if config is None:
            return None
        config.remove_product(product_id)
        return self._touched(config)

    def set_product_active(
        self, vendor_id: str | None, product_id: str, is_active: bool
    ) -> ClearanceSaleConfig | None:
        config = self._store.get(vendor_id)
        if config is None or not config.set_product_active(product_id, is_active):
            return None
        return self._touched(config)

    def find_live(
        self,
        now: datetime,
        vendor_ids: list[str] | None = None,
        limit: int | None = None,
    ) -> list[ClearanceSaleConfig]:
        live = [
            c for c in self._store.values()
            if c.is_live(now) and (vendor_ids is None or c.vendor_id in vendor_ids)
        ]
        live.sort(key=lambda c: c.created_at, reverse=True)
        if limit is not None:
            live = live[:limit]
        return copy.deepcopy(live)

    @staticmethod
    def _touched(config: ClearanceSaleConfig) -> ClearanceSaleConfig:
        config.version += 1
        config.updated_at = datetime.now(timezone.utc)
        return copy.deepcopy(config)


class BrokenCache(CacheBackend):
    """A cache whose every call fails, for best-effort paths."""

    def get(self, key: str) -> Any | None:
        raise CacheBackendError("cache down")

    def set(self, key: str, value: Any) -> None:
        raise CacheBackendError("cache down")

    def delete_pattern(self, pattern: str) -> int:
        raise CacheBackendError("cache down")
