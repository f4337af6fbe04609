"""JSON-file-backed implementation of ProductRepository.

Documents use the persisted camelCase field names and enum values. Each
document carries a ``version`` that ``save`` checks and bumps under the
collection lock.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from pathlib import Path

from catalog.domain.exceptions import ConflictError, EntityNotFoundError
from catalog.domain.model.product import (
    DiscountType,
    MediaRef,
    Product,
    ProductStatus,
    Variation,
)
from catalog.domain.model.value_objects import Money
from catalog.domain.repository.product_repository import ProductFilter, ProductRepository
from catalog.infrastructure.persistence.json_collection import (
    JsonCollection,
    decimal_from_raw,
    decimal_to_raw,
)


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._collection = JsonCollection(file_path)

    # --- ProductRepository interface ------------------------------------------

    def next_id(self) -> str:
        return uuid.uuid4().hex

    def get_by_id(self, product_id: str) -> Product | None:
        for raw in self._collection.load():
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def slug_exists(self, slug: str) -> bool:
        return any(raw["slug"] == slug for raw in self._collection.load())

    def find_by_sku(self, sku: str, exclude_id: str | None = None) -> Product | None:
        for raw in self._collection.load():
            if raw["sku"] == sku and raw["id"] != exclude_id:
                return self._to_domain(raw)
        return None

    def find_by_variation_sku(
        self, sku: str, exclude_id: str | None = None
    ) -> Product | None:
        for raw in self._collection.load():
            if raw["id"] == exclude_id:
                continue
            if any(v["sku"] == sku for v in raw.get("variations", [])):
                return self._to_domain(raw)
        return None

    def count_owned(self, vendor_id: str | None, product_ids: list[str]) -> int:
        wanted = set(product_ids)
        return sum(
            1
            for raw in self._collection.load()
            if raw["id"] in wanted and (vendor_id is None or raw["vendor"] == vendor_id)
        )

    def find(
        self, criteria: ProductFilter, page: int = 1, limit: int = 20
    ) -> tuple[list[Product], int]:
        matches = self._matching(criteria)
        matches.sort(key=lambda p: p.created_at, reverse=True)
        start = (page - 1) * limit
        return matches[start:start + limit], len(matches)

    def count(self, criteria: ProductFilter) -> int:
        return len(self._matching(criteria))

    def add(self, product: Product) -> None:
        with self._collection.locked():
            records = self._collection.load()
            for raw in records:
                if raw["sku"] == product.sku:
                    raise ConflictError(
                        f"SKU '{product.sku}' already exists", code="DUPLICATE_SKU"
                    )
                if raw["slug"] == product.slug:
                    raise ConflictError(
                        f"Slug '{product.slug}' already exists", code="DUPLICATE_SLUG"
                    )
            records.append(self._to_raw(product))
            self._collection.persist(records)

    def save(self, product: Product) -> None:
        with self._collection.locked():
            records = self._collection.load()
            for i, raw in enumerate(records):
                if raw["id"] == product.id:
                    break
            else:
                raise EntityNotFoundError(
                    f"Product {product.id} not found", code="PRODUCT_NOT_FOUND"
                )
            current = raw.get("version", 0)
            if current != product.version:
                raise ConflictError(
                    f"Product {product.id} was changed concurrently "
                    f"(version {current}, expected {product.version})",
                    code="VERSION_CONFLICT",
                )
            stored = self._to_raw(product)
            stored["version"] = current + 1
            records[i] = stored
            self._collection.persist(records)
            product.version = current + 1

    def delete(self, product_id: str) -> bool:
        with self._collection.locked():
            records = self._collection.load()
            remaining = [raw for raw in records if raw["id"] != product_id]
            if len(remaining) == len(records):
                return False
            self._collection.persist(remaining)
            return True

    # --- Serialization --------------------------------------------------------

    def _matching(self, criteria: ProductFilter) -> list[Product]:
        products = (self._to_domain(raw) for raw in self._collection.load())
        return [p for p in products if criteria.matches(p)]

    @staticmethod
    def _media_to_raw(media: MediaRef) -> dict:
        return {"url": media.url, "publicId": media.public_id}

    @staticmethod
    def _media_to_domain(raw: dict) -> MediaRef:
        return MediaRef(url=raw["url"], public_id=raw.get("publicId"))

    @classmethod
    def _to_raw(cls, product: Product) -> dict:
        return {
            "id": product.id,
            "vendor": product.vendor_id,
            "name": product.name,
            "description": product.description,
            "category": product.category_id,
            "subCategory": product.sub_category_id,
            "sku": product.sku,
            "slug": product.slug,
            "price": decimal_to_raw(product.price.amount),
            "discount": decimal_to_raw(product.discount),
            "discountType": product.discount_type.value,
            "quantity": product.quantity,
            "variations": [
                {"sku": v.sku, "stock": v.stock, "attributes": v.attributes}
                for v in product.variations
            ],
            "status": product.status.value,
            "isActive": product.is_active,
            "isFeatured": product.is_featured,
            "rejectionReason": product.rejection_reason,
            "images": [cls._media_to_raw(m) for m in product.images],
            "thumbnail": cls._media_to_raw(product.thumbnail),
            "searchTags": product.search_tags,
            "createdAt": product.created_at.isoformat(),
            "updatedAt": product.updated_at.isoformat(),
            "version": product.version,
        }

    @classmethod
    def _to_domain(cls, raw: dict) -> Product:
        return Product(
            id=raw["id"],
            vendor_id=raw["vendor"],
            name=raw["name"],
            description=raw.get("description", ""),
            category_id=raw["category"],
            sub_category_id=raw.get("subCategory"),
            sku=raw["sku"],
            slug=raw["slug"],
            price=Money(decimal_from_raw(raw["price"])),
            discount=decimal_from_raw(raw.get("discount", 0)),
            discount_type=DiscountType(raw.get("discountType", "percent")),
            quantity=raw.get("quantity", 0),
            variations=[
                Variation(sku=v["sku"], stock=v["stock"], attributes=v.get("attributes", {}))
                for v in raw.get("variations", [])
            ],
            status=ProductStatus(raw["status"]),
            is_active=raw.get("isActive", False),
            is_featured=raw.get("isFeatured", False),
            rejection_reason=raw.get("rejectionReason", ""),
            images=[cls._media_to_domain(m) for m in raw.get("images", [])],
            thumbnail=cls._media_to_domain(raw["thumbnail"]),
            search_tags=raw.get("searchTags", []),
            created_at=datetime.fromisoformat(raw["createdAt"]),
            updated_at=datetime.fromisoformat(raw["updatedAt"]),
            version=raw.get("version", 0),
        )
