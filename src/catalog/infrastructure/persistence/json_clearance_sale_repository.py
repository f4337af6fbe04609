"""JSON-file-backed implementation of ClearanceSaleRepository.

Membership primitives mutate the stored document under the collection
lock, so concurrent adds/removes on the same sale never lose each other.
Configuration saves are version-checked under the same lock.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from catalog.domain.exceptions import ConflictError
from catalog.domain.model.clearance_sale import (
    ClearanceSaleConfig,
    OfferActiveTime,
    SaleDiscountType,
    SaleProduct,
)
from catalog.domain.repository.clearance_sale_repository import (
    ClearanceSaleRepository,
)
from catalog.infrastructure.persistence.json_collection import (
    JsonCollection,
    decimal_from_raw,
    decimal_to_raw,
)


class JsonClearanceSaleRepository(ClearanceSaleRepository):

    def __init__(self, file_path: Path) -> None:
        self._collection = JsonCollection(file_path)

    # --- ClearanceSaleRepository interface ------------------------------------

    def next_id(self) -> str:
        return uuid.uuid4().hex

    def get_by_vendor(self, vendor_id: str | None) -> ClearanceSaleConfig | None:
        for raw in self._collection.load():
            if raw.get("vendor") == vendor_id:
                return self._to_domain(raw)
        return None

    def save(self, config: ClearanceSaleConfig) -> ClearanceSaleConfig:
        with self._collection.locked():
            records = self._collection.load()
            for i, raw in enumerate(records):
                if raw.get("vendor") != config.vendor_id:
                    continue
                current = raw.get("version", 0)
                if current != config.version:
                    raise ConflictError(
                        f"Clearance sale for {config.owner_key} was changed "
                        f"concurrently (version {current}, expected {config.version})",
                        code="VERSION_CONFLICT",
                    )
                stored = self._to_raw(config)
                stored["id"] = raw["id"]
                stored["products"] = raw.get("products", [])
                stored["createdAt"] = raw["createdAt"]
                stored["version"] = current + 1
                records[i] = stored
                break
            else:
                if config.version != 0:
                    raise ConflictError(
                        f"Clearance sale for {config.owner_key} no longer exists",
                        code="VERSION_CONFLICT",
                    )
                stored = self._to_raw(config)
                stored["products"] = []
                stored["version"] = 1
                records.append(stored)
            self._collection.persist(records)
            return self._to_domain(stored)

    def add_products(
        self, vendor_id: str | None, product_ids: list[str]
    ) -> ClearanceSaleConfig | None:
        return self._mutate(vendor_id, lambda config: config.add_products(product_ids))

    def remove_product(
        self, vendor_id: str | None, product_id: str
    ) -> ClearanceSaleConfig | None:
        return self._mutate(vendor_id, lambda config: config.remove_product(product_id))

    def set_product_active(
        self, vendor_id: str | None, product_id: str, is_active: bool
    ) -> ClearanceSaleConfig | None:
        with self._collection.locked():
            if self._member_missing(vendor_id, product_id):
                return None
            return self._mutate(
                vendor_id, lambda config: config.set_product_active(product_id, is_active)
            )

    def find_live(
        self,
        now: datetime,
        vendor_ids: list[str] | None = None,
        limit: int | None = None,
    ) -> list[ClearanceSaleConfig]:
        wanted = set(vendor_ids) if vendor_ids is not None else None
        configs = [self._to_domain(raw) for raw in self._collection.load()]
        live = [
            c for c in configs
            if c.is_live(now) and (wanted is None or c.vendor_id in wanted)
        ]
        live.sort(key=lambda c: c.created_at, reverse=True)
        return live[:limit] if limit is not None else live

    # --- Internal helpers -----------------------------------------------------

    def _member_missing(self, vendor_id: str | None, product_id: str) -> bool:
        config = self.get_by_vendor(vendor_id)
        return config is None or config.find_member(product_id) is None

    def _mutate(
        self, vendor_id: str | None, change: Callable[[ClearanceSaleConfig], object]
    ) -> ClearanceSaleConfig | None:
        with self._collection.locked():
            records = self._collection.load()
            for i, raw in enumerate(records):
                if raw.get("vendor") != vendor_id:
                    continue
                config = self._to_domain(raw)
                change(config)
                config.version += 1
                config.updated_at = datetime.now(timezone.utc)
                records[i] = self._to_raw(config)
                self._collection.persist(records)
                return config
            return None

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(config: ClearanceSaleConfig) -> dict:
        return {
            "id": config.id,
            "vendor": config.vendor_id,
            "isActive": config.is_active,
            "startDate": config.start_date.isoformat(),
            "expireDate": config.expire_date.isoformat(),
            "discountType": config.discount_type.value,
            "discountAmount": decimal_to_raw(config.discount_amount),
            "offerActiveTime": config.offer_active_time.value,
            "startTime": config.start_time,
            "endTime": config.end_time,
            "metaTitle": config.meta_title,
            "metaDescription": config.meta_description,
            "metaImage": config.meta_image,
            "products": [
                {"product": p.product_id, "isActive": p.is_active}
                for p in config.products
            ],
            "createdAt": config.created_at.isoformat(),
            "updatedAt": config.updated_at.isoformat(),
            "version": config.version,
        }

    @staticmethod
    def _to_domain(raw: dict) -> ClearanceSaleConfig:
        return ClearanceSaleConfig(
            id=raw["id"],
            vendor_id=raw.get("vendor"),
            is_active=raw.get("isActive", False),
            start_date=datetime.fromisoformat(raw["startDate"]),
            expire_date=datetime.fromisoformat(raw["expireDate"]),
            discount_type=SaleDiscountType(raw.get("discountType", "flat")),
            discount_amount=decimal_from_raw(raw.get("discountAmount", 0)),
            offer_active_time=OfferActiveTime(raw.get("offerActiveTime", "always")),
            start_time=raw.get("startTime"),
            end_time=raw.get("endTime"),
            meta_title=raw.get("metaTitle"),
            meta_description=raw.get("metaDescription"),
            meta_image=raw.get("metaImage"),
            products=[
                SaleProduct(product_id=p["product"], is_active=p.get("isActive", True))
                for p in raw.get("products", [])
            ],
            created_at=datetime.fromisoformat(raw["createdAt"]),
            updated_at=datetime.fromisoformat(raw["updatedAt"]),
            version=raw.get("version", 0),
        )
