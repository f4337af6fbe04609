"""Data Transfer Objects — plain containers that cross layer boundaries.

Inputs arrive as camelCase payloads (the persisted field names); the
``from_payload`` constructors map them onto these containers. Payload
shape validation happens before the core is called, so parsing here is
plain coercion.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from catalog.domain.exceptions import ValidationError
from catalog.domain.model.clearance_sale import OfferActiveTime, SaleDiscountType
from catalog.domain.model.product import (
    DiscountType,
    MediaRef,
    Product,
    ProductStatus,
    Variation,
)
from catalog.domain.model.value_objects import to_decimal


@dataclass(frozen=True)
class Actor:
    """Already-authenticated caller: a vendor, or an admin."""

    id: str
    is_admin: bool = False

    @staticmethod
    def vendor(vendor_id: str) -> Actor:
        return Actor(id=vendor_id)

    @staticmethod
    def admin(admin_id: str = "admin") -> Actor:
        return Actor(id=admin_id, is_admin=True)

    @property
    def sale_vendor_id(self) -> str | None:
        """Vendor key of the clearance sale this actor manages (None: admin-global)."""
        return None if self.is_admin else self.id


# --- Payload coercion helpers -------------------------------------------------


def _media(raw: Any) -> MediaRef | None:
    if raw is None:
        return None
    if isinstance(raw, str):
        return MediaRef(url=raw)
    return MediaRef(url=raw.get("url") or "", public_id=raw.get("publicId"))


def _media_list(raw: list | None) -> list[MediaRef] | None:
    if raw is None:
        return None
    return [m for m in (_media(item) for item in raw) if m is not None]


def _variations(raw: list | None) -> list[Variation] | None:
    if raw is None:
        return None
    return [
        Variation(
            sku=item["sku"],
            stock=int(item.get("stock") or 0),
            attributes=dict(item.get("attributes") or {}),
        )
        for item in raw
    ]


def _enum(enum_cls, raw: Any, field_name: str):
    if raw is None:
        return None
    try:
        return enum_cls(raw)
    except ValueError as exc:
        allowed = ", ".join(e.value for e in enum_cls)
        raise ValidationError(
            f"Invalid {field_name} {raw!r} (expected one of: {allowed})"
        ) from exc


def _decimal(raw: Any, field_name: str) -> Decimal | None:
    return None if raw is None else to_decimal(raw, field_name)


def parse_datetime(raw: Any, field_name: str) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if raw is None:
        return None
    if isinstance(raw, datetime):
        value = raw
    else:
        try:
            value = datetime.fromisoformat(str(raw))
        except ValueError as exc:
            raise ValidationError(f"Invalid {field_name}: {raw!r}") from exc
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


# --- Product inputs -----------------------------------------------------------


@dataclass(frozen=True)
class ProductDraft:
    """Input: everything a vendor sends to create a product."""

    name: str
    sku: str
    price: Decimal
    category_id: str
    images: list[MediaRef]
    thumbnail: MediaRef | None
    description: str = ""
    sub_category_id: str | None = None
    discount: Decimal = Decimal("0")
    discount_type: DiscountType = DiscountType.PERCENT
    quantity: int = 0
    variations: list[Variation] = field(default_factory=list)
    search_tags: list[str] = field(default_factory=list)

    @staticmethod
    def from_payload(payload: dict) -> ProductDraft:
        return ProductDraft(
            name=payload.get("name") or "",
            sku=payload.get("sku") or "",
            price=to_decimal(payload.get("price", 0), "price"),
            category_id=payload.get("category") or "",
            images=_media_list(payload.get("images")) or [],
            thumbnail=_media(payload.get("thumbnail")),
            description=payload.get("description") or "",
            sub_category_id=payload.get("subCategory"),
            discount=to_decimal(payload.get("discount", 0), "discount"),
            discount_type=_enum(DiscountType, payload.get("discountType"), "discountType")
            or DiscountType.PERCENT,
            quantity=int(payload.get("quantity") or 0),
            variations=_variations(payload.get("variations")) or [],
            search_tags=list(payload.get("searchTags") or []),
        )


@dataclass(frozen=True)
class ProductChanges:
    """Input: a partial product update. ``None`` means "leave as is"."""

    name: str | None = None
    description: str | None = None
    sku: str | None = None
    price: Decimal | None = None
    category_id: str | None = None
    sub_category_id: str | None = None
    images: list[MediaRef] | None = None
    thumbnail: MediaRef | None = None
    discount: Decimal | None = None
    discount_type: DiscountType | None = None
    quantity: int | None = None
    variations: list[Variation] | None = None
    search_tags: list[str] | None = None
    is_active: bool | None = None
    is_featured: bool | None = None

    def touched(self) -> set[str]:
        """Names of the fields this update sets."""
        return {f.name for f in fields(self) if getattr(self, f.name) is not None}

    @staticmethod
    def from_payload(payload: dict) -> ProductChanges:
        quantity = payload.get("quantity")
        return ProductChanges(
            name=payload.get("name"),
            description=payload.get("description"),
            sku=payload.get("sku"),
            price=_decimal(payload.get("price"), "price"),
            category_id=payload.get("category"),
            sub_category_id=payload.get("subCategory"),
            images=_media_list(payload.get("images")),
            thumbnail=_media(payload.get("thumbnail")),
            discount=_decimal(payload.get("discount"), "discount"),
            discount_type=_enum(DiscountType, payload.get("discountType"), "discountType"),
            quantity=None if quantity is None else int(quantity),
            variations=_variations(payload.get("variations")),
            search_tags=payload.get("searchTags"),
            is_active=payload.get("isActive"),
            is_featured=payload.get("isFeatured"),
        )


@dataclass(frozen=True)
class ProductQuery:
    """Input: listing filters as an outer layer would pass them."""

    status: ProductStatus | None = None
    vendor_id: str | None = None
    category_id: str | None = None
    search: str | None = None
    featured: bool | None = None


# --- Product outputs ----------------------------------------------------------


@dataclass(frozen=True)
class ProductPage:
    items: list[Product]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return -(-self.total // self.limit) if self.limit else 0


@dataclass(frozen=True)
class StatusCounts:
    pending: int
    approved: int
    rejected: int
    suspended: int


@dataclass(frozen=True)
class ProductStats:
    total: int
    by_status: StatusCounts
    active: int
    featured: int
    out_of_stock: int | None = None
    in_stock: int | None = None


# --- Clearance sale inputs ----------------------------------------------------


@dataclass(frozen=True)
class ClearanceSaleSetup:
    """Input: a full or partial clearance sale configuration."""

    start_date: datetime | None = None
    expire_date: datetime | None = None
    discount_type: SaleDiscountType | None = None
    discount_amount: Decimal | None = None
    offer_active_time: OfferActiveTime | None = None
    start_time: str | None = None
    end_time: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    meta_image: str | None = None
    is_active: bool | None = None

    @staticmethod
    def from_payload(payload: dict) -> ClearanceSaleSetup:
        return ClearanceSaleSetup(
            start_date=parse_datetime(payload.get("startDate"), "startDate"),
            expire_date=parse_datetime(payload.get("expireDate"), "expireDate"),
            discount_type=_enum(
                SaleDiscountType, payload.get("discountType"), "discountType"
            ),
            discount_amount=_decimal(payload.get("discountAmount"), "discountAmount"),
            offer_active_time=_enum(
                OfferActiveTime, payload.get("offerActiveTime"), "offerActiveTime"
            ),
            start_time=payload.get("startTime"),
            end_time=payload.get("endTime"),
            meta_title=payload.get("metaTitle"),
            meta_description=payload.get("metaDescription"),
            meta_image=payload.get("metaImage"),
            is_active=payload.get("isActive"),
        )
