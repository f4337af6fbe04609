"""ClearanceSaleConfig aggregate — one time-boxed discount overlay per owner.

An owner is a vendor, or the marketplace itself (the admin-global config,
stored with no vendor reference and labelled ``ADMIN_SALE_OWNER`` in
output). Membership of a product in the sale and the per-product
``is_active`` toggle are independent of the sale's own ``is_active`` flag.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from catalog.domain.exceptions import ValidationError
from catalog.domain.model.value_objects import ClockTime

ADMIN_SALE_OWNER = "admin"


class SaleDiscountType(Enum):
    FLAT = "flat"
    PRODUCT_WISE = "product_wise"


class OfferActiveTime(Enum):
    ALWAYS = "always"
    SPECIFIC_TIME = "specific_time"


@dataclass
class SaleProduct:
    """Membership of one product in a sale."""

    product_id: str
    is_active: bool = True


def ensure_date_range(start_date: datetime, expire_date: datetime) -> None:
    if expire_date <= start_date:
        raise ValidationError(
            "Expire date must be after start date", code="INVALID_DATE_RANGE"
        )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ClearanceSaleConfig:
    """Aggregate root for a clearance sale configuration.

    ``vendor_id`` is None for the admin-global config. ``version`` is bumped
    by the repository on every write and checked on ``save``.
    """

    id: str
    vendor_id: str | None
    start_date: datetime
    expire_date: datetime
    is_active: bool = False
    discount_type: SaleDiscountType = SaleDiscountType.FLAT
    discount_amount: Decimal = Decimal("0")
    offer_active_time: OfferActiveTime = OfferActiveTime.ALWAYS
    start_time: str | None = None
    end_time: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    meta_image: str | None = None
    products: list[SaleProduct] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    version: int = 0

    # --- Invariants -----------------------------------------------------------

    def validate(self) -> None:
        """Check the whole configuration; called before every write."""
        ensure_date_range(self.start_date, self.expire_date)
        if self.discount_amount < 0:
            raise ValidationError(
                "Discount amount cannot be negative", code="INVALID_DISCOUNT"
            )
        if self.offer_active_time is OfferActiveTime.SPECIFIC_TIME:
            if not self.start_time or not self.end_time:
                raise ValidationError(
                    "Start and end time are required for a specific-time offer",
                    code="INVALID_TIME_WINDOW",
                )
            ClockTime(self.start_time)
            ClockTime(self.end_time)

    # --- Membership -----------------------------------------------------------

    def add_products(self, product_ids: list[str]) -> list[str]:
        """Union ``product_ids`` into the membership list; return the new ones."""
        present = {p.product_id for p in self.products}
        added: list[str] = []
        for product_id in product_ids:
            if product_id in present:
                continue
            self.products.append(SaleProduct(product_id=product_id, is_active=True))
            present.add(product_id)
            added.append(product_id)
        return added

    def remove_product(self, product_id: str) -> bool:
        before = len(self.products)
        self.products = [p for p in self.products if p.product_id != product_id]
        return len(self.products) != before

    def set_product_active(self, product_id: str, is_active: bool) -> bool:
        member = self.find_member(product_id)
        if member is None:
            return False
        member.is_active = is_active
        return True

    def find_member(self, product_id: str) -> SaleProduct | None:
        for member in self.products:
            if member.product_id == product_id:
                return member
        return None

    # --- Queries --------------------------------------------------------------

    @property
    def owner_key(self) -> str:
        """Display label for logs and CLI output; storage is keyed by vendor id."""
        return self.vendor_id if self.vendor_id is not None else ADMIN_SALE_OWNER

    def is_live(self, now: datetime) -> bool:
        """Switched on and within its date range (time of day not considered)."""
        return self.is_active and self.start_date <= now <= self.expire_date
