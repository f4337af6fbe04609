"""Domain service: clearance-sale pricing overlay.

A pure read-side join. Given products, it looks up each owning vendor's
live clearance sale and, for products that are active members of it,
attaches the sale metadata and a display price. Stored products are
never modified.

For ``flat`` sales the sale price is ``price - price * amount / 100``:
the "flat" amount is applied as a percentage. Existing storefronts rely
on this, so it is kept as is.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Sequence, overload

from catalog.domain.model.clearance_sale import (
    ClearanceSaleConfig,
    OfferActiveTime,
    SaleDiscountType,
)
from catalog.domain.model.product import Product
from catalog.domain.model.value_objects import ClockTime, Money
from catalog.domain.repository.clearance_sale_repository import (
    ClearanceSaleRepository,
)


@dataclass(frozen=True)
class ClearanceOverlay:
    """Sale metadata attached to a product at read time."""

    discount_type: SaleDiscountType
    discount_amount: Decimal
    offer_active_time: OfferActiveTime
    start_time: str | None
    end_time: str | None
    meta_title: str | None

    def in_time_window(self, now: datetime) -> bool:
        """True if the daily offer window covers ``now``.

        ``always`` offers are always in-window. A window whose end is
        before its start runs across midnight.
        """
        if self.offer_active_time is OfferActiveTime.ALWAYS:
            return True
        if not self.start_time or not self.end_time:
            return False
        start = ClockTime(self.start_time).minutes
        end = ClockTime(self.end_time).minutes
        current = now.hour * 60 + now.minute
        if start <= end:
            return start <= current < end
        return current >= start or current < end

    @staticmethod
    def from_config(config: ClearanceSaleConfig) -> ClearanceOverlay:
        return ClearanceOverlay(
            discount_type=config.discount_type,
            discount_amount=config.discount_amount,
            offer_active_time=config.offer_active_time,
            start_time=config.start_time,
            end_time=config.end_time,
            meta_title=config.meta_title,
        )


@dataclass(frozen=True)
class ProductView:
    """A product as displayed: the stored product plus any sale overlay."""

    product: Product
    clearance_sale: ClearanceOverlay | None = None
    sale_price: Money | None = None

    def sale_price_at(self, now: datetime) -> Money | None:
        """The sale price to display at ``now`` (UTC), or None outside the window."""
        if self.clearance_sale is None or not self.clearance_sale.in_time_window(now):
            return None
        return self.sale_price


def sale_price_for(price: Money, overlay: ClearanceOverlay) -> Money | None:
    if overlay.discount_type is not SaleDiscountType.FLAT:
        # product_wise: the vendor's own price stands
        return None
    if overlay.discount_amount <= 0:
        return price
    return price.percent_off(overlay.discount_amount)


class PricingOverlayEngine:

    def __init__(
        self,
        sale_repo: ClearanceSaleRepository,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._sale_repo = sale_repo
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @overload
    def enrich(self, products: None) -> None: ...

    @overload
    def enrich(self, products: Product) -> ProductView: ...

    @overload
    def enrich(self, products: Sequence[Product]) -> list[ProductView]: ...

    def enrich(self, products):
        """Attach live clearance pricing, preserving the input's shape.

        A single product comes back as a single ``ProductView``, a sequence
        as a list of the same length. ``None`` and empty sequences are
        returned untouched.
        """
        if products is None:
            return None
        single = isinstance(products, Product)
        product_list: list[Product] = [products] if single else list(products)
        if not product_list:
            return products

        vendor_ids = list(dict.fromkeys(p.vendor_id for p in product_list if p.vendor_id))
        sales_by_vendor: dict[str, ClearanceSaleConfig] = {}
        if vendor_ids:
            for config in self._sale_repo.find_live(self._clock(), vendor_ids=vendor_ids):
                if config.vendor_id is not None:
                    sales_by_vendor.setdefault(config.vendor_id, config)

        views = [self._view(p, sales_by_vendor.get(p.vendor_id)) for p in product_list]
        return views[0] if single else views

    @staticmethod
    def _view(product: Product, config: ClearanceSaleConfig | None) -> ProductView:
        if config is None:
            return ProductView(product)
        member = config.find_member(product.id)
        if member is None or not member.is_active:
            return ProductView(product)
        overlay = ClearanceOverlay.from_config(config)
        return ProductView(
            product,
            clearance_sale=overlay,
            sale_price=sale_price_for(product.price, overlay),
        )
