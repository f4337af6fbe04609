"""Product aggregate and its review/visibility state machine.

A product is created by a vendor in ``pending`` status and stays invisible
until an admin approves it and the vendor switches it on. ``status`` and
``is_active`` are coupled: every write goes through ``next_state`` /
``Product.change_status`` so the pair can never drift into
``is_active=True`` on an unapproved product.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from catalog.domain.exceptions import ForbiddenError, ValidationError
from catalog.domain.model.value_objects import Money


class ProductStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    SUSPENDED = "suspended"


class DiscountType(Enum):
    PERCENT = "percent"
    FLAT = "flat"


# Edits to any of these send an approved product back to review.
CONTENT_FIELDS = frozenset({
    "name",
    "description",
    "price",
    "category_id",
    "sub_category_id",
    "images",
    "variations",
    "discount",
})

_ALLOWED_TRANSITIONS: dict[ProductStatus, frozenset[ProductStatus]] = {
    ProductStatus.PENDING: frozenset({ProductStatus.APPROVED, ProductStatus.REJECTED}),
    ProductStatus.APPROVED: frozenset({
        ProductStatus.PENDING,
        ProductStatus.REJECTED,
        ProductStatus.SUSPENDED,
    }),
    ProductStatus.REJECTED: frozenset({ProductStatus.APPROVED}),
    ProductStatus.SUSPENDED: frozenset({ProductStatus.APPROVED, ProductStatus.REJECTED}),
}

MAX_PERCENT_DISCOUNT = Decimal("100")


@dataclass(frozen=True)
class MediaRef:
    """A pre-resolved media reference (upload handling happens elsewhere)."""

    url: str
    public_id: str | None = None


@dataclass
class Variation:
    sku: str
    stock: int
    attributes: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.sku or not self.sku.strip():
            raise ValidationError("Variation SKU is required", code="MISSING_FIELD")
        if not isinstance(self.stock, int) or isinstance(self.stock, bool):
            raise ValidationError(
                f"Variation stock must be an integer, got {type(self.stock).__name__}"
            )
        if self.stock < 0:
            raise ValidationError(
                f"Variation stock cannot be negative (sku {self.sku})"
            )


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------


def transition(current: ProductStatus, requested: ProductStatus) -> ProductStatus:
    """Validate a review-status change and return the resulting status.

    Re-requesting the current status is a no-op so retried admin calls
    are safe.
    """
    if requested == current:
        return current
    if requested not in _ALLOWED_TRANSITIONS[current]:
        raise ValidationError(
            f"Cannot move product from {current.value} to {requested.value}",
            code="INVALID_STATUS_TRANSITION",
        )
    return requested


def resolve_visibility(
    status: ProductStatus,
    requested_active: bool | None,
    current_active: bool,
) -> bool:
    """Return the ``is_active`` value allowed for ``status``.

    Only approved products may be visible. Asking for ``True`` on anything
    else is refused rather than silently ignored.
    """
    if status is not ProductStatus.APPROVED:
        if requested_active:
            raise ForbiddenError(
                "Cannot activate product until it is approved by Admin",
                code="PRODUCT_NOT_APPROVED",
            )
        return False
    if requested_active is None:
        return current_active
    return requested_active


def next_state(
    status: ProductStatus,
    is_active: bool,
    *,
    content_changed: bool,
    requested_active: bool | None,
    require_review: bool = True,
) -> tuple[ProductStatus, bool]:
    """Compute ``(status, is_active)`` after an edit.

    An approved product whose content changes goes back to ``pending`` and
    is hidden, whatever ``is_active`` the caller asked for.
    """
    if require_review and content_changed and status is ProductStatus.APPROVED:
        return ProductStatus.PENDING, False
    return status, resolve_visibility(status, requested_active, is_active)


# ---------------------------------------------------------------------------
# Payload-level rules
# ---------------------------------------------------------------------------


def total_stock(variations: list[Variation]) -> int:
    return sum(v.stock for v in variations)


def ensure_unique_variation_skus(variations: list[Variation]) -> None:
    skus = [v.sku for v in variations]
    if len(skus) != len(set(skus)):
        raise ValidationError(
            "Duplicate SKUs found in variations", code="DUPLICATE_VARIATION_SKU"
        )


def ensure_discount_within_bounds(
    price: Money, discount: Decimal, discount_type: DiscountType
) -> None:
    """Percent discounts cap at 100; flat discounts must stay below price."""
    if discount < 0:
        raise ValidationError("Discount cannot be negative", code="INVALID_DISCOUNT")
    if discount == 0:
        return
    if discount_type is DiscountType.PERCENT and discount > MAX_PERCENT_DISCOUNT:
        raise ValidationError(
            "Discount percentage cannot exceed 100%", code="INVALID_DISCOUNT"
        )
    if discount_type is DiscountType.FLAT and discount >= price.amount:
        raise ValidationError(
            "Flat discount cannot be equal to or greater than price",
            code="INVALID_DISCOUNT",
        )


def ensure_images(images: list[MediaRef] | None) -> None:
    if not images:
        raise ValidationError(
            "At least one product image is required", code="IMAGES_REQUIRED"
        )


def ensure_thumbnail(thumbnail: MediaRef | None) -> None:
    if thumbnail is None or not thumbnail.url:
        raise ValidationError("Product thumbnail is required", code="THUMBNAIL_REQUIRED")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Product:
    """Aggregate root for a vendor's catalog entry.

    Use ``Product.create()`` for new products. The ``__init__`` stays plain
    so repositories can reconstitute persisted products without
    re-validating. ``version`` is the stored revision the product was read
    at; the repository refuses a save when it has moved on.
    """

    id: str
    vendor_id: str
    name: str
    sku: str
    slug: str
    price: Money
    category_id: str
    images: list[MediaRef]
    thumbnail: MediaRef
    description: str = ""
    sub_category_id: str | None = None
    discount: Decimal = Decimal("0")
    discount_type: DiscountType = DiscountType.PERCENT
    quantity: int = 0
    variations: list[Variation] = field(default_factory=list)
    search_tags: list[str] = field(default_factory=list)
    status: ProductStatus = ProductStatus.PENDING
    is_active: bool = False
    is_featured: bool = False
    rejection_reason: str = ""
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    version: int = 0

    # --- Factory (used for NEW products only) ---------------------------------

    @staticmethod
    def create(
        *,
        id: str,
        vendor_id: str,
        name: str,
        sku: str,
        slug: str,
        price: Money,
        category_id: str,
        images: list[MediaRef],
        thumbnail: MediaRef | None,
        description: str = "",
        sub_category_id: str | None = None,
        discount: Decimal = Decimal("0"),
        discount_type: DiscountType = DiscountType.PERCENT,
        quantity: int = 0,
        variations: list[Variation] | None = None,
        search_tags: list[str] | None = None,
        now: datetime | None = None,
    ) -> Product:
        """Build a pending, hidden product after checking its own invariants."""
        variations = list(variations or [])
        if variations:
            quantity = total_stock(variations)
        if quantity < 0:
            raise ValidationError("Quantity cannot be negative")

        ensure_images(images)
        ensure_thumbnail(thumbnail)
        ensure_discount_within_bounds(price, discount, discount_type)

        created = now or _utcnow()
        return Product(
            id=id,
            vendor_id=vendor_id,
            name=name.strip(),
            sku=sku,
            slug=slug,
            price=price,
            category_id=category_id,
            images=list(images),
            thumbnail=thumbnail,  # type: ignore[arg-type]
            description=description,
            sub_category_id=sub_category_id,
            discount=discount,
            discount_type=discount_type,
            quantity=quantity,
            variations=variations,
            search_tags=list(search_tags or []),
            created_at=created,
            updated_at=created,
        )

    # --- State transitions ----------------------------------------------------

    def change_status(self, status: ProductStatus, reason: str | None = None) -> None:
        """Admin review decision.

        Rejection needs a reason and hides the product. Approval clears any
        earlier rejection reason but leaves activation to the vendor.
        """
        if status is ProductStatus.REJECTED and not (reason and reason.strip()):
            raise ValidationError("Rejection reason is required", code="REASON_REQUIRED")

        new_status = transition(self.status, status)
        if new_status is ProductStatus.REJECTED:
            self.rejection_reason = reason.strip()  # type: ignore[union-attr]
        elif new_status is ProductStatus.APPROVED:
            self.rejection_reason = ""
        self.status = new_status
        self.is_active = resolve_visibility(new_status, None, self.is_active)

    # --- Queries --------------------------------------------------------------

    def is_owned_by(self, vendor_id: str) -> bool:
        return self.vendor_id == vendor_id

    @property
    def in_stock(self) -> bool:
        return self.quantity > 0

    @property
    def is_public(self) -> bool:
        return self.status is ProductStatus.APPROVED and self.is_active

    @property
    def variation_skus(self) -> list[str]:
        return [v.sku for v in self.variations]
