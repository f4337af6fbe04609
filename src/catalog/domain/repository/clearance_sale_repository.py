"""Abstract repository for ClearanceSaleConfig aggregate.

Configs are keyed by vendor id; ``vendor_id=None`` addresses the
admin-global config. Membership edits are exposed as atomic primitives
instead of a read-modify-write of the whole document, so two concurrent
edits on the same sale both land.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from catalog.domain.model.clearance_sale import ClearanceSaleConfig


class ClearanceSaleRepository(ABC):

    @abstractmethod
    def next_id(self) -> str:
        """Generate a new unique config ID."""

    @abstractmethod
    def get_by_vendor(self, vendor_id: str | None) -> ClearanceSaleConfig | None:
        """Return the vendor's config (None for the admin-global one), or None."""

    @abstractmethod
    def save(self, config: ClearanceSaleConfig) -> ClearanceSaleConfig:
        """Upsert by vendor; never creates a second config for a vendor.

        Writes the configuration fields only. On an existing config the
        stored membership list is kept: membership changes go through the
        primitives below.

        ``config.version`` must match the stored version (0 when nothing
        is stored yet), otherwise ConflictError (``VERSION_CONFLICT``) is
        raised and nothing is written.
        """

    @abstractmethod
    def add_products(
        self, vendor_id: str | None, product_ids: list[str]
    ) -> ClearanceSaleConfig | None:
        """Atomically union ``product_ids`` into membership; None if no config."""

    @abstractmethod
    def remove_product(
        self, vendor_id: str | None, product_id: str
    ) -> ClearanceSaleConfig | None:
        """Atomically drop a member; None if no config."""

    @abstractmethod
    def set_product_active(
        self, vendor_id: str | None, product_id: str, is_active: bool
    ) -> ClearanceSaleConfig | None:
        """Atomically toggle a member; None if no config or not a member."""

    @abstractmethod
    def find_live(
        self,
        now: datetime,
        vendor_ids: list[str] | None = None,
        limit: int | None = None,
    ) -> list[ClearanceSaleConfig]:
        """Active configs with ``start_date <= now <= expire_date``, newest first.

        ``vendor_ids`` restricts the result to those vendors' configs.
        """
