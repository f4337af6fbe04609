"""Application service: Set up (upsert) a clearance sale configuration.

There is one configuration per owner: a vendor, or the marketplace admin
(the admin-global config, stored with no vendor). The first call creates
it, later calls update that same document. A save that races another
write to the same config fails with ``VERSION_CONFLICT``.
"""

from __future__ import annotations

import dataclasses
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable

from catalog.application.cache_invalidator import CacheInvalidator
from catalog.application.dto import Actor, ClearanceSaleSetup
from catalog.domain.exceptions import ValidationError
from catalog.domain.model.clearance_sale import (
    ClearanceSaleConfig,
    OfferActiveTime,
    SaleDiscountType,
)
from catalog.domain.repository.clearance_sale_repository import (
    ClearanceSaleRepository,
)

logger = logging.getLogger(__name__)


class SetupClearanceSaleHandler:

    def __init__(
        self,
        sale_repo: ClearanceSaleRepository,
        cache: CacheInvalidator,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._sale_repo = sale_repo
        self._cache = cache
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def handle(self, setup: ClearanceSaleSetup, actor: Actor) -> ClearanceSaleConfig:
        now = self._clock()
        existing = self._sale_repo.get_by_vendor(actor.sale_vendor_id)

        if existing is None:
            config = self._new_config(setup, actor.sale_vendor_id, now)
        else:
            changes = {
                f.name: getattr(setup, f.name)
                for f in dataclasses.fields(setup)
                if getattr(setup, f.name) is not None
            }
            config = dataclasses.replace(existing, **changes, updated_at=now)

        config.validate()
        saved = self._sale_repo.save(config)
        self._cache.invalidate_catalog()

        logger.info(
            "Clearance sale %s for %s (%s)",
            "created" if existing is None else "updated",
            saved.owner_key,
            saved.id,
            extra={"owner": saved.owner_key},
        )
        return saved

    def _new_config(
        self, setup: ClearanceSaleSetup, vendor_id: str | None, now: datetime
    ) -> ClearanceSaleConfig:
        if setup.start_date is None or setup.expire_date is None:
            raise ValidationError(
                "Start date and expire date are required", code="MISSING_FIELD"
            )
        return ClearanceSaleConfig(
            id=self._sale_repo.next_id(),
            vendor_id=vendor_id,
            start_date=setup.start_date,
            expire_date=setup.expire_date,
            is_active=bool(setup.is_active),
            discount_type=setup.discount_type or SaleDiscountType.FLAT,
            discount_amount=(
                setup.discount_amount if setup.discount_amount is not None else Decimal("0")
            ),
            offer_active_time=setup.offer_active_time or OfferActiveTime.ALWAYS,
            start_time=setup.start_time,
            end_time=setup.end_time,
            meta_title=setup.meta_title,
            meta_description=setup.meta_description,
            meta_image=setup.meta_image,
            created_at=now,
            updated_at=now,
        )
