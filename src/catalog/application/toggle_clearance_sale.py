"""Application service: switch a clearance sale on or off."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from catalog.application.cache_invalidator import CacheInvalidator
from catalog.application.dto import Actor
from catalog.domain.exceptions import EntityNotFoundError
from catalog.domain.model.clearance_sale import ClearanceSaleConfig
from catalog.domain.repository.clearance_sale_repository import (
    ClearanceSaleRepository,
)

logger = logging.getLogger(__name__)


class ToggleClearanceSaleHandler:

    def __init__(
        self,
        sale_repo: ClearanceSaleRepository,
        cache: CacheInvalidator,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._sale_repo = sale_repo
        self._cache = cache
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def handle(self, actor: Actor, is_active: bool) -> ClearanceSaleConfig:
        """Flip only the sale's ``is_active`` flag.

        Raises ConflictError (``VERSION_CONFLICT``) if the config was
        rewritten between the read and the save.
        """
        config = self._sale_repo.get_by_vendor(actor.sale_vendor_id)
        if config is None:
            raise EntityNotFoundError(
                "Clearance sale configuration not found", code="SALE_NOT_FOUND"
            )

        config.is_active = is_active
        config.updated_at = self._clock()
        saved = self._sale_repo.save(config)
        self._cache.invalidate_catalog()

        logger.info(
            "Clearance sale for %s is_active=%s",
            saved.owner_key,
            is_active,
            extra={"owner": saved.owner_key},
        )
        return saved
