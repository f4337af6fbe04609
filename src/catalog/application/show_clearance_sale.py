"""Application service: Show an owner's clearance sale configuration (query)."""

from __future__ import annotations

from catalog.application.dto import Actor
from catalog.domain.model.clearance_sale import ClearanceSaleConfig
from catalog.domain.repository.clearance_sale_repository import (
    ClearanceSaleRepository,
)


class ShowClearanceSaleHandler:

    def __init__(self, sale_repo: ClearanceSaleRepository) -> None:
        self._sale_repo = sale_repo

    def handle(self, actor: Actor) -> ClearanceSaleConfig | None:
        return self._sale_repo.get_by_vendor(actor.sale_vendor_id)
