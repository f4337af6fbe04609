"""Application service: public listing of running clearance sales (query).

A sale is listed when it is switched on and today falls inside its date
range. Its daily time window is left to the pricing overlay at render
time.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from catalog.domain.model.clearance_sale import ClearanceSaleConfig
from catalog.domain.repository.clearance_sale_repository import (
    ClearanceSaleRepository,
)

DEFAULT_PUBLIC_SALES_LIMIT = 10


class PublicClearanceSalesHandler:

    def __init__(
        self,
        sale_repo: ClearanceSaleRepository,
        clock: Callable[[], datetime] | None = None,
        default_limit: int = DEFAULT_PUBLIC_SALES_LIMIT,
    ) -> None:
        self._sale_repo = sale_repo
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._default_limit = default_limit

    def handle(self, limit: int | None = None) -> list[ClearanceSaleConfig]:
        limit = limit if limit and limit > 0 else self._default_limit
        return self._sale_repo.find_live(self._clock(), limit=limit)
