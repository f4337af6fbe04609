"""Application service: Product statistics for dashboards (query)."""

from __future__ import annotations

from catalog.application.dto import ProductStats, StatusCounts
from catalog.domain.model.product import ProductStatus
from catalog.domain.repository.product_repository import ProductFilter, ProductRepository


class ProductStatsHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, vendor_id: str | None = None) -> ProductStats:
        """Counts for one vendor, or for the whole marketplace when None.

        Only the marketplace view reports stock counts.
        """
        count = self._product_repo.count

        def scoped(**kwargs) -> ProductFilter:
            return ProductFilter(vendor_id=vendor_id, **kwargs)

        total = count(scoped())
        by_status = StatusCounts(
            pending=count(scoped(status=ProductStatus.PENDING)),
            approved=count(scoped(status=ProductStatus.APPROVED)),
            rejected=count(scoped(status=ProductStatus.REJECTED)),
            suspended=count(scoped(status=ProductStatus.SUSPENDED)),
        )
        active = count(scoped(is_active=True))
        featured = count(scoped(is_featured=True))

        if vendor_id is not None:
            return ProductStats(
                total=total, by_status=by_status, active=active, featured=featured
            )

        out_of_stock = count(scoped(in_stock=False))
        return ProductStats(
            total=total,
            by_status=by_status,
            active=active,
            featured=featured,
            out_of_stock=out_of_stock,
            in_stock=total - out_of_stock,
        )
