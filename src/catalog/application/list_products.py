"""Application service: List Products use case (query).

Three audiences see the catalog differently:
- public: only approved, active products (out-of-stock ones included);
- vendor: all of the vendor's own products, any status;
- admin: everything.

Public pages are read through the cache; every catalog mutation clears
the ``products*`` keys.
"""

from __future__ import annotations

import logging
from enum import Enum

from catalog.application.dto import ProductPage, ProductQuery
from catalog.domain.exceptions import ValidationError
from catalog.domain.model.product import ProductStatus
from catalog.domain.repository.cache_backend import CacheBackend, CacheBackendError
from catalog.domain.repository.product_repository import ProductFilter, ProductRepository

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class ListingScope(Enum):
    PUBLIC = "public"
    VENDOR = "vendor"
    ADMIN = "admin"


class ListProductsHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        cache: CacheBackend | None = None,
        max_page_size: int = MAX_PAGE_SIZE,
    ) -> None:
        self._product_repo = product_repo
        self._cache = cache
        self._max_page_size = max_page_size

    def handle(
        self,
        query: ProductQuery | None = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        scope: ListingScope = ListingScope.PUBLIC,
        vendor_id: str | None = None,
    ) -> ProductPage:
        query = query or ProductQuery()
        page = max(1, page)
        limit = min(max(1, limit), self._max_page_size)
        criteria = self._criteria(query, scope, vendor_id)

        cache_key = None
        if scope is ListingScope.PUBLIC and self._cache is not None:
            cache_key = _cache_key(criteria, page, limit)
            cached = self._cached(cache_key)
            if cached is not None:
                return cached

        items, total = self._product_repo.find(criteria, page=page, limit=limit)
        result = ProductPage(items=items, total=total, page=page, limit=limit)

        if cache_key is not None:
            self._store(cache_key, result)
        return result

    @staticmethod
    def _criteria(
        query: ProductQuery, scope: ListingScope, vendor_id: str | None
    ) -> ProductFilter:
        if scope is ListingScope.PUBLIC:
            return ProductFilter(
                vendor_id=query.vendor_id,
                status=ProductStatus.APPROVED,
                is_active=True,
                is_featured=query.featured,
                category_id=query.category_id,
                search=query.search,
            )
        if scope is ListingScope.VENDOR:
            if not vendor_id:
                raise ValidationError("Vendor listing requires a vendor id", code="MISSING_FIELD")
            return ProductFilter(
                vendor_id=vendor_id,
                status=query.status,
                is_featured=query.featured,
                category_id=query.category_id,
                search=query.search,
            )
        return ProductFilter(
            vendor_id=query.vendor_id,
            status=query.status,
            is_featured=query.featured,
            category_id=query.category_id,
            search=query.search,
        )

    # --- Cache helpers --------------------------------------------------------

    def _cached(self, key: str) -> ProductPage | None:
        try:
            return self._cache.get(key)  # type: ignore[union-attr]
        except CacheBackendError:
            logger.warning("Cache read failed for %s", key, exc_info=True)
            return None

    def _store(self, key: str, result: ProductPage) -> None:
        try:
            self._cache.set(key, result)  # type: ignore[union-attr]
        except CacheBackendError:
            logger.warning("Cache write failed for %s", key, exc_info=True)


def _cache_key(criteria: ProductFilter, page: int, limit: int) -> str:
    return (
        f"products:public:{criteria.vendor_id or '*'}:{criteria.category_id or '*'}:"
        f"{criteria.is_featured}:{(criteria.search or '').lower()}:{page}:{limit}"
    )
