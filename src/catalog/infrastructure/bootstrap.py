"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from pathlib import Path

from catalog.application.cache_invalidator import CacheInvalidator
from catalog.domain.service.pricing_overlay import PricingOverlayEngine
from catalog.domain.repository.cache_backend import CacheBackend
from catalog.infrastructure.cache.memory_cache import InMemoryCache
from catalog.infrastructure.cache.redis_cache import RedisCache
from catalog.infrastructure.config import get_settings
from catalog.infrastructure.persistence.json_category_repository import (
    JsonCategoryRepository,
)
from catalog.infrastructure.persistence.json_clearance_sale_repository import (
    JsonClearanceSaleRepository,
)
from catalog.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)

_CACHE = InMemoryCache()


def _data_dir() -> Path:
    return get_settings().data_dir


def product_repository() -> JsonProductRepository:
    return JsonProductRepository(_data_dir() / "products.json")


def category_repository() -> JsonCategoryRepository:
    return JsonCategoryRepository(
        _data_dir() / "categories.json", _data_dir() / "sub_categories.json"
    )


def clearance_sale_repository() -> JsonClearanceSaleRepository:
    return JsonClearanceSaleRepository(_data_dir() / "clearance_sales.json")


def cache_backend() -> CacheBackend:
    """Redis when ``redis_url`` is configured, else the per-process cache."""
    settings = get_settings()
    if settings.redis_url:
        return RedisCache(settings.redis_url, ttl_seconds=settings.cache_ttl_seconds)
    return _CACHE


def cache_invalidator() -> CacheInvalidator:
    return CacheInvalidator(cache_backend())


def pricing_overlay() -> PricingOverlayEngine:
    return PricingOverlayEngine(clearance_sale_repository())
