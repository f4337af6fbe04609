"""Application services: storefront browsing queries.

Featured products, search-bar suggestions and "similar products" all
read from the public slice of the catalog: approved, active and in stock.
"""

from __future__ import annotations

from catalog.domain.exceptions import EntityNotFoundError
from catalog.domain.model.product import Product, ProductStatus
from catalog.domain.repository.product_repository import ProductFilter, ProductRepository

MIN_SEARCH_LENGTH = 2


def _public_filter(**kwargs) -> ProductFilter:
    return ProductFilter(
        status=ProductStatus.APPROVED, is_active=True, in_stock=True, **kwargs
    )


class FeaturedProductsHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, limit: int = 10) -> list[Product]:
        items, _ = self._product_repo.find(_public_filter(is_featured=True), limit=limit)
        return items


class SearchProductsHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, text: str, limit: int = 20) -> list[Product]:
        """Autocomplete lookup; queries under two characters return nothing."""
        if not text or len(text.strip()) < MIN_SEARCH_LENGTH:
            return []
        items, _ = self._product_repo.find(_public_filter(search=text.strip()), limit=limit)
        return items


class SimilarProductsHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str, limit: int = 10) -> list[Product]:
        """Products sharing a search tag, or the same category if untagged."""
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError("Product not found", code="PRODUCT_NOT_FOUND")

        if product.search_tags:
            criteria = _public_filter(
                tags_any=tuple(product.search_tags), exclude_id=product.id
            )
        else:
            criteria = _public_filter(category_id=product.category_id, exclude_id=product.id)
        items, _ = self._product_repo.find(criteria, limit=limit)
        return items
