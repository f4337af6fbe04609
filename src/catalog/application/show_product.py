"""Application service: Show Product use case (query)."""

from __future__ import annotations

import dataclasses

from catalog.domain.exceptions import EntityNotFoundError
from catalog.domain.model.product import Product
from catalog.domain.repository.product_repository import ProductRepository


class ShowProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str, public: bool = False) -> Product:
        """Return a product by ID.

        Public reads only see approved, active products, and variations
        that are out of stock are left out.
        """
        product = self._product_repo.get_by_id(product_id)
        if product is None or (public and not product.is_public):
            raise EntityNotFoundError("Product not found", code="PRODUCT_NOT_FOUND")
        if public and product.variations:
            return dataclasses.replace(
                product, variations=[v for v in product.variations if v.stock > 0]
            )
        return product
