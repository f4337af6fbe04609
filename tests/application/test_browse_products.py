"""Integration tests for storefront browsing: featured, search, similar."""

import pytest

from catalog.application.browse_products import (
    FeaturedProductsHandler,
    SearchProductsHandler,
    SimilarProductsHandler,
)
from catalog.domain.exceptions import EntityNotFoundError
from tests.fakes import FakeProductRepository, approved, make_product


def _repo():
    return FakeProductRepository([
        approved(id="s1", sku="S1", slug="s1", name="Canvas Sneaker",
                 search_tags=["canvas", "summer"], is_featured=True),
        approved(id="s2", sku="S2", slug="s2", name="Leather Boot", search_tags=["leather"]),
        approved(id="s3", sku="S3", slug="s3", name="Canvas Tote",
                 category_id="bags", search_tags=["canvas"]),
        approved(id="s4", sku="S4", slug="s4", name="Plain Loafer"),
        approved(id="s5", sku="S5", slug="s5", name="Sold Out Runner",
                 quantity=0, is_featured=True),
        make_product(id="p1", sku="P1", slug="p1", name="Canvas Pending",
                     search_tags=["canvas"], is_featured=True),
    ])


class TestFeatured:

    def test_only_public_featured(self):
        assert [p.id for p in FeaturedProductsHandler(_repo()).handle()] == ["s1"]

    def test_sold_out_products_not_featured(self):
        featured = FeaturedProductsHandler(_repo()).handle()
        assert "s5" not in [p.id for p in featured]


class TestSearch:

    def test_matches_name_and_tags(self):
        found = SearchProductsHandler(_repo()).handle("canvas")
        assert sorted(p.id for p in found) == ["s1", "s3"]

    def test_short_query_returns_nothing(self):
        assert SearchProductsHandler(_repo()).handle("c") == []
        assert SearchProductsHandler(_repo()).handle("  ") == []

    def test_limit(self):
        assert len(SearchProductsHandler(_repo()).handle("canvas", limit=1)) == 1


class TestSimilar:

    def test_shared_tag(self):
        similar = SimilarProductsHandler(_repo()).handle("s1")
        assert [p.id for p in similar] == ["s3"]

    def test_untagged_falls_back_to_category(self):
        similar = SimilarProductsHandler(_repo()).handle("s4")
        assert sorted(p.id for p in similar) == ["s1", "s2"]

    def test_missing_product(self):
        with pytest.raises(EntityNotFoundError):
            SimilarProductsHandler(_repo()).handle("nope")
