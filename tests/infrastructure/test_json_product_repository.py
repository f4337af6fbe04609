"""Tests for the JSON-file product and category repositories."""

import json
from datetime import timedelta
from decimal import Decimal

import pytest

from catalog.domain.exceptions import ConflictError, EntityNotFoundError
from catalog.domain.model.category import Category, CategoryStatus, SubCategory
from catalog.domain.model.product import DiscountType, MediaRef, ProductStatus
from catalog.domain.repository.product_repository import ProductFilter
from catalog.infrastructure.persistence.json_category_repository import (
    JsonCategoryRepository,
)
from catalog.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from tests.fakes import NOW, approved, make_product, variation


@pytest.fixture
def repo(tmp_path):
    return JsonProductRepository(tmp_path / "products.json")


class TestJsonProductRepository:

    def test_missing_file_created_empty(self, tmp_path):
        JsonProductRepository(tmp_path / "nested" / "products.json")
        assert json.loads((tmp_path / "nested" / "products.json").read_text()) == []

    def test_round_trip(self, repo):
        product = make_product(
            id="p1",
            sub_category_id="sneakers",
            discount=Decimal("12.5"),
            discount_type=DiscountType.FLAT,
            variations=[variation("V-S", 3)],
            search_tags=["canvas"],
            images=[MediaRef(url="https://cdn.example/1.jpg", public_id="img1")],
            rejection_reason="",
        )
        repo.add(product)
        loaded = repo.get_by_id("p1")
        assert loaded == product

    def test_document_uses_camel_case(self, tmp_path, repo):
        repo.add(make_product(id="p1", sub_category_id="sneakers"))
        raw = json.loads((tmp_path / "products.json").read_text())[0]
        assert raw["vendor"] == "v1"
        assert raw["subCategory"] == "sneakers"
        assert raw["discountType"] == "percent"
        assert raw["isActive"] is False
        assert raw["price"] == 200
        assert raw["version"] == 0
        assert raw["thumbnail"] == {"url": "https://cdn.example/t.jpg", "publicId": None}
        assert raw["createdAt"] == NOW.isoformat()

    def test_amounts_stored_as_numbers(self, tmp_path, repo):
        repo.add(make_product(
            id="p1", discount=Decimal("12.5"), discount_type=DiscountType.FLAT
        ))
        raw = json.loads((tmp_path / "products.json").read_text())[0]
        assert raw["price"] == 200
        assert raw["discount"] == 12.5
        assert repo.get_by_id("p1").discount == Decimal("12.5")

    def test_reads_legacy_string_amounts(self, tmp_path, repo):
        repo.add(make_product(id="p1"))
        path = tmp_path / "products.json"
        records = json.loads(path.read_text())
        records[0]["price"] = "199.99"
        records[0]["discount"] = "5"
        path.write_text(json.dumps(records))
        loaded = repo.get_by_id("p1")
        assert loaded.price.amount == Decimal("199.99")
        assert loaded.discount == Decimal("5")

    def test_add_rejects_duplicate_sku(self, repo):
        repo.add(make_product(id="p1"))
        with pytest.raises(ConflictError) as exc:
            repo.add(make_product(id="p2", slug="other"))
        assert exc.value.code == "DUPLICATE_SKU"

    def test_add_rejects_duplicate_slug(self, repo):
        repo.add(make_product(id="p1"))
        with pytest.raises(ConflictError) as exc:
            repo.add(make_product(id="p2", sku="OTHER"))
        assert exc.value.code == "DUPLICATE_SLUG"

    def test_save_replaces_and_bumps_version(self, repo):
        repo.add(make_product(id="p1"))
        product = repo.get_by_id("p1")
        product.status = ProductStatus.APPROVED
        repo.save(product)
        assert product.version == 1
        loaded = repo.get_by_id("p1")
        assert loaded.status is ProductStatus.APPROVED
        assert loaded.version == 1

    def test_stale_save_is_rejected(self, repo):
        repo.add(make_product(id="p1"))
        first = repo.get_by_id("p1")
        second = repo.get_by_id("p1")

        first.status = ProductStatus.APPROVED
        repo.save(first)

        second.is_featured = True
        with pytest.raises(ConflictError) as exc:
            repo.save(second)
        assert exc.value.code == "VERSION_CONFLICT"
        stored = repo.get_by_id("p1")
        assert stored.status is ProductStatus.APPROVED
        assert stored.is_featured is False

    def test_save_missing_product(self, repo):
        with pytest.raises(EntityNotFoundError):
            repo.save(make_product(id="ghost"))

    def test_lookups(self, repo):
        repo.add(make_product(id="p1", variations=[variation("V-S", 1)]))
        assert repo.slug_exists("canvas-sneaker")
        assert repo.find_by_sku("SKU-1").id == "p1"
        assert repo.find_by_sku("SKU-1", exclude_id="p1") is None
        assert repo.find_by_variation_sku("V-S").id == "p1"
        assert repo.find_by_variation_sku("V-S", exclude_id="p1") is None

    def test_count_owned(self, repo):
        repo.add(make_product(id="p1"))
        repo.add(make_product(id="p2", sku="B", slug="b", vendor_id="v2"))
        assert repo.count_owned("v1", ["p1", "p2", "ghost"]) == 1
        assert repo.count_owned(None, ["p1", "p2", "ghost"]) == 2

    def test_find_pages_newest_first(self, repo):
        for i in range(3):
            repo.add(approved(
                id=f"p{i}", sku=f"S{i}", slug=f"s{i}", created_at=NOW - timedelta(days=i)
            ))
        items, total = repo.find(ProductFilter(status=ProductStatus.APPROVED), page=1, limit=2)
        assert [p.id for p in items] == ["p0", "p1"]
        assert total == 3
        assert repo.count(ProductFilter(is_active=True)) == 3

    def test_delete(self, repo):
        repo.add(make_product(id="p1"))
        assert repo.delete("p1") is True
        assert repo.delete("p1") is False
        assert repo.get_by_id("p1") is None


class TestJsonCategoryRepository:

    def test_round_trip(self, tmp_path):
        repo = JsonCategoryRepository(tmp_path / "c.json", tmp_path / "s.json")
        repo.save_category(Category(id="shoes", name="Shoes"))
        repo.save_category(Category(id="old", name="Old", status=CategoryStatus.INACTIVE))
        repo.save_subcategory(SubCategory(id="sneakers", name="Sneakers", category_id="shoes"))

        assert repo.get_category("shoes").is_active
        assert not repo.get_category("old").is_active
        assert repo.get_subcategory("sneakers").category_id == "shoes"
        assert repo.get_category("ghost") is None
        assert [c.id for c in repo.list_categories()] == ["shoes", "old"]

    def test_save_upserts(self, tmp_path):
        repo = JsonCategoryRepository(tmp_path / "c.json", tmp_path / "s.json")
        repo.save_category(Category(id="shoes", name="Shoes"))
        repo.save_category(Category(id="shoes", name="Footwear"))
        assert [c.name for c in repo.list_categories()] == ["Footwear"]
