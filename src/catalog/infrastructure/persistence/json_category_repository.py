"""JSON-file-backed implementation of CategoryRepository."""

from __future__ import annotations

from pathlib import Path

from catalog.domain.model.category import Category, CategoryStatus, SubCategory
from catalog.domain.repository.category_repository import CategoryRepository
from catalog.infrastructure.persistence.json_collection import JsonCollection


class JsonCategoryRepository(CategoryRepository):

    def __init__(self, categories_path: Path, subcategories_path: Path) -> None:
        self._categories = JsonCollection(categories_path)
        self._subcategories = JsonCollection(subcategories_path)

    # --- CategoryRepository interface -----------------------------------------

    def get_category(self, category_id: str) -> Category | None:
        for raw in self._categories.load():
            if raw["id"] == category_id:
                return Category(
                    id=raw["id"], name=raw["name"], status=CategoryStatus(raw["status"])
                )
        return None

    def get_subcategory(self, subcategory_id: str) -> SubCategory | None:
        for raw in self._subcategories.load():
            if raw["id"] == subcategory_id:
                return SubCategory(
                    id=raw["id"], name=raw["name"], category_id=raw["category"]
                )
        return None

    def list_categories(self) -> list[Category]:
        return [
            Category(id=raw["id"], name=raw["name"], status=CategoryStatus(raw["status"]))
            for raw in self._categories.load()
        ]

    def save_category(self, category: Category) -> None:
        self._upsert(
            self._categories,
            {"id": category.id, "name": category.name, "status": category.status.value},
        )

    def save_subcategory(self, subcategory: SubCategory) -> None:
        self._upsert(
            self._subcategories,
            {
                "id": subcategory.id,
                "name": subcategory.name,
                "category": subcategory.category_id,
            },
        )

    @staticmethod
    def _upsert(collection: JsonCollection, record: dict) -> None:
        with collection.locked():
            records = collection.load()
            for i, raw in enumerate(records):
                if raw["id"] == record["id"]:
                    records[i] = record
                    break
            else:
                records.append(record)
            collection.persist(records)
