"""Abstract repository for categories and subcategories."""

from __future__ import annotations

from abc import ABC, abstractmethod

from catalog.domain.model.category import Category, SubCategory


class CategoryRepository(ABC):

    @abstractmethod
    def get_category(self, category_id: str) -> Category | None:
        """Return a category by its ID, or None."""

    @abstractmethod
    def get_subcategory(self, subcategory_id: str) -> SubCategory | None:
        """Return a subcategory by its ID, or None."""

    @abstractmethod
    def list_categories(self) -> list[Category]:
        """Return every category."""

    @abstractmethod
    def save_category(self, category: Category) -> None:
        """Persist a new or updated category."""

    @abstractmethod
    def save_subcategory(self, subcategory: SubCategory) -> None:
        """Persist a new or updated subcategory."""
