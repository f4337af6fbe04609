"""Category and SubCategory — read-only collaborators of the catalog.

Category management itself is plain CRUD; the catalog only needs to know
whether a category exists, whether it is active, and which category a
subcategory hangs under.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CategoryStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass
class Category:
    id: str
    name: str
    status: CategoryStatus = CategoryStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status is CategoryStatus.ACTIVE


@dataclass
class SubCategory:
    id: str
    name: str
    category_id: str
