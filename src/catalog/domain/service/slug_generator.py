"""Domain service: unique URL slug for a new product."""

from __future__ import annotations

import re

from catalog.domain.repository.product_repository import ProductRepository

_WHITESPACE_RE = re.compile(r"\s")
_UNSAFE_RE = re.compile(r"[^\w-]+", re.ASCII)
_FALLBACK_SLUG = "product"


def slugify(name: str) -> str:
    """Lowercase, whitespace to hyphens, drop anything not word-or-hyphen."""
    slug = _WHITESPACE_RE.sub("-", name.lower())
    return _UNSAFE_RE.sub("", slug)


class SlugGenerator:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def generate(self, name: str) -> str:
        """Return a slug for ``name`` that no stored product uses yet.

        Collisions get ``-1``, ``-2``, ... appended to the base slug.
        """
        base = slugify(name) or _FALLBACK_SLUG
        slug = base
        counter = 1
        while self._product_repo.slug_exists(slug):
            slug = f"{base}-{counter}"
            counter += 1
        return slug
