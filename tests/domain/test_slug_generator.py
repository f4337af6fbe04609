"""Unit tests for slug generation."""

from catalog.domain.service.slug_generator import SlugGenerator, slugify
from tests.fakes import FakeProductRepository, make_product


class TestSlugify:

    def test_lowercase_and_hyphens(self):
        assert slugify("Canvas Sneaker") == "canvas-sneaker"

    def test_each_space_becomes_a_hyphen(self):
        assert slugify("Red  Bag") == "red--bag"

    def test_punctuation_dropped(self):
        assert slugify("Tom's Bag (XL)!") == "toms-bag-xl"

    def test_non_ascii_dropped(self):
        assert slugify("Café Mug") == "caf-mug"

    def test_underscore_kept(self):
        assert slugify("snake_case") == "snake_case"


class TestSlugGenerator:

    def test_free_slug_used_as_is(self):
        generator = SlugGenerator(FakeProductRepository())
        assert generator.generate("Canvas Sneaker") == "canvas-sneaker"

    def test_collision_gets_counter(self):
        repo = FakeProductRepository([make_product(slug="canvas-sneaker")])
        assert SlugGenerator(repo).generate("Canvas Sneaker") == "canvas-sneaker-1"

    def test_counter_keeps_climbing(self):
        repo = FakeProductRepository([
            make_product(id="a", sku="A", slug="canvas-sneaker"),
            make_product(id="b", sku="B", slug="canvas-sneaker-1"),
            make_product(id="c", sku="C", slug="canvas-sneaker-2"),
        ])
        assert SlugGenerator(repo).generate("Canvas Sneaker") == "canvas-sneaker-3"

    def test_empty_slug_falls_back(self):
        generator = SlugGenerator(FakeProductRepository())
        assert generator.generate("!!!") == "product"
