"""CLI commands for categories (seeding the read-only collaborator)."""

from __future__ import annotations

import uuid

import click

from catalog.domain.model.category import Category, CategoryStatus, SubCategory
from catalog.infrastructure.bootstrap import category_repository


@click.command("add")
@click.option("--name", required=True, help="Category name.")
@click.option("--id", "category_id", default=None, help="Category ID (generated if omitted).")
@click.option("--inactive", is_flag=True, default=False, help="Create the category inactive.")
def category_add(name: str, category_id: str | None, inactive: bool) -> None:
    """Add a product category."""
    category = Category(
        id=category_id or uuid.uuid4().hex,
        name=name,
        status=CategoryStatus.INACTIVE if inactive else CategoryStatus.ACTIVE,
    )
    category_repository().save_category(category)
    click.echo(f"Category {category.id} '{category.name}' ({category.status.value})")


@click.command("add-sub")
@click.option("--name", required=True, help="Subcategory name.")
@click.option("--category", "category_id", required=True, help="Parent category ID.")
@click.option("--id", "subcategory_id", default=None, help="Subcategory ID (generated if omitted).")
def category_add_sub(name: str, category_id: str, subcategory_id: str | None) -> None:
    """Add a subcategory under an existing category."""
    repo = category_repository()
    if repo.get_category(category_id) is None:
        raise click.ClickException(f"Category '{category_id}' not found")
    sub = SubCategory(id=subcategory_id or uuid.uuid4().hex, name=name, category_id=category_id)
    repo.save_subcategory(sub)
    click.echo(f"SubCategory {sub.id} '{sub.name}' under {category_id}")


@click.command("list")
def category_list() -> None:
    """List categories."""
    categories = category_repository().list_categories()
    if not categories:
        click.echo("No categories found.")
        return
    for c in categories:
        click.echo(f"{c.id:<34} {c.name:<24} {c.status.value}")
