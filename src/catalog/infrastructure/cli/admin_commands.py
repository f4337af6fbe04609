"""CLI commands for admin moderation of products."""

from __future__ import annotations

from pathlib import Path

import click

from catalog.application.delete_product import DeleteProductHandler
from catalog.application.dto import Actor, ProductChanges, ProductQuery
from catalog.application.list_products import ListingScope, ListProductsHandler
from catalog.application.product_stats import ProductStatsHandler
from catalog.application.set_product_featured import SetProductFeaturedHandler
from catalog.application.set_product_status import SetProductStatusHandler
from catalog.application.update_product import UpdateProductHandler
from catalog.domain.exceptions import DomainException
from catalog.domain.model.product import ProductStatus
from catalog.infrastructure.bootstrap import (
    cache_invalidator,
    category_repository,
    product_repository,
)
from catalog.infrastructure.cli.formatting import echo_product_table, echo_stats, load_payload
from catalog.infrastructure.config import get_settings


@click.command("set-status")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--status", required=True, type=click.Choice([s.value for s in ProductStatus]))
@click.option("--reason", default=None, help="Rejection reason (required when rejecting).")
def admin_set_status(product_id: str, status: str, reason: str | None) -> None:
    """Approve, reject, suspend or re-queue a product."""
    handler = SetProductStatusHandler(product_repo=product_repository(), cache=cache_invalidator())

    try:
        product = handler.handle(product_id, ProductStatus(status), reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} is now {product.status.value}")


@click.command("feature")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--on/--off", "featured", default=True, help="Feature or unfeature.")
def admin_feature(product_id: str, featured: bool) -> None:
    """Mark a product as featured (or not)."""
    handler = SetProductFeaturedHandler(product_repo=product_repository(), cache=cache_invalidator())

    try:
        product = handler.handle(product_id, featured)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} featured={product.is_featured}")


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--file", "payload_file", required=True, type=click.Path(exists=True, path_type=Path), help="JSON payload with the fields to change.")
def admin_update(product_id: str, payload_file: Path) -> None:
    """Edit any product field without sending it back to review."""
    handler = UpdateProductHandler(
        product_repo=product_repository(),
        category_repo=category_repository(),
        cache=cache_invalidator(),
    )

    try:
        changes = ProductChanges.from_payload(load_payload(payload_file))
        product = handler.handle(product_id, changes, Actor.admin())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} updated (status={product.status.value}, active={product.is_active})")


@click.command("delete")
@click.option("--id", "product_id", required=True, help="Product ID.")
def admin_delete(product_id: str) -> None:
    """Delete any product."""
    handler = DeleteProductHandler(product_repo=product_repository(), cache=cache_invalidator())

    try:
        handler.handle(product_id, Actor.admin())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product_id} deleted.")


@click.command("list")
@click.option("--status", default=None, type=click.Choice([s.value for s in ProductStatus]))
@click.option("--vendor", "vendor_id", default=None, help="Vendor ID.")
@click.option("--search", default=None, help="Text search.")
@click.option("--page", default=1, type=int, show_default=True)
@click.option("--limit", default=None, type=int, help="Page size.")
def admin_list(
    status: str | None, vendor_id: str | None, search: str | None, page: int, limit: int | None
) -> None:
    """List every product regardless of status."""
    settings = get_settings()
    handler = ListProductsHandler(
        product_repo=product_repository(), max_page_size=settings.max_page_size
    )
    query = ProductQuery(
        status=ProductStatus(status) if status else None, vendor_id=vendor_id, search=search
    )
    result = handler.handle(
        query, page=page, limit=limit or settings.default_page_size, scope=ListingScope.ADMIN
    )

    if not result.items:
        click.echo("No products found.")
        return
    echo_product_table(result.items)
    click.echo(f"Page {result.page}/{result.pages}  ({result.total} products)")


@click.command("stats")
def admin_stats() -> None:
    """Show marketplace-wide product counts."""
    echo_stats(ProductStatsHandler(product_repo=product_repository()).handle())
