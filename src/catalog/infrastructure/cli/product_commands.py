"""CLI commands for vendors and storefront reads of the Product aggregate."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import click

from catalog.application.browse_products import (
    FeaturedProductsHandler,
    SearchProductsHandler,
    SimilarProductsHandler,
)
from catalog.application.create_product import CreateProductHandler
from catalog.application.delete_product import DeleteProductHandler
from catalog.application.dto import Actor, ProductChanges, ProductDraft, ProductQuery
from catalog.application.list_products import ListingScope, ListProductsHandler
from catalog.application.product_stats import ProductStatsHandler
from catalog.application.show_product import ShowProductHandler
from catalog.application.update_product import UpdateProductHandler
from catalog.domain.exceptions import DomainException
from catalog.domain.model.product import ProductStatus
from catalog.infrastructure.bootstrap import (
    cache_backend,
    cache_invalidator,
    category_repository,
    pricing_overlay,
    product_repository,
)
from catalog.infrastructure.cli.formatting import (
    echo_product,
    echo_product_table,
    echo_product_views,
    echo_stats,
    load_payload,
)
from catalog.infrastructure.config import get_settings

_STATUS_CHOICE = click.Choice([s.value for s in ProductStatus])


@click.command("create")
@click.option("--vendor", "vendor_id", required=True, help="Acting vendor ID.")
@click.option("--file", "payload_file", required=True, type=click.Path(exists=True, path_type=Path), help="JSON payload.")
def product_create(vendor_id: str, payload_file: Path) -> None:
    """Create a product (starts pending review)."""
    handler = CreateProductHandler(
        product_repo=product_repository(),
        category_repo=category_repository(),
        cache=cache_invalidator(),
    )

    try:
        draft = ProductDraft.from_payload(load_payload(payload_file))
        product = handler.handle(draft, vendor_id=vendor_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} '{product.name}' created (slug={product.slug}, status={product.status.value})")


@click.command("update")
@click.option("--vendor", "vendor_id", required=True, help="Acting vendor ID.")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--file", "payload_file", required=True, type=click.Path(exists=True, path_type=Path), help="JSON payload with the fields to change.")
def product_update(vendor_id: str, product_id: str, payload_file: Path) -> None:
    """Update one of your products."""
    handler = UpdateProductHandler(
        product_repo=product_repository(),
        category_repo=category_repository(),
        cache=cache_invalidator(),
    )

    try:
        changes = ProductChanges.from_payload(load_payload(payload_file))
        product = handler.handle(product_id, changes, Actor.vendor(vendor_id))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} updated (status={product.status.value}, active={product.is_active})")


@click.command("delete")
@click.option("--vendor", "vendor_id", required=True, help="Acting vendor ID.")
@click.option("--id", "product_id", required=True, help="Product ID.")
def product_delete(vendor_id: str, product_id: str) -> None:
    """Delete one of your products."""
    handler = DeleteProductHandler(product_repo=product_repository(), cache=cache_invalidator())

    try:
        handler.handle(product_id, Actor.vendor(vendor_id))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product_id} deleted.")


@click.command("list")
@click.option("--vendor", "vendor_id", default=None, help="List this vendor's own products (any status).")
@click.option("--status", default=None, type=_STATUS_CHOICE, help="Filter by status (vendor listing).")
@click.option("--search", default=None, help="Text search.")
@click.option("--category", "category_id", default=None, help="Category ID.")
@click.option("--page", default=1, type=int, show_default=True)
@click.option("--limit", default=None, type=int, help="Page size.")
@click.option("--with-sale", is_flag=True, default=False, help="Show clearance sale prices.")
def product_list(
    vendor_id: str | None,
    status: str | None,
    search: str | None,
    category_id: str | None,
    page: int,
    limit: int | None,
    with_sale: bool,
) -> None:
    """List products: the public catalog, or a vendor's own products."""
    settings = get_settings()
    handler = ListProductsHandler(
        product_repo=product_repository(),
        cache=cache_backend(),
        max_page_size=settings.max_page_size,
    )
    query = ProductQuery(
        status=ProductStatus(status) if status else None,
        category_id=category_id,
        search=search,
    )
    scope = ListingScope.VENDOR if vendor_id else ListingScope.PUBLIC

    try:
        result = handler.handle(
            query,
            page=page,
            limit=limit or settings.default_page_size,
            scope=scope,
            vendor_id=vendor_id,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not result.items:
        click.echo("No products found.")
        return

    if with_sale:
        echo_product_views(
            pricing_overlay().enrich(result.items), datetime.now(timezone.utc)
        )
    else:
        echo_product_table(result.items)
    click.echo(f"Page {result.page}/{result.pages}  ({result.total} products)")


@click.command("show")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--public", is_flag=True, default=False, help="Storefront view.")
def product_show(product_id: str, public: bool) -> None:
    """Show details of a product."""
    handler = ShowProductHandler(product_repo=product_repository())

    try:
        product = handler.handle(product_id, public=public)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    echo_product(product)
    view = pricing_overlay().enrich(product)
    sale_price = view.sale_price_at(datetime.now(timezone.utc))
    if sale_price is not None:
        click.echo(f"Sale:     {sale_price}  ({view.clearance_sale.meta_title or 'clearance sale'})")


@click.command("stats")
@click.option("--vendor", "vendor_id", required=True, help="Vendor ID.")
def product_stats(vendor_id: str) -> None:
    """Show a vendor's product counts."""
    stats = ProductStatsHandler(product_repo=product_repository()).handle(vendor_id)
    echo_stats(stats)


@click.command("search")
@click.argument("text")
@click.option("--limit", default=20, type=int, show_default=True)
def product_search(text: str, limit: int) -> None:
    """Search the public catalog."""
    products = SearchProductsHandler(product_repo=product_repository()).handle(text, limit)
    if not products:
        click.echo("No products found.")
        return
    echo_product_table(products)


@click.command("featured")
@click.option("--limit", default=10, type=int, show_default=True)
def product_featured(limit: int) -> None:
    """List featured products."""
    products = FeaturedProductsHandler(product_repo=product_repository()).handle(limit)
    if not products:
        click.echo("No products found.")
        return
    echo_product_table(products)


@click.command("similar")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--limit", default=10, type=int, show_default=True)
def product_similar(product_id: str, limit: int) -> None:
    """List products similar to a product."""
    handler = SimilarProductsHandler(product_repo=product_repository())
    try:
        products = handler.handle(product_id, limit)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    if not products:
        click.echo("No products found.")
        return
    echo_product_table(products)
