"""CLI commands for clearance sales (vendor or admin-global)."""

from __future__ import annotations

from pathlib import Path

import click

from catalog.application.add_clearance_products import AddClearanceProductsHandler
from catalog.application.dto import Actor, ClearanceSaleSetup
from catalog.application.list_clearance_sales import PublicClearanceSalesHandler
from catalog.application.remove_clearance_product import RemoveClearanceProductHandler
from catalog.application.setup_clearance_sale import SetupClearanceSaleHandler
from catalog.application.show_clearance_sale import ShowClearanceSaleHandler
from catalog.application.toggle_clearance_product import ToggleClearanceProductHandler
from catalog.application.toggle_clearance_sale import ToggleClearanceSaleHandler
from catalog.domain.exceptions import DomainException
from catalog.infrastructure.bootstrap import (
    cache_invalidator,
    clearance_sale_repository,
    product_repository,
)
from catalog.infrastructure.cli.formatting import echo_sale, load_payload, parse_ids
from catalog.infrastructure.config import get_settings


def _owner_options(func):
    func = click.option("--admin", is_flag=True, default=False, help="Act on the admin-global sale.")(func)
    func = click.option("--vendor", "vendor_id", default=None, help="Acting vendor ID.")(func)
    return func


def _owner(vendor_id: str | None, admin: bool) -> Actor:
    if admin == bool(vendor_id):
        raise click.UsageError("Pass exactly one of --vendor or --admin.")
    return Actor.admin() if admin else Actor.vendor(vendor_id)  # type: ignore[arg-type]


@click.command("setup")
@_owner_options
@click.option("--file", "payload_file", required=True, type=click.Path(exists=True, path_type=Path), help="JSON configuration payload.")
def sale_setup(vendor_id: str | None, admin: bool, payload_file: Path) -> None:
    """Create or update the clearance sale configuration."""
    owner = _owner(vendor_id, admin)
    handler = SetupClearanceSaleHandler(sale_repo=clearance_sale_repository(), cache=cache_invalidator())

    try:
        setup = ClearanceSaleSetup.from_payload(load_payload(payload_file))
        config = handler.handle(setup, owner)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo("Clearance sale configuration saved.")
    echo_sale(config)


@click.command("show")
@_owner_options
def sale_show(vendor_id: str | None, admin: bool) -> None:
    """Show the clearance sale configuration."""
    owner = _owner(vendor_id, admin)
    config = ShowClearanceSaleHandler(sale_repo=clearance_sale_repository()).handle(owner)
    if config is None:
        click.echo("No clearance sale configured.")
        return
    echo_sale(config)


@click.command("toggle")
@_owner_options
@click.option("--on/--off", "is_active", required=True, help="Switch the sale on or off.")
def sale_toggle(vendor_id: str | None, admin: bool, is_active: bool) -> None:
    """Switch the clearance sale on or off."""
    owner = _owner(vendor_id, admin)
    handler = ToggleClearanceSaleHandler(sale_repo=clearance_sale_repository(), cache=cache_invalidator())

    try:
        config = handler.handle(owner, is_active)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Clearance sale {'activated' if config.is_active else 'deactivated'}.")


@click.command("add")
@_owner_options
@click.option("--ids", required=True, help="Product IDs as 'id1,id2'.")
def sale_add(vendor_id: str | None, admin: bool, ids: str) -> None:
    """Add products to the clearance sale."""
    owner = _owner(vendor_id, admin)
    handler = AddClearanceProductsHandler(
        sale_repo=clearance_sale_repository(),
        product_repo=product_repository(),
        cache=cache_invalidator(),
    )

    try:
        config = handler.handle(owner, parse_ids(ids))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Clearance sale now has {len(config.products)} products.")


@click.command("remove")
@_owner_options
@click.option("--id", "product_id", required=True, help="Product ID.")
def sale_remove(vendor_id: str | None, admin: bool, product_id: str) -> None:
    """Remove a product from the clearance sale."""
    owner = _owner(vendor_id, admin)
    handler = RemoveClearanceProductHandler(sale_repo=clearance_sale_repository(), cache=cache_invalidator())

    try:
        config = handler.handle(owner, product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Clearance sale now has {len(config.products)} products.")


@click.command("toggle-product")
@_owner_options
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--on/--off", "is_active", required=True, help="Show or hide the sale price.")
def sale_toggle_product(vendor_id: str | None, admin: bool, product_id: str, is_active: bool) -> None:
    """Show or hide the sale price of one member product."""
    owner = _owner(vendor_id, admin)
    handler = ToggleClearanceProductHandler(sale_repo=clearance_sale_repository(), cache=cache_invalidator())

    try:
        handler.handle(owner, product_id, is_active)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product_id} sale {'on' if is_active else 'off'}.")


@click.command("public")
@click.option("--limit", default=None, type=int, help="Maximum number of sales.")
def sale_public(limit: int | None) -> None:
    """List clearance sales running right now."""
    handler = PublicClearanceSalesHandler(
        sale_repo=clearance_sale_repository(),
        default_limit=get_settings().public_sales_limit,
    )
    sales = handler.handle(limit)
    if not sales:
        click.echo("No clearance sales running.")
        return
    for config in sales:
        echo_sale(config)
        click.echo()
