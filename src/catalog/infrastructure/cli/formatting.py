"""Shared CLI helpers: payload loading and table output."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import click

from catalog.application.dto import ProductStats
from catalog.domain.model.clearance_sale import ClearanceSaleConfig
from catalog.domain.model.product import Product
from catalog.domain.service.pricing_overlay import ProductView


def load_payload(path: Path) -> dict:
    """Read a camelCase JSON payload file."""
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"{path} is not valid JSON: {exc}")
    if not isinstance(payload, dict):
        raise click.BadParameter(f"{path} must contain a JSON object")
    return payload


def parse_ids(raw: str) -> list[str]:
    """Parse 'a,b,c' into ['a', 'b', 'c']."""
    ids = [part.strip() for part in raw.split(",") if part.strip()]
    if not ids:
        raise click.BadParameter("Expected at least one product ID")
    return ids


def echo_product_table(products: list[Product]) -> None:
    click.echo(f"{'ID':<34} {'Name':<24} {'Price':>10} {'Qty':>5} {'Status':<10} Active")
    click.echo("-" * 95)
    for p in products:
        click.echo(
            f"{p.id:<34} {p.name[:24]:<24} {str(p.price):>10} {p.quantity:>5} "
            f"{p.status.value:<10} {'yes' if p.is_active else 'no'}"
        )


def echo_product_views(views: list[ProductView], now: datetime) -> None:
    """Sale prices are shown only inside the sale's daily window at ``now``."""
    click.echo(f"{'ID':<34} {'Name':<24} {'Price':>10} {'Sale':>10}")
    click.echo("-" * 81)
    for view in views:
        sale_price = view.sale_price_at(now)
        sale = str(sale_price) if sale_price is not None else "-"
        click.echo(
            f"{view.product.id:<34} {view.product.name[:24]:<24} "
            f"{str(view.product.price):>10} {sale:>10}"
        )


def echo_product(product: Product) -> None:
    click.echo(f"Product {product.id}  (status={product.status.value})")
    click.echo(f"Name:     {product.name}")
    click.echo(f"Slug:     {product.slug}")
    click.echo(f"SKU:      {product.sku}")
    click.echo(f"Vendor:   {product.vendor_id}")
    click.echo(f"Price:    {product.price}  discount {product.discount} ({product.discount_type.value})")
    click.echo(f"Quantity: {product.quantity}")
    click.echo(f"Active:   {'yes' if product.is_active else 'no'}   Featured: {'yes' if product.is_featured else 'no'}")
    if product.rejection_reason:
        click.echo(f"Rejected: {product.rejection_reason}")
    for v in product.variations:
        click.echo(f"  - {v.sku:<20} stock {v.stock:>5}")


def echo_sale(config: ClearanceSaleConfig) -> None:
    click.echo(f"Clearance sale {config.id}  (owner={config.owner_key}, active={config.is_active})")
    click.echo(f"Runs:     {config.start_date.isoformat()} -> {config.expire_date.isoformat()}")
    click.echo(f"Discount: {config.discount_amount} ({config.discount_type.value})")
    window = config.offer_active_time.value
    if config.start_time and config.end_time:
        window += f" {config.start_time}-{config.end_time}"
    click.echo(f"Window:   {window}")
    if config.meta_title:
        click.echo(f"Title:    {config.meta_title}")
    click.echo(f"Products: {len(config.products)}")
    for member in config.products:
        click.echo(f"  - {member.product_id:<34} {'on' if member.is_active else 'off'}")


def echo_stats(stats: ProductStats) -> None:
    click.echo(f"Total:     {stats.total}")
    click.echo(
        f"Pending:   {stats.by_status.pending}   Approved: {stats.by_status.approved}   "
        f"Rejected: {stats.by_status.rejected}   Suspended: {stats.by_status.suspended}"
    )
    click.echo(f"Active:    {stats.active}   Featured: {stats.featured}")
    if stats.out_of_stock is not None:
        click.echo(f"In stock:  {stats.in_stock}   Out of stock: {stats.out_of_stock}")
