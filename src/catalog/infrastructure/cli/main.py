import click

from catalog.infrastructure.cli.admin_commands import (
    admin_delete,
    admin_feature,
    admin_list,
    admin_set_status,
    admin_stats,
    admin_update,
)
from catalog.infrastructure.cli.category_commands import (
    category_add,
    category_add_sub,
    category_list,
)
from catalog.infrastructure.cli.product_commands import (
    product_create,
    product_delete,
    product_featured,
    product_list,
    product_search,
    product_show,
    product_similar,
    product_stats,
    product_update,
)
from catalog.infrastructure.cli.sale_commands import (
    sale_add,
    sale_public,
    sale_remove,
    sale_setup,
    sale_show,
    sale_toggle,
    sale_toggle_product,
)
from catalog.infrastructure.config import get_settings
from catalog.infrastructure.logging_setup import setup_logging


@click.group()
def cli() -> None:
    """Vendor catalog with admin review and clearance sales"""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)


@cli.group()
def category() -> None:
    """Manage categories."""


@cli.group()
def product() -> None:
    """Manage products (vendor) and browse the catalog."""


@cli.group()
def admin() -> None:
    """Moderate products."""


@cli.group()
def sale() -> None:
    """Manage clearance sales."""


# Register subcommands
category.add_command(category_add)
category.add_command(category_add_sub)
category.add_command(category_list)
product.add_command(product_create)
product.add_command(product_delete)
product.add_command(product_featured)
product.add_command(product_list)
product.add_command(product_search)
product.add_command(product_show)
product.add_command(product_similar)
product.add_command(product_stats)
product.add_command(product_update)
admin.add_command(admin_delete)
admin.add_command(admin_feature)
admin.add_command(admin_list)
admin.add_command(admin_set_status)
admin.add_command(admin_stats)
admin.add_command(admin_update)
sale.add_command(sale_add)
sale.add_command(sale_public)
sale.add_command(sale_remove)
sale.add_command(sale_setup)
sale.add_command(sale_show)
sale.add_command(sale_toggle)
sale.add_command(sale_toggle_product)
