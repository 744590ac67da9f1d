"""CLI commands for the shopping cart."""

from __future__ import annotations

import asyncio

import click

from storefront.application.coupon_validator import CouponValidator
from storefront.domain.exceptions import DomainException
from storefront.domain.model.cart import CartItem
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.bootstrap import backend
from storefront.infrastructure.cli.context import CliContext, pass_cli_context
from storefront.infrastructure.cli.formatting import display_items, display_totals


def item_options(func):
    """Options describing a product line, shared by ``cart add`` and ``buy-now``."""
    options = [
        click.option("--id", "item_id", required=True, help="Product ID."),
        click.option("--name", required=True, help="Product name."),
        click.option("--price", required=True, help="Unit price (e.g. 599)."),
        click.option("--quantity", default=1, show_default=True, type=int, help="Units."),
        click.option("--image", default="", help="Image URL."),
        click.option("--variant", "variant_id", default=None, help="Variant ID."),
        click.option("--weight", default=None, help="Variant weight, e.g. 1kg."),
        click.option("--custom-name", default=None, help="Name to write on the cake."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def build_item(
    item_id: str,
    name: str,
    price: str,
    quantity: int,
    image: str,
    variant_id: str | None,
    weight: str | None,
    custom_name: str | None,
) -> CartItem:
    try:
        return CartItem(
            id=item_id,
            name=name,
            price=Money.of(price),
            quantity=quantity,
            image=image,
            variant_id=variant_id,
            weight=weight,
            custom_name=custom_name,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))


@click.command("add")
@item_options
@pass_cli_context
def cart_add(ctx: CliContext, **fields) -> None:
    """Add a product to the cart."""
    store = ctx.cart_store()
    store.add_item(build_item(**fields))
    click.echo(f"Added '{fields['name']}'; cart now holds {store.count} item(s).")


@click.command("update")
@click.option("--id", "item_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="New quantity (0 removes).")
@click.option("--variant", "variant_id", default=None, help="Variant ID.")
@pass_cli_context
def cart_update(ctx: CliContext, item_id: str, quantity: int, variant_id: str | None) -> None:
    """Change the quantity of a cart line."""
    store = ctx.cart_store()
    store.update_quantity(item_id, quantity, variant_id)
    click.echo(f"Cart now holds {store.count} item(s).")


@click.command("remove")
@click.option("--id", "item_id", required=True, help="Product ID.")
@click.option("--variant", "variant_id", default=None, help="Variant ID.")
@pass_cli_context
def cart_remove(ctx: CliContext, item_id: str, variant_id: str | None) -> None:
    """Remove a line from the cart."""
    store = ctx.cart_store()
    store.remove_item(item_id, variant_id)
    click.echo(f"Cart now holds {store.count} item(s).")


@click.command("clear")
@pass_cli_context
def cart_clear(ctx: CliContext) -> None:
    """Empty the cart."""
    ctx.cart_store().clear()
    click.echo("Cart cleared.")


@click.command("show")
@click.option("--coupon", "coupon_code", default=None, help="Preview a coupon on this cart.")
@pass_cli_context
def cart_show(ctx: CliContext, coupon_code: str | None) -> None:
    """Show the cart with its totals."""
    store = ctx.cart_store()
    if store.is_empty:
        click.echo("Your cart is empty.")
        return

    if coupon_code:
        customer_id = ctx.require_identity().id

        async def _apply():
            async with backend(ctx.settings) as services:
                return await store.apply_coupon(
                    CouponValidator(services.coupons), coupon_code, customer_id
                )

        result = asyncio.run(_apply())
        if not result.valid:
            click.echo(f"Coupon not applied: {result.error}", err=True)

    display_items(store.items)
    display_totals(store.totals, store.applied_coupon)
