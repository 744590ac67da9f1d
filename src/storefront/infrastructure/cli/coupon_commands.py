"""CLI commands for coupons."""

from __future__ import annotations

import asyncio

import click

from storefront.application.coupon_validator import CouponValidator
from storefront.domain.exceptions import DomainException
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.bootstrap import backend
from storefront.infrastructure.cli.context import CliContext, pass_cli_context


@click.command("list")
@pass_cli_context
def coupon_list(ctx: CliContext) -> None:
    """List coupons available to the signed-in customer."""
    customer_id = ctx.require_identity().id

    async def _load():
        async with backend(ctx.settings) as services:
            return await CouponValidator(services.coupons).available_coupons(customer_id)

    coupons = asyncio.run(_load())
    if not coupons:
        click.echo("No coupons available.")
        return

    click.echo(f"{'Code':<12} {'Offer':<14} {'Min order':>10}  Name")
    click.echo("-" * 56)
    for coupon in coupons:
        minimum = str(coupon.minimum_amount) if coupon.minimum_amount else "-"
        click.echo(f"{coupon.code:<12} {coupon.label:<14} {minimum:>10}  {coupon.name or ''}")


@click.command("check")
@click.option("--code", required=True, help="Coupon code.")
@click.option("--amount", default=None, help="Order amount (defaults to the cart subtotal).")
@pass_cli_context
def coupon_check(ctx: CliContext, code: str, amount: str | None) -> None:
    """Check whether a coupon applies, and what it would save."""
    customer_id = ctx.require_identity().id
    try:
        order_amount = Money.of(amount) if amount else ctx.cart_store().totals.subtotal
    except DomainException as exc:
        raise click.ClickException(str(exc))

    async def _validate():
        async with backend(ctx.settings) as services:
            return await CouponValidator(services.coupons).validate(
                code, customer_id, order_amount
            )

    result = asyncio.run(_validate())
    if not result.valid:
        raise click.ClickException(result.error or "Invalid coupon code")
    click.echo(
        f"{result.applied.code} applies to {order_amount}: "
        f"you save {result.applied.discount_amount}"
    )
