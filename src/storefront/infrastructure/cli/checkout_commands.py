"""CLI commands for buy-now staging and checkout."""

from __future__ import annotations

import asyncio

import click

from storefront.application.checkout_orchestrator import CheckoutOrchestrator
from storefront.application.coupon_validator import CouponValidator
from storefront.domain.exceptions import DomainException
from storefront.domain.model.checkout import PAYMENT_METHODS
from storefront.infrastructure.bootstrap import backend, buy_now_repository
from storefront.infrastructure.cli.cart_commands import build_item, item_options
from storefront.infrastructure.cli.context import CliContext, pass_cli_context
from storefront.infrastructure.cli.formatting import display_items, display_totals


@click.command("buy-now")
@item_options
@pass_cli_context
def buy_now(ctx: CliContext, **fields) -> None:
    """Stage a single product for the next checkout, bypassing the cart."""
    buy_now_repository(ctx.settings).stage(build_item(**fields))
    click.echo(f"'{fields['name']}' is ready for checkout.")


@click.command("checkout")
@click.option("--first-name", default=None, help="Defaults to the signed-in name.")
@click.option("--last-name", default=None, help="Defaults to the signed-in name.")
@click.option("--email", "contact_email", default=None, help="Defaults to the signed-in email.")
@click.option("--phone", required=True, help="Contact phone number.")
@click.option("--address", required=True, help="Street address.")
@click.option("--postal-code", required=True, help="Delivery postal code.")
@click.option(
    "--payment",
    type=click.Choice(PAYMENT_METHODS),
    default="cod",
    show_default=True,
    help="Payment method.",
)
@click.option("--coupon", "coupon_code", default=None, help="Coupon code to apply.")
@pass_cli_context
def checkout(
    ctx: CliContext,
    first_name: str | None,
    last_name: str | None,
    contact_email: str | None,
    phone: str,
    address: str,
    postal_code: str,
    payment: str,
    coupon_code: str | None,
) -> None:
    """Place an order for the staged buy-now item, or else the cart."""
    identity = ctx.require_identity()
    store = ctx.cart_store()

    async def _run():
        async with backend(ctx.settings) as services:
            orchestrator = CheckoutOrchestrator(
                cart_store=store,
                buy_now_repo=buy_now_repository(ctx.settings),
                coupon_validator=CouponValidator(services.coupons),
                order_gateway=services.orders,
                identity=identity,
            )
            try:
                orchestrator.start()
            except DomainException as exc:
                raise click.ClickException(str(exc))
            if not orchestrator.current_items:
                raise click.ClickException("Your cart is empty.")

            overrides = {
                "first_name": first_name,
                "last_name": last_name,
                "email": contact_email,
            }
            orchestrator.update_shipping(
                phone=phone,
                address=address,
                **{name: value for name, value in overrides.items() if value},
            )
            orchestrator.set_postal_code(postal_code)
            if not orchestrator.continue_to_payment():
                raise click.ClickException(orchestrator.error)

            orchestrator.select_payment_method(payment)
            if coupon_code:
                result = await orchestrator.apply_coupon(coupon_code)
                if not result.valid:
                    click.echo(f"Coupon not applied: {result.error}", err=True)

            display_items(orchestrator.current_items)
            display_totals(orchestrator.totals, orchestrator.applied_coupon)
            return await orchestrator.submit()

    outcome = asyncio.run(_run())
    if outcome is None or not outcome.succeeded:
        message = outcome.error if outcome is not None else "Order was not submitted."
        raise click.ClickException(message)

    click.echo()
    click.echo(f"Order {outcome.order_number} placed.")
    click.echo(f"Confirmation: {outcome.redirect_to}")
