import logging

import click

from storefront.domain.exceptions import DomainException
from storefront.domain.model.identity import IDENTITY_SOURCES, resolve_identity
from storefront.infrastructure.bootstrap import load_settings
from storefront.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_remove,
    cart_show,
    cart_update,
)
from storefront.infrastructure.cli.checkout_commands import buy_now, checkout
from storefront.infrastructure.cli.context import CliContext
from storefront.infrastructure.cli.coupon_commands import coupon_check, coupon_list
from storefront.infrastructure.cli.order_commands import order_list, order_show


@click.group()
@click.option("--user-id", envvar="STOREFRONT_USER_ID", default=None, help="Signed-in user ID.")
@click.option("--email", envvar="STOREFRONT_USER_EMAIL", default=None, help="Signed-in email.")
@click.option("--name", envvar="STOREFRONT_USER_NAME", default=None, help="Signed-in name.")
@click.option(
    "--auth-source",
    type=click.Choice(IDENTITY_SOURCES),
    default="password",
    help="How the user signed in.",
)
@click.option("--log-level", default=None, help="Logging level (default: STOREFRONT_LOG_LEVEL or WARNING).")
@click.pass_context
def cli(
    ctx: click.Context,
    user_id: str | None,
    email: str | None,
    name: str | None,
    auth_source: str,
    log_level: str | None,
) -> None:
    """Storefront: cart, coupons and checkout."""
    settings = load_settings()
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    identity = None
    if user_id:
        try:
            identity = resolve_identity(
                {"source": auth_source, "id": user_id, "email": email, "name": name}
            )
        except DomainException as exc:
            raise click.ClickException(str(exc))
    ctx.obj = CliContext(settings=settings, identity=identity)


@cli.group()
def cart() -> None:
    """Manage the shopping cart."""


@cli.group()
def coupon() -> None:
    """Browse and check coupons."""


@cli.group()
def order() -> None:
    """Look up placed orders."""


# Register subcommands
cart.add_command(cart_add)
cart.add_command(cart_update)
cart.add_command(cart_remove)
cart.add_command(cart_clear)
cart.add_command(cart_show)
coupon.add_command(coupon_list)
coupon.add_command(coupon_check)
order.add_command(order_show)
order.add_command(order_list)
cli.add_command(buy_now)
cli.add_command(checkout)
