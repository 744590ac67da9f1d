"""Table and totals rendering shared by the CLI commands."""

from __future__ import annotations

import click

from storefront.domain.model.cart import CartItem
from storefront.domain.model.coupon import AppliedCoupon
from storefront.domain.model.order import OrderTotals


def display_items(items: list[CartItem]) -> None:
    click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>12} {'Total':>12}")
    click.echo(f"  {'-'*56}")
    for item in items:
        label = item.name if not item.weight else f"{item.name} ({item.weight})"
        click.echo(
            f"  {label:<24} {item.quantity:>5} {str(item.price):>12} {str(item.line_total):>12}"
        )
    click.echo(f"  {'-'*56}")


def display_totals(totals: OrderTotals, coupon: AppliedCoupon | None = None) -> None:
    shipping = "FREE" if totals.has_free_shipping else str(totals.shipping)
    click.echo(f"  {'Subtotal':<43} {str(totals.subtotal):>12}")
    click.echo(f"  {'Shipping':<43} {shipping:>12}")
    if coupon is not None and not totals.discount.is_zero:
        label = f"Discount ({coupon.code}, {coupon.coupon.label})"
        click.echo(f"  {label:<43} {'-' + str(totals.discount):>12}")
    click.echo(f"  {'Total':<43} {str(totals.total):>12}")
