"""CLI commands for placed orders."""

from __future__ import annotations

import asyncio

import click

from storefront.domain.exceptions import DomainException
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.bootstrap import backend
from storefront.infrastructure.cli.context import CliContext, pass_cli_context


@click.command("show")
@click.option("--number", "order_number", required=True, help="Order number, e.g. MF100001.")
@pass_cli_context
def order_show(ctx: CliContext, order_number: str) -> None:
    """Show an order's confirmation details."""

    async def _load():
        async with backend(ctx.settings) as services:
            return await services.orders.get_by_number(order_number)

    try:
        receipt = asyncio.run(_load())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {receipt.order_number}  (status={receipt.status or 'unknown'})")
    if receipt.total_amount is not None:
        click.echo(f"Total:   {_format_total(receipt.total_amount)}")
    if receipt.created_at:
        click.echo(f"Placed:  {receipt.created_at}")


@click.command("list")
@pass_cli_context
def order_list(ctx: CliContext) -> None:
    """List the signed-in customer's orders."""
    user_id = ctx.require_identity().id

    async def _load():
        async with backend(ctx.settings) as services:
            return await services.orders.list_for_user(user_id)

    try:
        receipts = asyncio.run(_load())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not receipts:
        click.echo("No orders found.")
        return

    click.echo(f"{'Order':<12} {'Status':<12} {'Total':>12}")
    click.echo("-" * 38)
    for receipt in receipts:
        total = _format_total(receipt.total_amount)
        click.echo(f"{receipt.order_number:<12} {receipt.status or '-':<12} {total:>12}")


def _format_total(amount: object) -> str:
    """Render a backend amount, which may arrive as a number or a string."""
    if amount is None:
        return "-"
    try:
        return str(Money.of(amount))
    except DomainException:
        return str(amount)
