"""Shared state handed from the root group to every command."""

from __future__ import annotations

from dataclasses import dataclass

import click

from storefront.application.cart_store import CartStore
from storefront.domain.exceptions import DomainException
from storefront.domain.model.identity import Identity
from storefront.infrastructure.bootstrap import Settings, cart_repository


@dataclass
class CliContext:
    settings: Settings
    identity: Identity | None

    def cart_store(self) -> CartStore:
        try:
            store = CartStore(cart_repository(self.settings))
            store.hydrate(self.identity)
        except DomainException as exc:
            raise click.ClickException(str(exc))
        return store

    def require_identity(self) -> Identity:
        if self.identity is None:
            raise click.ClickException(
                "Please sign in first (--user-id and --email, or STOREFRONT_USER_ID)."
            )
        return self.identity


pass_cli_context = click.make_pass_decorator(CliContext)
