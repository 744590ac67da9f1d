"""Abstract repository for cart contents.

Defined in the domain layer so the domain never depends on
infrastructure. Carts are stored per owner key: ``user:<id>`` for a
signed-in shopper, ``guest`` otherwise.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.cart import CartItem


class CartRepository(ABC):

    @abstractmethod
    def load(self, owner_key: str) -> list[CartItem]:
        """Return the saved lines for an owner, or an empty list."""

    @abstractmethod
    def save(self, owner_key: str, items: list[CartItem]) -> None:
        """Replace the saved lines for an owner."""
