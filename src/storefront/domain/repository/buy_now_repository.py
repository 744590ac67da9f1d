"""Abstract one-shot store for the buy-now item."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.cart import CartItem


class BuyNowRepository(ABC):

    @abstractmethod
    def stage(self, item: CartItem) -> None:
        """Stage an item for the next checkout, replacing any staged one."""

    @abstractmethod
    def take(self) -> CartItem | None:
        """Return the staged item and erase it in the same step.

        A second call returns None, so a reloaded checkout never
        replays the purchase.
        """
