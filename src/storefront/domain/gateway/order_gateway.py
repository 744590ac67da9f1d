"""Port for the backend order service."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import OrderDraft, OrderReceipt


class OrderGateway(ABC):

    @abstractmethod
    async def create_order(self, draft: OrderDraft) -> OrderReceipt:
        """Submit a draft; raises GatewayError if the backend refuses it."""

    @abstractmethod
    async def get_by_number(self, order_number: str) -> OrderReceipt:
        """Look up an accepted order; raises EntityNotFoundError if unknown."""

    @abstractmethod
    async def list_for_user(self, user_id: str) -> list[OrderReceipt]:
        """Orders placed by a user, newest first."""
