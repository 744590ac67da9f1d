"""Order service backed by the storefront backend's order endpoints."""

from __future__ import annotations

from storefront.domain.exceptions import (
    EntityNotFoundError,
    GatewayError,
    SubmissionError,
)
from storefront.domain.gateway.order_gateway import OrderGateway
from storefront.domain.model.order import OrderDraft, OrderReceipt
from storefront.infrastructure.http.api_client import ApiClient

CREATE_ORDER_FAILED = "Failed to create order"


class HttpOrderGateway(OrderGateway):

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    # --- OrderGateway interface -----------------------------------------------

    async def create_order(self, draft: OrderDraft) -> OrderReceipt:
        response = await self._api.send("POST", "/orders", json=draft.to_payload())
        if not response.ok:
            raise SubmissionError(response.error_message(CREATE_ORDER_FAILED))
        receipt = self._to_receipt(response.body)
        if receipt is None:
            raise SubmissionError(f"{CREATE_ORDER_FAILED}: no order number in response")
        return receipt

    async def get_by_number(self, order_number: str) -> OrderReceipt:
        response = await self._api.send("GET", f"/orders/by-number/{order_number}")
        if response.status_code == 404:
            raise EntityNotFoundError(f"Order {order_number} not found")
        if not response.ok:
            raise GatewayError(
                response.error_message("Failed to fetch order"),
                status_code=response.status_code,
            )
        receipt = self._to_receipt(response.body)
        if receipt is None:
            raise GatewayError("Malformed order response")
        return receipt

    async def list_for_user(self, user_id: str) -> list[OrderReceipt]:
        response = await self._api.send(
            "GET", "/customer-orders", params={"userId": user_id}
        )
        if not response.ok:
            raise GatewayError(
                response.error_message("Failed to fetch orders"),
                status_code=response.status_code,
            )
        receipts = (self._to_receipt(raw) for raw in response.body or [])
        return [r for r in receipts if r is not None]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_receipt(raw: object) -> OrderReceipt | None:
        if not isinstance(raw, dict) or not raw.get("orderNumber"):
            return None
        return OrderReceipt(
            id=str(raw.get("id", "")),
            order_number=str(raw["orderNumber"]),
            status=raw.get("status"),
            total_amount=raw.get("totalAmount"),
            created_at=raw.get("createdAt"),
        )
