"""JSON-file-backed order service used when the storefront runs offline.

Order numbers follow the backend's ``MF100001``, ``MF100002``, ...
sequence.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path

from storefront.domain.exceptions import EntityNotFoundError, GatewayError
from storefront.domain.gateway.order_gateway import OrderGateway
from storefront.domain.model.order import OrderDraft, OrderReceipt
from storefront.infrastructure.offline.coupon_catalogue import InMemoryCouponGateway

ORDER_NUMBER_PREFIX = "MF"
FIRST_ORDER_NUMBER = 100001


class JsonOrderGateway(OrderGateway):

    def __init__(
        self,
        file_path: Path,
        coupon_catalogue: InMemoryCouponGateway | None = None,
    ) -> None:
        self._file_path = file_path
        self._coupon_catalogue = coupon_catalogue
        self._ensure_file()

    # --- OrderGateway interface -----------------------------------------------

    async def create_order(self, draft: OrderDraft) -> OrderReceipt:
        orders = self._load_raw()
        record = draft.to_payload()
        record.update(
            {
                "id": uuid.uuid4().hex,
                "orderNumber": self._next_order_number(orders),
                "status": "PENDING",
                "createdAt": datetime.now(timezone.utc).isoformat(),
            }
        )
        orders.append(record)
        self._persist_raw(orders)

        if self._coupon_catalogue is not None and draft.coupon_code:
            self._coupon_catalogue.record_usage(draft.coupon_code, draft.user_id)
        return self._to_receipt(record)

    async def get_by_number(self, order_number: str) -> OrderReceipt:
        for raw in self._load_raw():
            if raw["orderNumber"] == order_number:
                return self._to_receipt(raw)
        raise EntityNotFoundError(f"Order {order_number} not found")

    async def list_for_user(self, user_id: str) -> list[OrderReceipt]:
        mine = [raw for raw in self._load_raw() if raw["userId"] == user_id]
        return [self._to_receipt(raw) for raw in reversed(mine)]

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _next_order_number(orders: list[dict]) -> str:
        numbers = [
            int(raw["orderNumber"][len(ORDER_NUMBER_PREFIX):])
            for raw in orders
            if raw.get("orderNumber", "").startswith(ORDER_NUMBER_PREFIX)
            and raw["orderNumber"][len(ORDER_NUMBER_PREFIX):].isdigit()
        ]
        next_number = max(numbers) + 1 if numbers else FIRST_ORDER_NUMBER
        return f"{ORDER_NUMBER_PREFIX}{next_number}"

    @staticmethod
    def _to_receipt(raw: dict) -> OrderReceipt:
        return OrderReceipt(
            id=raw["id"],
            order_number=raw["orderNumber"],
            status=raw.get("status"),
            total_amount=raw.get("totalAmount"),
            created_at=raw.get("createdAt"),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        try:
            return json.loads(self._file_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise GatewayError(f"Order log {self._file_path} is unreadable: {exc}") from exc

    def _persist_raw(self, orders: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(orders, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
