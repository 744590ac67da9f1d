"""In-memory fakes for testing.

These implement the same abstract interfaces as the JSON repositories
and HTTP gateways but keep everything in memory. No file I/O, no network.
"""

from __future__ import annotations

import asyncio

from storefront.domain.exceptions import GatewayError
from storefront.domain.gateway.coupon_gateway import CouponGateway
from storefront.domain.gateway.order_gateway import OrderGateway
from storefront.domain.model.cart import CartItem
from storefront.domain.model.coupon import Coupon, CouponValidationResult
from storefront.domain.model.order import OrderDraft, OrderReceipt
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.buy_now_repository import BuyNowRepository
from storefront.domain.repository.cart_repository import CartRepository


class FakeCartRepository(CartRepository):

    def __init__(self, carts: dict[str, list[CartItem]] | None = None) -> None:
        self._store: dict[str, list[CartItem]] = dict(carts or {})
        self.save_count = 0

    def load(self, owner_key: str) -> list[CartItem]:
        return [item.copy() for item in self._store.get(owner_key, [])]

    def save(self, owner_key: str, items: list[CartItem]) -> None:
        self._store[owner_key] = [item.copy() for item in items]
        self.save_count += 1


class FakeBuyNowRepository(BuyNowRepository):

    def __init__(self, item: CartItem | None = None) -> None:
        self._item = item

    def stage(self, item: CartItem) -> None:
        self._item = item

    def take(self) -> CartItem | None:
        item, self._item = self._item, None
        return item


class FakeCouponGateway(CouponGateway):
    """Delegates to a rule function, or raises to simulate an outage.

    ``release`` holds a validation in flight until the test sets it.
    """

    def __init__(
        self,
        rules=None,
        coupons: list[Coupon] | None = None,
        error: str | None = None,
        release: asyncio.Event | None = None,
    ) -> None:
        self._rules = rules
        self.release = release
        self._coupons = coupons or []
        self._error = error
        self.calls: list[tuple[str, str, Money]] = []

    async def validate(
        self, code: str, customer_id: str, order_amount: Money
    ) -> CouponValidationResult:
        self.calls.append((code, customer_id, order_amount))
        if self.release is not None:
            await self.release.wait()
        if self._error:
            raise GatewayError(self._error)
        return self._rules(code, customer_id, order_amount)

    async def list_for_customer(self, customer_id: str) -> list[Coupon]:
        if self._error:
            raise GatewayError(self._error)
        return list(self._coupons)


class FakeOrderGateway(OrderGateway):
    """Records submitted drafts.

    ``release`` lets a test hold a submission in flight; ``fail_with``
    makes the next calls raise GatewayError.
    """

    def __init__(self, release: asyncio.Event | None = None, fail_with: str | None = None) -> None:
        self.release = release
        self.fail_with = fail_with
        self.drafts: list[OrderDraft] = []
        self._next_number = 100001

    async def create_order(self, draft: OrderDraft) -> OrderReceipt:
        self.drafts.append(draft)
        if self.release is not None:
            await self.release.wait()
        if self.fail_with:
            raise GatewayError(self.fail_with, status_code=500)
        receipt = OrderReceipt(id=f"ord-{self._next_number}", order_number=f"MF{self._next_number}")
        self._next_number += 1
        return receipt

    async def get_by_number(self, order_number: str) -> OrderReceipt:
        raise NotImplementedError

    async def list_for_user(self, user_id: str) -> list[OrderReceipt]:
        return []
