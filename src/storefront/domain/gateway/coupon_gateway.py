"""Port for the backend coupon service."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.coupon import Coupon, CouponValidationResult
from storefront.domain.model.value_objects import Money


class CouponGateway(ABC):

    @abstractmethod
    async def validate(
        self, code: str, customer_id: str, order_amount: Money
    ) -> CouponValidationResult:
        """Ask the backend whether ``code`` applies to ``order_amount``.

        Business rejections come back as an invalid result; transport
        failures raise GatewayError.
        """

    @abstractmethod
    async def list_for_customer(self, customer_id: str) -> list[Coupon]:
        """Coupons the customer is currently eligible for."""
