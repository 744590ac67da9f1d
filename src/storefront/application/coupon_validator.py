"""Application service: Coupon Validator.

Every attach goes through the backend; the storefront never reuses a
discount computed for a different amount. Whatever goes wrong is
returned as a rejected result with a message fit to show the shopper.
"""

from __future__ import annotations

import logging

from storefront.domain.exceptions import DomainException
from storefront.domain.gateway.coupon_gateway import CouponGateway
from storefront.domain.model.coupon import (
    AppliedCoupon,
    Coupon,
    CouponValidationResult,
)
from storefront.domain.model.value_objects import Money

logger = logging.getLogger(__name__)

VALIDATION_FAILED_MESSAGE = "Failed to validate coupon. Please try again."


class CouponValidator:

    def __init__(self, coupon_gateway: CouponGateway) -> None:
        self._coupon_gateway = coupon_gateway

    async def validate(
        self, code: str, customer_id: str, order_amount: Money
    ) -> CouponValidationResult:
        """Validate ``code`` for ``customer_id`` on ``order_amount``.

        Blank input is rejected locally without calling the backend.
        """
        code = (code or "").strip()
        if not code:
            return CouponValidationResult.rejected("Please enter a coupon code")
        if not (customer_id or "").strip():
            return CouponValidationResult.rejected("Please sign in to apply a coupon")

        try:
            result = await self._coupon_gateway.validate(code, customer_id, order_amount)
        except DomainException as exc:
            logger.warning("Coupon validation for %s failed: %s", code, exc)
            return CouponValidationResult.rejected(VALIDATION_FAILED_MESSAGE)

        if not result.valid or result.applied is None:
            return CouponValidationResult.rejected(result.error or "Invalid coupon code")

        logger.info(
            "Coupon %s accepted on %s: discount %s",
            code,
            order_amount,
            result.applied.discount_amount,
        )
        return CouponValidationResult.accepted(
            AppliedCoupon(
                coupon=result.applied.coupon,
                discount_amount=result.applied.discount_amount.capped_at(order_amount),
                order_amount=order_amount,
            )
        )

    async def available_coupons(self, customer_id: str) -> list[Coupon]:
        """Coupons to offer the shopper; an unreachable backend means none."""
        if not (customer_id or "").strip():
            return []
        try:
            return await self._coupon_gateway.list_for_customer(customer_id)
        except DomainException as exc:
            logger.warning("Could not load coupons for %s: %s", customer_id, exc)
            return []
