"""Coupon service backed by ``/coupons`` on the storefront backend."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from storefront.domain.exceptions import GatewayError
from storefront.domain.gateway.coupon_gateway import CouponGateway
from storefront.domain.model.coupon import (
    AppliedCoupon,
    Coupon,
    CouponValidationResult,
    DiscountType,
)
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.http.api_client import ApiClient

logger = logging.getLogger(__name__)

NO_EXPIRY = datetime.max.replace(tzinfo=timezone.utc)


class HttpCouponGateway(CouponGateway):

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    # --- CouponGateway interface ----------------------------------------------

    async def validate(
        self, code: str, customer_id: str, order_amount: Money
    ) -> CouponValidationResult:
        response = await self._api.send(
            "POST",
            "/coupons/validate",
            json={
                "couponCode": code,
                "customerId": customer_id,
                "orderAmount": order_amount.to_number(),
            },
        )

        if response.status_code >= 500:
            raise GatewayError(
                response.error_message("Failed to validate coupon"),
                status_code=response.status_code,
            )
        body = response.body if isinstance(response.body, dict) else {}
        if not response.ok or not body.get("valid"):
            return CouponValidationResult.rejected(
                response.error_message("Invalid coupon code")
            )

        try:
            coupon = self._to_coupon(body["coupon"])
            discount = Money.of(body.get("discountAmount", 0))
        except (KeyError, TypeError, ValueError, InvalidOperation) as exc:
            raise GatewayError(f"Malformed coupon response: {exc}") from exc

        return CouponValidationResult.accepted(
            AppliedCoupon(coupon=coupon, discount_amount=discount, order_amount=order_amount)
        )

    async def list_for_customer(self, customer_id: str) -> list[Coupon]:
        response = await self._api.send("GET", f"/coupons/customer/{customer_id}")
        if not response.ok:
            raise GatewayError(
                response.error_message("Failed to fetch customer coupons"),
                status_code=response.status_code,
            )
        body = response.body if response.body is not None else []
        if not isinstance(body, list):
            raise GatewayError("Malformed coupon list response")
        coupons = []
        for raw in body:
            try:
                coupons.append(self._to_coupon(raw))
            except (AttributeError, KeyError, TypeError, ValueError, InvalidOperation) as exc:
                logger.warning("Skipping malformed coupon %r: %s", raw, exc)
        return coupons

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_coupon(raw: dict) -> Coupon:
        minimum = raw.get("minimumAmount")
        maximum = raw.get("maximumDiscount")
        return Coupon(
            code=raw["code"],
            discount_type=DiscountType(raw["discountType"]),
            discount_value=Decimal(str(raw["discountValue"])),
            valid_until=_parse_datetime(raw.get("validUntil")),
            minimum_amount=Money.of(minimum) if minimum else None,
            maximum_discount=Money.of(maximum) if maximum else None,
            name=raw.get("name"),
            id=raw.get("id"),
            is_active=raw.get("isActive", True),
        )


def _parse_datetime(value: str | None) -> datetime:
    if not value:
        return NO_EXPIRY
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
