"""In-memory coupon service used when the storefront runs offline.

Applies the same rules the backend does: the coupon must exist, be
active and unexpired, meet its minimum order amount and the customer's
usage limit. The discount comes from ``Coupon.discount_for``.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable

from storefront.domain.exceptions import ValidationError
from storefront.domain.gateway.coupon_gateway import CouponGateway
from storefront.domain.model.coupon import (
    AppliedCoupon,
    Coupon,
    CouponValidationResult,
    DiscountType,
)
from storefront.domain.model.value_objects import Money


def default_coupons(now: datetime | None = None) -> list[Coupon]:
    """Seed catalogue for demos and local runs."""
    now = now or datetime.now(timezone.utc)
    next_quarter = now + timedelta(days=90)
    return [
        Coupon(
            code="WELCOME20",
            discount_type=DiscountType.PERCENTAGE,
            discount_value=Decimal("20"),
            minimum_amount=Money.of("500"),
            valid_until=next_quarter,
            name="Welcome offer",
            id="cpn-welcome20",
            usage_limit_per_customer=1,
        ),
        Coupon(
            code="CAKE15",
            discount_type=DiscountType.PERCENTAGE,
            discount_value=Decimal("15"),
            minimum_amount=Money.of("700"),
            maximum_discount=Money.of("300"),
            valid_until=next_quarter,
            name="15% off cakes",
            id="cpn-cake15",
        ),
        Coupon(
            code="FLAT100",
            discount_type=DiscountType.FIXED,
            discount_value=Decimal("100"),
            minimum_amount=Money.of("999"),
            valid_until=next_quarter,
            name="₹100 off orders above ₹999",
            id="cpn-flat100",
        ),
    ]


class InMemoryCouponGateway(CouponGateway):

    def __init__(
        self,
        coupons: list[Coupon] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        if coupons is None:
            coupons = default_coupons()
        self._coupons = {c.code.upper(): c for c in coupons}
        self._usage: dict[tuple[str, str], int] = defaultdict(int)

    # --- CouponGateway interface ----------------------------------------------

    async def validate(
        self, code: str, customer_id: str, order_amount: Money
    ) -> CouponValidationResult:
        coupon = self._coupons.get(code.strip().upper())
        if coupon is None:
            return CouponValidationResult.rejected("Invalid coupon code")
        try:
            coupon.check(order_amount, now=self._clock())
            self._check_usage(coupon, customer_id)
        except ValidationError as exc:
            return CouponValidationResult.rejected(str(exc))
        return CouponValidationResult.accepted(
            AppliedCoupon(
                coupon=coupon,
                discount_amount=coupon.discount_for(order_amount),
                order_amount=order_amount,
            )
        )

    async def list_for_customer(self, customer_id: str) -> list[Coupon]:
        now = self._clock()
        eligible = []
        for coupon in self._coupons.values():
            if not coupon.is_active or now > coupon.valid_until:
                continue
            try:
                self._check_usage(coupon, customer_id)
            except ValidationError:
                continue
            eligible.append(coupon)
        return eligible

    # --- Usage tracking -------------------------------------------------------

    def record_usage(self, code: str, customer_id: str) -> None:
        self._usage[(code.upper(), customer_id)] += 1

    def _check_usage(self, coupon: Coupon, customer_id: str) -> None:
        limit = coupon.usage_limit_per_customer
        if limit is not None and self._usage[(coupon.code.upper(), customer_id)] >= limit:
            raise ValidationError("You have already used this coupon")
