"""Coupon model: backend-owned discount rules and their applied snapshots.

The storefront never mutates a Coupon. It asks the backend to validate a
code against an order amount and holds the answer as an AppliedCoupon,
a snapshot that is only good for the amount it was computed on.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money


class DiscountType(Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED = "FIXED"


@dataclass(frozen=True)
class Coupon:
    """A discount rule identified by ``code``.

    ``maximum_discount`` caps percentage coupons; ``usage_limit_per_customer``
    is only consulted by the offline catalogue, the real backend keeps
    its own usage records.
    """

    code: str
    discount_type: DiscountType
    discount_value: Decimal
    valid_until: datetime
    minimum_amount: Money | None = None
    maximum_discount: Money | None = None
    name: str | None = None
    id: str | None = None
    is_active: bool = True
    usage_limit_per_customer: int | None = None

    def check(self, order_amount: Money, now: datetime | None = None) -> None:
        """Raise ValidationError unless this coupon may be used for ``order_amount``."""
        now = now or datetime.now(timezone.utc)
        if not self.is_active:
            raise ValidationError("This coupon is no longer active")
        if now > self.valid_until:
            raise ValidationError("This coupon has expired")
        if self.minimum_amount is not None and order_amount < self.minimum_amount:
            raise ValidationError(
                f"Minimum order amount of {self.minimum_amount} required for this coupon"
            )

    def discount_for(self, order_amount: Money) -> Money:
        """Discount this coupon grants on ``order_amount``.

        Never exceeds the order amount, whatever the coupon type.
        """
        if self.discount_type is DiscountType.PERCENTAGE:
            discount = order_amount.percent(self.discount_value)
            if self.maximum_discount is not None:
                discount = discount.capped_at(self.maximum_discount)
        else:
            discount = Money.of(self.discount_value)
        return discount.capped_at(order_amount)

    @property
    def label(self) -> str:
        if self.discount_type is DiscountType.PERCENTAGE:
            return f"{self.discount_value}% OFF"
        return f"₹{self.discount_value} OFF"


@dataclass(frozen=True)
class AppliedCoupon:
    """A validated coupon together with the discount it granted.

    ``order_amount`` records the subtotal the discount was computed on.
    Once the subtotal moves, the snapshot is stale and must be validated
    again before its discount is trusted.
    """

    coupon: Coupon
    discount_amount: Money
    order_amount: Money

    def is_fresh_for(self, order_amount: Money) -> bool:
        return self.order_amount == order_amount

    @property
    def code(self) -> str:
        return self.coupon.code


@dataclass(frozen=True)
class CouponValidationResult:
    """Outcome of a validation request: either ``applied`` or ``error``."""

    valid: bool
    applied: AppliedCoupon | None = None
    error: str | None = None

    @staticmethod
    def accepted(applied: AppliedCoupon) -> CouponValidationResult:
        return CouponValidationResult(valid=True, applied=applied)

    @staticmethod
    def rejected(error: str) -> CouponValidationResult:
        return CouponValidationResult(valid=False, error=error)
