"""Domain service: Order Total Calculator.

The one place that turns a list of items and an optional coupon into
money. The cart view and the checkout view both call ``compute`` so the
amounts they show can never disagree.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from storefront.domain.model.cart import CartItem
from storefront.domain.model.coupon import AppliedCoupon
from storefront.domain.model.order import OrderTotals
from storefront.domain.model.value_objects import Money

# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
FREE_SHIPPING_THRESHOLD = Money(Decimal("1000.00"))
FLAT_SHIPPING_FEE = Money(Decimal("100.00"))


def shipping_for(subtotal: Money) -> Money:
    """Flat fee unless the subtotal is strictly above the threshold."""
    return Money.zero() if subtotal > FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING_FEE


def compute(
    items: Iterable[CartItem],
    applied_coupon: AppliedCoupon | None = None,
) -> OrderTotals:
    """Compute subtotal, shipping, discount and total.

    A coupon only counts while its snapshot matches the current subtotal;
    a stale coupon contributes nothing until it has been validated again.
    The discount is clamped so the total never goes below zero.
    """
    subtotal = Money.zero()
    for item in items:
        subtotal = subtotal + item.line_total

    shipping = shipping_for(subtotal)

    discount = Money.zero()
    if applied_coupon is not None and applied_coupon.is_fresh_for(subtotal):
        discount = applied_coupon.discount_amount.capped_at(subtotal + shipping)

    return OrderTotals(
        subtotal=subtotal,
        shipping=shipping,
        discount=discount,
        total=subtotal + shipping - discount,
    )
