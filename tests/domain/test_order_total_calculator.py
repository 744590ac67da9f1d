"""Unit tests for the shared order total calculator."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from storefront.domain.model.cart import CartItem
from storefront.domain.model.coupon import AppliedCoupon, Coupon, DiscountType
from storefront.domain.model.value_objects import Money
from storefront.domain.service.order_total_calculator import compute, shipping_for


def _item(item_id: str, price: str, qty: int = 1) -> CartItem:
    return CartItem(id=item_id, name=item_id, price=Money.of(price), quantity=qty)


def _applied(discount: str, order_amount: str) -> AppliedCoupon:
    coupon = Coupon(
        code="TEST",
        discount_type=DiscountType.FIXED,
        discount_value=Decimal(discount),
        valid_until=datetime.now(timezone.utc) + timedelta(days=1),
    )
    return AppliedCoupon(
        coupon=coupon,
        discount_amount=Money.of(discount),
        order_amount=Money.of(order_amount),
    )


class TestShipping:

    def test_threshold_itself_pays_shipping(self):
        assert shipping_for(Money.of("1000.00")) == Money.of("100")

    def test_just_above_threshold_ships_free(self):
        assert shipping_for(Money.of("1000.01")) == Money.zero()

    def test_small_order_pays_flat_fee(self):
        assert shipping_for(Money.of("250")) == Money.of("100")


class TestCompute:

    def test_no_coupon(self):
        totals = compute([_item("p1", "599"), _item("p2", "899")])
        assert totals.subtotal == Money.of("1498")
        assert totals.shipping == Money.zero()
        assert totals.discount == Money.zero()
        assert totals.total == Money.of("1498")

    def test_total_identity_holds(self):
        items = [_item("p1", "300", qty=2)]
        totals = compute(items, _applied("50", "600"))
        assert totals.total == totals.subtotal + totals.shipping - totals.discount
        assert totals.total == Money.of("650")

    def test_identical_inputs_give_identical_totals(self):
        items = [_item("p1", "450", qty=2), _item("p2", "125")]
        coupon = _applied("75", "1025")
        assert compute(items, coupon) == compute([i.copy() for i in items], coupon)

    def test_cake15_scenario(self):
        coupon = Coupon(
            code="CAKE15",
            discount_type=DiscountType.PERCENTAGE,
            discount_value=Decimal("15"),
            minimum_amount=Money.of("700"),
            maximum_discount=Money.of("300"),
            valid_until=datetime.now(timezone.utc) + timedelta(days=1),
        )
        subtotal = Money.of("1498")
        applied = AppliedCoupon(coupon, coupon.discount_for(subtotal), subtotal)

        totals = compute([_item("p1", "599"), _item("p2", "899")], applied)

        assert totals.discount == Money.of("224.70")
        assert totals.total == Money.of("1273.30")

    def test_stale_coupon_grants_nothing(self):
        totals = compute([_item("p1", "400")], _applied("120", "600"))
        assert totals.discount == Money.zero()
        assert totals.total == Money.of("500")

    def test_discount_never_drives_total_negative(self):
        totals = compute([_item("p1", "50")], _applied("500", "50"))
        assert totals.discount == Money.of("150")
        assert totals.total == Money.zero()

    def test_empty_items(self):
        totals = compute([])
        assert totals.subtotal == Money.zero()
        assert totals.shipping == Money.of("100")
