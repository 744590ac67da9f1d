"""Order draft: the payload sent to the backend when checkout completes.

An OrderDraft is assembled only at submission time. Once the backend
accepts it, the storefront keeps nothing but the returned order number.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import CartItem
from storefront.domain.model.checkout import ShippingForm
from storefront.domain.model.coupon import AppliedCoupon
from storefront.domain.model.identity import Identity
from storefront.domain.model.value_objects import Money


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Money
    shipping: Money
    discount: Money
    total: Money

    @property
    def has_free_shipping(self) -> bool:
        return self.shipping.is_zero


@dataclass(frozen=True)
class OrderLine:
    product_id: str
    quantity: int
    unit_price: float
    variant_id: str | None = None
    weight: str | None = None
    custom_name: str | None = None

    @staticmethod
    def from_cart_item(item: CartItem) -> OrderLine:
        return OrderLine(
            product_id=item.id,
            quantity=item.quantity,
            unit_price=item.price.to_number(),
            variant_id=item.variant_id,
            weight=item.weight,
            custom_name=item.custom_name,
        )

    def to_payload(self) -> dict:
        payload: dict = {
            "productId": self.product_id,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
        }
        # Optional fields are omitted rather than sent as null
        if self.variant_id:
            payload["variantId"] = self.variant_id
        if self.weight:
            payload["weight"] = self.weight
        if self.custom_name:
            payload["customName"] = self.custom_name
        return payload


@dataclass(frozen=True)
class OrderDraft:
    user_id: str
    items: list[OrderLine]
    shipping_address: dict
    payment_method: str
    totals: OrderTotals
    coupon_code: str | None = None
    coupon_id: str | None = None

    @staticmethod
    def create(
        identity: Identity,
        items: list[CartItem],
        form: ShippingForm,
        totals: OrderTotals,
        applied_coupon: AppliedCoupon | None = None,
    ) -> OrderDraft:
        """Assemble a draft, validating everything that can be checked locally.

        Fails fast: nothing is built unless identity, items and address
        are all present.
        """
        identity.require_complete()
        if not items:
            raise ValidationError("Your cart is empty")
        form.require_complete()

        return OrderDraft(
            user_id=identity.id.strip(),
            items=[OrderLine.from_cart_item(item) for item in items],
            shipping_address={
                "street": form.address.strip(),
                "city": form.city.strip(),
                "state": form.state,
                "pincode": form.postal_code,
                "country": form.country,
                "firstName": form.first_name.strip(),
                "lastName": form.last_name.strip(),
                "phone": form.phone.strip(),
                "email": form.email.strip(),
            },
            payment_method=form.payment_method,
            totals=totals,
            coupon_code=applied_coupon.coupon.code if applied_coupon else None,
            coupon_id=applied_coupon.coupon.id if applied_coupon else None,
        )

    def to_payload(self) -> dict:
        payload: dict = {
            "userId": self.user_id,
            "items": [line.to_payload() for line in self.items],
            "shippingAddress": dict(self.shipping_address),
            "paymentMethod": self.payment_method,
            "totalAmount": self.totals.total.to_number(),
            "subtotal": self.totals.subtotal.to_number(),
            "shipping": self.totals.shipping.to_number(),
            "discountAmount": self.totals.discount.to_number(),
        }
        if self.coupon_code:
            payload["couponCode"] = self.coupon_code
            if self.coupon_id:
                payload["couponId"] = self.coupon_id
        return payload


@dataclass(frozen=True)
class OrderReceipt:
    """What the backend hands back for an accepted order."""

    id: str
    order_number: str
    status: str | None = None
    total_amount: float | None = None
    created_at: str | None = None
