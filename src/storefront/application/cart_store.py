"""Application service: Cart Store.

The cart context shared by the cart view and the checkout view. It owns
the Cart aggregate for the current shopper, persists it after every
mutation, and holds at most one applied coupon whose discount is a
snapshot of the subtotal it was validated against.

Lifecycle: ``hydrate`` once per session, mutate freely, and every
mutation writes the full line list back through the repository.
"""

from __future__ import annotations

import logging

from storefront.application.coupon_validator import CouponValidator
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import Cart, CartItem
from storefront.domain.model.coupon import AppliedCoupon, CouponValidationResult
from storefront.domain.model.identity import Identity, owner_key_for
from storefront.domain.model.order import OrderTotals
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.service import order_total_calculator

logger = logging.getLogger(__name__)

CART_CHANGED_MESSAGE = (
    "Your cart changed while the coupon was being checked. Please apply it again."
)


class CartStore:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo
        self._cart = Cart()
        self._owner_key = owner_key_for(None)
        self._applied_coupon: AppliedCoupon | None = None
        self.stale_coupon_code: str | None = None

    def hydrate(self, identity: Identity | None = None) -> None:
        """Load the saved cart for ``identity``, or the guest cart."""
        self._owner_key = owner_key_for(identity)
        self._cart = Cart(items=self._cart_repo.load(self._owner_key))
        self._applied_coupon = None
        self.stale_coupon_code = None
        logger.debug("Hydrated cart %s with %d line(s)", self._owner_key, len(self._cart.items))

    # --- Reads ----------------------------------------------------------------

    @property
    def owner_key(self) -> str:
        return self._owner_key

    @property
    def items(self) -> list[CartItem]:
        return self._cart.snapshot()

    @property
    def count(self) -> int:
        return self._cart.count

    @property
    def is_empty(self) -> bool:
        return self._cart.is_empty

    @property
    def applied_coupon(self) -> AppliedCoupon | None:
        return self._applied_coupon

    @property
    def totals(self) -> OrderTotals:
        """Recomputed on every read, so it always reflects the latest mutation."""
        return order_total_calculator.compute(self._cart.items, self._applied_coupon)

    # --- Mutations ------------------------------------------------------------

    def add_item(self, item: CartItem) -> None:
        before = self._cart.subtotal
        self._cart.add(item)
        self._after_mutation(before)

    def update_quantity(
        self, item_id: str, quantity: int, variant_id: str | None = None
    ) -> None:
        before = self._cart.subtotal
        self._cart.update_quantity(item_id, quantity, variant_id)
        self._after_mutation(before)

    def remove_item(self, item_id: str, variant_id: str | None = None) -> None:
        before = self._cart.subtotal
        self._cart.remove(item_id, variant_id)
        self._after_mutation(before)

    def clear(self) -> None:
        self._cart.clear()
        self._applied_coupon = None
        self.stale_coupon_code = None
        self._persist()

    # --- Coupon ---------------------------------------------------------------

    def attach_coupon(self, applied: AppliedCoupon) -> None:
        """Hold a coupon validated elsewhere; it must match the current subtotal."""
        if not applied.is_fresh_for(self._cart.subtotal):
            raise ValidationError(
                f"Coupon {applied.code} was validated for a different cart total"
            )
        self._applied_coupon = applied
        self.stale_coupon_code = None

    def remove_coupon(self) -> None:
        self._applied_coupon = None
        self.stale_coupon_code = None

    async def apply_coupon(
        self, validator: CouponValidator, code: str, customer_id: str
    ) -> CouponValidationResult:
        """Validate ``code`` against the current subtotal and hold it if accepted.

        If the cart changes while the backend is answering, the discount no
        longer matches: the code is kept in ``stale_coupon_code`` and the
        result is turned into a rejection.
        """
        result = await validator.validate(code, customer_id, self._cart.subtotal)
        if not result.valid or result.applied is None:
            return result
        if not result.applied.is_fresh_for(self._cart.subtotal):
            logger.info("Cart changed while coupon %s was being validated", code)
            self.stale_coupon_code = result.applied.code
            return CouponValidationResult.rejected(CART_CHANGED_MESSAGE)
        self.attach_coupon(result.applied)
        return result

    async def reapply_coupon(
        self, validator: CouponValidator, customer_id: str
    ) -> CouponValidationResult | None:
        """Validate a coupon dropped by a cart edit against the new subtotal.

        Returns None when there is nothing to re-validate.
        """
        code = self.stale_coupon_code
        if not code:
            return None
        self.stale_coupon_code = None
        result = await self.apply_coupon(validator, code, customer_id)
        if not result.valid:
            logger.info("Coupon %s no longer applies: %s", code, result.error)
        return result

    # --- Internal helpers -----------------------------------------------------

    def _after_mutation(self, subtotal_before: Money) -> None:
        if self._applied_coupon is not None and self._cart.subtotal != subtotal_before:
            logger.info(
                "Cart total changed from %s to %s; dropping coupon %s until revalidated",
                subtotal_before,
                self._cart.subtotal,
                self._applied_coupon.code,
            )
            self.stale_coupon_code = self._applied_coupon.code
            self._applied_coupon = None
        self._persist()

    def _persist(self) -> None:
        self._cart_repo.save(self._owner_key, self._cart.snapshot())
