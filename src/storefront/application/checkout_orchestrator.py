"""Application service: Checkout Orchestrator.

Drives one checkout session through its steps:

    COLLECTING_SHIPPING -> COLLECTING_PAYMENT -> SUBMITTING -> SUCCEEDED

A failed submission drops back to COLLECTING_PAYMENT with ``error`` set
and the form untouched, so the shopper can simply try again.

The items being bought are chosen once, in ``start()``: a staged buy-now
item wins (and is erased as it is read), otherwise the cart's lines are
snapshotted. Only a cart checkout clears the cart when the order is
accepted.

Every failure is turned into a message on the orchestrator; nothing
raised by the backend escapes ``submit()``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from storefront.application.cart_store import CartStore
from storefront.application.coupon_validator import CouponValidator
from storefront.domain.exceptions import DomainException, IdentityError, ValidationError
from storefront.domain.gateway.order_gateway import OrderGateway
from storefront.domain.model.cart import CartItem
from storefront.domain.model.checkout import CheckoutStep, ShippingForm
from storefront.domain.model.coupon import AppliedCoupon, CouponValidationResult
from storefront.domain.model.identity import Identity
from storefront.domain.model.order import OrderDraft, OrderTotals
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.buy_now_repository import BuyNowRepository
from storefront.domain.service import order_total_calculator
from storefront.domain.service.region_gate import RegionGate

logger = logging.getLogger(__name__)

ORDER_FAILED_MESSAGE = "Failed to place order. Please try again."
SIGN_IN_AGAIN_MESSAGE = "Your session looks incomplete. Please sign in again."
COUPON_LOCKED_MESSAGE = "The coupon can no longer be changed for this order."

_EDITABLE_STEPS = (CheckoutStep.COLLECTING_SHIPPING, CheckoutStep.COLLECTING_PAYMENT)


class CheckoutFlow(Enum):
    CART = "cart"
    BUY_NOW = "buy_now"


@dataclass(frozen=True)
class SubmissionOutcome:
    succeeded: bool
    order_number: str | None = None
    redirect_to: str | None = None
    error: str | None = None
    fatal: bool = False

    @staticmethod
    def failed(error: str, fatal: bool = False) -> SubmissionOutcome:
        return SubmissionOutcome(succeeded=False, error=error, fatal=fatal)


def confirmation_path(order_number: str) -> str:
    return f"/order-details/{order_number}"


class CheckoutOrchestrator:

    def __init__(
        self,
        cart_store: CartStore,
        buy_now_repo: BuyNowRepository,
        coupon_validator: CouponValidator,
        order_gateway: OrderGateway,
        identity: Identity | None,
        region_gate: RegionGate | None = None,
    ) -> None:
        self._cart_store = cart_store
        self._buy_now_repo = buy_now_repo
        self._coupon_validator = coupon_validator
        self._order_gateway = order_gateway
        self._identity = identity
        self._region_gate = region_gate or RegionGate()

        self.form = ShippingForm()
        self.error = ""
        self.coupon_error = ""
        self._step = CheckoutStep.COLLECTING_SHIPPING
        self._flow: CheckoutFlow | None = None
        self._items: list[CartItem] = []
        self._applied_coupon: AppliedCoupon | None = None
        self._is_submitting = False
        self._closed = False

    # --- Session lifecycle ----------------------------------------------------

    def start(self) -> None:
        """Pick the item source and seed the form. Runs once per session."""
        if self._flow is not None:
            raise ValidationError("Checkout has already started")

        buy_now_item = self._buy_now_repo.take()
        if buy_now_item is not None:
            self._flow = CheckoutFlow.BUY_NOW
            self._items = [buy_now_item]
        else:
            self._flow = CheckoutFlow.CART
            self._items = self._cart_store.items
            cart_coupon = self._cart_store.applied_coupon
            if cart_coupon is not None and cart_coupon.is_fresh_for(self._subtotal()):
                self._applied_coupon = cart_coupon

        if self._identity is not None:
            self.form.first_name = self._identity.first_name
            self.form.last_name = self._identity.last_name
            self.form.email = self._identity.email

        logger.info(
            "Checkout started (%s flow, %d line(s))", self._flow.value, len(self._items)
        )

    def close(self) -> None:
        """Abandon the session; late backend responses are ignored."""
        self._closed = True

    # --- Reads ----------------------------------------------------------------

    @property
    def step(self) -> CheckoutStep:
        return self._step

    @property
    def flow(self) -> CheckoutFlow | None:
        return self._flow

    @property
    def current_items(self) -> list[CartItem]:
        return [item.copy() for item in self._items]

    @property
    def applied_coupon(self) -> AppliedCoupon | None:
        return self._applied_coupon

    @property
    def is_submitting(self) -> bool:
        return self._is_submitting

    @property
    def totals(self) -> OrderTotals:
        return order_total_calculator.compute(self._items, self._applied_coupon)

    # --- Step 1: shipping -----------------------------------------------------

    def update_shipping(self, **values: str) -> None:
        self.form.update(**values)

    def set_postal_code(self, postal_code: str) -> None:
        self.form.set_postal_code(postal_code, self._region_gate.city_for)

    def continue_to_payment(self) -> bool:
        """Advance to the payment step if the address is complete and deliverable."""
        if self._step is not CheckoutStep.COLLECTING_SHIPPING:
            return self._step is CheckoutStep.COLLECTING_PAYMENT
        try:
            self.form.require_complete()
        except ValidationError as exc:
            self.error = str(exc)
            return False
        self.error = ""
        self._step = CheckoutStep.COLLECTING_PAYMENT
        return True

    def back_to_shipping(self) -> None:
        if self._step is CheckoutStep.COLLECTING_PAYMENT:
            self._step = CheckoutStep.COLLECTING_SHIPPING

    # --- Step 2: payment and coupon -------------------------------------------

    def select_payment_method(self, method: str) -> bool:
        try:
            self.form.select_payment_method(method)
        except ValidationError as exc:
            self.error = str(exc)
            return False
        return True

    async def apply_coupon(self, code: str) -> CouponValidationResult:
        """Validate ``code`` against the current subtotal.

        Entering a new code replaces whatever coupon was applied before,
        even if the new one is rejected. Once the order is being placed the
        coupon is frozen and the request is rejected.
        """
        if self._step not in _EDITABLE_STEPS:
            return CouponValidationResult.rejected(COUPON_LOCKED_MESSAGE)
        self._applied_coupon = None
        customer_id = self._identity.id if self._identity is not None else ""
        result = await self._coupon_validator.validate(code, customer_id, self._subtotal())
        if self._closed:
            return result
        if self._step not in _EDITABLE_STEPS:
            logger.info("Discarding coupon %s validated after submission started", code)
            return CouponValidationResult.rejected(COUPON_LOCKED_MESSAGE)
        if result.valid and result.applied is not None:
            self._applied_coupon = result.applied
            self.coupon_error = ""
        else:
            self.coupon_error = result.error or "Invalid coupon code"
        return result

    def remove_coupon(self) -> None:
        if self._step not in _EDITABLE_STEPS:
            return
        self._applied_coupon = None
        self.coupon_error = ""

    # --- Submission -----------------------------------------------------------

    async def submit(self) -> SubmissionOutcome | None:
        """Place the order.

        Returns None when the call is ignored: another submission is
        already in flight, or the session was closed before the backend
        answered.
        """
        if self._is_submitting or self._closed:
            logger.debug("Ignoring submit: submission already in flight or session closed")
            return None
        if self._step is not CheckoutStep.COLLECTING_PAYMENT:
            return self._fail("Please complete your shipping details first")
        if self.form.postal_code_error:
            return self._fail(self.form.postal_code_error)

        self._is_submitting = True
        try:
            draft = self._build_draft()
        except IdentityError as exc:
            self._is_submitting = False
            logger.error("Refusing to submit order: %s", exc)
            return self._fail(str(exc), fatal=True)
        except ValidationError as exc:
            self._is_submitting = False
            return self._fail(str(exc))

        self._step = CheckoutStep.SUBMITTING
        self.error = ""
        logger.debug("Submitting order payload: %s", draft.to_payload())
        try:
            receipt = await self._order_gateway.create_order(draft)
        except DomainException as exc:
            return self._submission_failed(str(exc))
        except Exception:
            logger.exception("Unexpected error while submitting order")
            return self._submission_failed(ORDER_FAILED_MESSAGE)
        finally:
            self._is_submitting = False

        if self._closed:
            logger.info("Order %s accepted after checkout was closed", receipt.order_number)
            return None

        if self._flow is CheckoutFlow.CART:
            self._cart_store.clear()
        self._applied_coupon = None
        self._step = CheckoutStep.SUCCEEDED
        logger.info("Order %s placed (%s flow)", receipt.order_number, self._flow.value)
        return SubmissionOutcome(
            succeeded=True,
            order_number=receipt.order_number,
            redirect_to=confirmation_path(receipt.order_number),
        )

    # --- Internal helpers -----------------------------------------------------

    def _subtotal(self) -> Money:
        return order_total_calculator.compute(self._items).subtotal

    def _build_draft(self) -> OrderDraft:
        if self._identity is None:
            raise IdentityError(SIGN_IN_AGAIN_MESSAGE)
        return OrderDraft.create(
            identity=self._identity,
            items=self._items,
            form=self.form,
            totals=self.totals,
            applied_coupon=self._applied_coupon,
        )

    def _fail(self, message: str, fatal: bool = False) -> SubmissionOutcome:
        self.error = message
        return SubmissionOutcome.failed(message, fatal=fatal)

    def _submission_failed(self, message: str) -> SubmissionOutcome | None:
        if self._closed:
            logger.info("Discarding order failure after checkout was closed: %s", message)
            return None
        logger.warning("Order submission failed: %s", message)
        self._step = CheckoutStep.COLLECTING_PAYMENT
        return self._fail(message or ORDER_FAILED_MESSAGE)
