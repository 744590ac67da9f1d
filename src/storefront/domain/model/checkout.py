"""Checkout form state and the steps of the checkout flow."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Callable

from storefront.domain.exceptions import ValidationError

DELIVERY_STATE = "Odisha"
DELIVERY_COUNTRY = "India"


class CheckoutStep(Enum):
    COLLECTING_SHIPPING = "COLLECTING_SHIPPING"
    COLLECTING_PAYMENT = "COLLECTING_PAYMENT"
    SUBMITTING = "SUBMITTING"
    SUCCEEDED = "SUCCEEDED"


@dataclass(frozen=True)
class DeliveryCity:
    name: str
    district: str
    postal_codes: tuple[str, ...]


PAYMENT_METHODS = ("card", "upi", "cod")
DEFAULT_PAYMENT_METHOD = "cod"

REQUIRED_SHIPPING_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "phone",
    "address",
    "city",
    "state",
    "postal_code",
    "country",
)

# Fields with their own setters, or fixed by the delivery region
_GATED_FIELDS = {"postal_code", "postal_code_error", "payment_method", "state", "country"}

_FIELD_LABELS = {
    "first_name": "First name",
    "last_name": "Last name",
    "email": "Email",
    "phone": "Phone number",
    "address": "Street address",
    "city": "City",
    "state": "State",
    "postal_code": "Postal code",
    "country": "Country",
}


@dataclass
class ShippingForm:
    """Everything the shopper types on the shipping and payment steps.

    ``state`` and ``country`` are fixed by the delivery region.
    """

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = DELIVERY_STATE
    postal_code: str = ""
    country: str = DELIVERY_COUNTRY
    payment_method: str = DEFAULT_PAYMENT_METHOD
    postal_code_error: str = ""

    def update(self, **values: str) -> None:
        known = {f.name for f in fields(self)} - _GATED_FIELDS
        for name, value in values.items():
            if name not in known:
                raise ValidationError(f"Unknown shipping field: {name}")
            setattr(self, name, value)

    def set_postal_code(
        self, postal_code: str, city_for: Callable[[str], DeliveryCity]
    ) -> None:
        """Record a postal code, auto-filling the city when it is deliverable."""
        self.postal_code = (postal_code or "").strip()
        try:
            city = city_for(self.postal_code)
        except ValidationError as exc:
            self.postal_code_error = str(exc)
            return
        self.postal_code_error = ""
        self.city = city.name

    def missing_fields(self) -> list[str]:
        return [
            name for name in REQUIRED_SHIPPING_FIELDS
            if not str(getattr(self, name) or "").strip()
        ]

    def require_complete(self) -> None:
        """Raise ValidationError if a required field is blank or the postal code was rejected."""
        if self.postal_code_error:
            raise ValidationError(self.postal_code_error)
        missing = self.missing_fields()
        if missing:
            labels = ", ".join(_FIELD_LABELS[name] for name in missing)
            raise ValidationError(f"Please fill in all required fields: {labels}")

    def select_payment_method(self, method: str) -> None:
        if method not in PAYMENT_METHODS:
            raise ValidationError(
                f"Unsupported payment method '{method}' "
                f"(choose one of: {', '.join(PAYMENT_METHODS)})"
            )
        self.payment_method = method
