"""Serialization of CartItem to and from plain JSON records."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import CartItem
from storefront.domain.model.value_objects import Money


def to_raw(item: CartItem) -> dict:
    return {
        "id": item.id,
        "name": item.name,
        "price": str(item.price.amount),
        "currency": item.price.currency,
        "quantity": item.quantity,
        "image": item.image,
        "variantId": item.variant_id,
        "weight": item.weight,
        "customName": item.custom_name,
    }


def to_domain(raw: dict) -> CartItem:
    try:
        return CartItem(
            id=raw["id"],
            name=raw["name"],
            price=Money(Decimal(str(raw["price"])), raw.get("currency", "INR")),
            quantity=raw.get("quantity", 1),
            image=raw.get("image") or "",
            variant_id=raw.get("variantId"),
            weight=raw.get("weight"),
            custom_name=raw.get("customName"),
        )
    except (KeyError, TypeError, InvalidOperation) as exc:
        raise ValidationError(f"Unreadable cart record {raw!r}") from exc
