"""Cart aggregate — the shopper's mutable list of line items.

A line is identified by its product id together with its variant id
(when present), so the same cake in two weights occupies two lines.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money, Quantity

LineKey = tuple[str, "str | None"]


@dataclass
class CartItem:
    """A single cart line.

    ``price`` is the unit price shown to the shopper when the item was
    added; ``quantity`` is always >= 1 while the line is in a cart.
    """

    id: str
    name: str
    price: Money
    quantity: int = 1
    image: str = ""
    variant_id: str | None = None
    weight: str | None = None
    custom_name: str | None = None

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ValidationError("Cart item id is required")
        Quantity(self.quantity)

    @property
    def key(self) -> LineKey:
        return (self.id, self.variant_id)

    @property
    def line_total(self) -> Money:
        return self.price * self.quantity

    def copy(self) -> CartItem:
        return replace(self)


@dataclass
class Cart:
    """Aggregate root for a shopper's cart.

    Invariants:
    - at most one line per ``(id, variant_id)`` key
    - every line has ``quantity >= 1``; setting a line to zero removes it
    """

    items: list[CartItem] = field(default_factory=list)

    def add(self, item: CartItem) -> None:
        """Merge ``item`` into an existing line, or append it as a new one."""
        existing = self._find(item.key)
        if existing is not None:
            existing.quantity += item.quantity
            return
        self.items.append(item.copy())

    def update_quantity(
        self, item_id: str, quantity: int, variant_id: str | None = None
    ) -> None:
        """Replace a line's quantity.

        A quantity of zero or less removes the line rather than leaving a
        zero-unit line behind.
        """
        existing = self._find((item_id, variant_id))
        if existing is None:
            return
        if quantity <= 0:
            self.remove(item_id, variant_id)
            return
        existing.quantity = Quantity(quantity).value

    def remove(self, item_id: str, variant_id: str | None = None) -> None:
        self.items = [i for i in self.items if i.key != (item_id, variant_id)]

    def clear(self) -> None:
        self.items = []

    # --- Computed properties --------------------------------------------------

    @property
    def count(self) -> int:
        """Total number of units, for the header badge."""
        return sum(item.quantity for item in self.items)

    @property
    def subtotal(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.line_total
        return result

    @property
    def is_empty(self) -> bool:
        return not self.items

    def snapshot(self) -> list[CartItem]:
        """Detached copies of the current lines."""
        return [item.copy() for item in self.items]

    # --- Internal helpers -----------------------------------------------------

    def _find(self, key: LineKey) -> CartItem | None:
        for item in self.items:
            if item.key == key:
                return item
        return None
