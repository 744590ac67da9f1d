"""JSON-file-backed one-shot store for the buy-now item."""

from __future__ import annotations

import json
from pathlib import Path

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import CartItem
from storefront.domain.repository.buy_now_repository import BuyNowRepository
from storefront.infrastructure.persistence import cart_item_codec


class JsonBuyNowRepository(BuyNowRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    def stage(self, item: CartItem) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._file_path.write_text(
            json.dumps(cart_item_codec.to_raw(item), indent=2) + "\n",
            encoding="utf-8",
        )

    def take(self) -> CartItem | None:
        if not self._file_path.exists():
            return None
        try:
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValidationError(f"The buy-now item is unreadable: {exc}") from exc
        finally:
            # Erased whether or not it parses, so it is never replayed
            self._file_path.unlink(missing_ok=True)
        return cart_item_codec.to_domain(raw)
