"""JSON-file-backed implementation of CartRepository."""

from __future__ import annotations

import json
from pathlib import Path

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import CartItem
from storefront.domain.repository.cart_repository import CartRepository
from storefront.infrastructure.persistence import cart_item_codec


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- CartRepository interface ---------------------------------------------

    def load(self, owner_key: str) -> list[CartItem]:
        records = self._load_raw().get(owner_key, [])
        return [cart_item_codec.to_domain(raw) for raw in records]

    def save(self, owner_key: str, items: list[CartItem]) -> None:
        carts = self._load_raw()
        if items:
            carts[owner_key] = [cart_item_codec.to_raw(item) for item in items]
        else:
            carts.pop(owner_key, None)
        self._persist_raw(carts)

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> dict[str, list[dict]]:
        try:
            carts = json.loads(self._file_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValidationError(
                f"Saved carts in {self._file_path} are unreadable: {exc}"
            ) from exc
        if not isinstance(carts, dict):
            raise ValidationError(f"Saved carts in {self._file_path} are unreadable")
        return carts

    def _persist_raw(self, carts: dict[str, list[dict]]) -> None:
        self._file_path.write_text(
            json.dumps(carts, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("{}", encoding="utf-8")
