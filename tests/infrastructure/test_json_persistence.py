"""Tests for the JSON-file cart and buy-now repositories."""

import json

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import CartItem
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.persistence.json_buy_now_repository import (
    JsonBuyNowRepository,
)
from storefront.infrastructure.persistence.json_cart_repository import (
    JsonCartRepository,
)


def _cake() -> CartItem:
    return CartItem(
        id="p2",
        name="Red Velvet",
        price=Money.of("899.50"),
        quantity=2,
        variant_id="v-1kg",
        weight="1kg",
        custom_name="Happy Birthday Ria",
    )


class TestJsonCartRepository:

    def test_creates_empty_file(self, tmp_path):
        path = tmp_path / "data" / "carts.json"
        JsonCartRepository(path)
        assert json.loads(path.read_text()) == {}

    def test_save_and_load(self, tmp_path):
        repo = JsonCartRepository(tmp_path / "carts.json")
        repo.save("user:u1", [_cake()])

        loaded = JsonCartRepository(tmp_path / "carts.json").load("user:u1")
        assert loaded == [_cake()]

    def test_carts_are_keyed_by_owner(self, tmp_path):
        repo = JsonCartRepository(tmp_path / "carts.json")
        repo.save("user:u1", [_cake()])
        assert repo.load("guest") == []

    def test_empty_cart_removes_entry(self, tmp_path):
        path = tmp_path / "carts.json"
        repo = JsonCartRepository(path)
        repo.save("user:u1", [_cake()])
        repo.save("user:u1", [])
        assert json.loads(path.read_text()) == {}

    def test_corrupt_file_raises_domain_error(self, tmp_path):
        path = tmp_path / "carts.json"
        path.write_text("{not json")
        with pytest.raises(ValidationError, match="unreadable"):
            JsonCartRepository(path).load("user:u1")

    def test_malformed_record_raises_domain_error(self, tmp_path):
        path = tmp_path / "carts.json"
        path.write_text('{"user:u1": [{"name": "no id"}]}')
        with pytest.raises(ValidationError, match="Unreadable cart record"):
            JsonCartRepository(path).load("user:u1")


class TestJsonBuyNowRepository:

    def test_take_returns_staged_item_once(self, tmp_path):
        repo = JsonBuyNowRepository(tmp_path / "buy_now.json")
        repo.stage(_cake())
        assert repo.take() == _cake()
        assert repo.take() is None

    def test_take_with_nothing_staged(self, tmp_path):
        assert JsonBuyNowRepository(tmp_path / "buy_now.json").take() is None

    def test_unreadable_file_is_still_erased(self, tmp_path):
        path = tmp_path / "buy_now.json"
        path.write_text("not json")
        repo = JsonBuyNowRepository(path)
        with pytest.raises(ValidationError, match="unreadable"):
            repo.take()
        assert not path.exists()
