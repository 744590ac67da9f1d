"""Unit tests for the delivery region gate and the shipping form."""

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.checkout import DeliveryCity, ShippingForm
from storefront.domain.service.region_gate import RegionGate


class TestRegionGate:

    def test_known_code_resolves_city(self):
        assert RegionGate().city_for("751024").name == "Bhubaneswar"

    def test_range_edges(self):
        gate = RegionGate()
        assert gate.city_for("753015").name == "Cuttack"
        assert gate.city_for("758035").name == "Barbil"

    def test_out_of_region_rejected(self):
        with pytest.raises(ValidationError, match="only within Odisha"):
            RegionGate().city_for("560001")

    def test_malformed_code_rejected(self):
        with pytest.raises(ValidationError, match="6-digit"):
            RegionGate().city_for("7510")

    def test_blank_code_rejected(self):
        with pytest.raises(ValidationError, match="required"):
            RegionGate().city_for("  ")

    def test_is_deliverable(self):
        gate = RegionGate()
        assert gate.is_deliverable("752001")
        assert not gate.is_deliverable("110001")

    def test_city_names_sorted(self):
        names = RegionGate().city_names()
        assert names == sorted(names)
        assert "Puri" in names


def _complete_form() -> ShippingForm:
    form = ShippingForm(
        first_name="Asha",
        last_name="Das",
        email="asha@example.com",
        phone="9876543210",
        address="12 Janpath",
    )
    form.set_postal_code("751001", RegionGate().city_for)
    return form


class TestShippingForm:

    def test_state_and_country_are_fixed(self):
        form = ShippingForm()
        assert form.state == "Odisha"
        assert form.country == "India"

    def test_any_city_lookup_can_fill_the_city(self):
        form = ShippingForm()
        form.set_postal_code("123456", lambda code: DeliveryCity("Testpur", "Test", (code,)))
        assert form.city == "Testpur"
        assert form.postal_code == "123456"

    def test_valid_postal_code_overwrites_city(self):
        form = ShippingForm(city="Somewhere Else")
        form.set_postal_code("760005", RegionGate().city_for)
        assert form.city == "Berhampur"
        assert form.postal_code_error == ""

    def test_invalid_postal_code_sets_error_and_keeps_city(self):
        form = ShippingForm(city="Puri")
        form.set_postal_code("400001", RegionGate().city_for)
        assert form.postal_code_error
        assert form.city == "Puri"

    def test_fixing_postal_code_clears_error(self):
        form = ShippingForm()
        form.set_postal_code("400001", RegionGate().city_for)
        form.set_postal_code("751002", RegionGate().city_for)
        assert form.postal_code_error == ""

    def test_complete_form_passes(self):
        _complete_form().require_complete()

    def test_missing_fields_listed(self):
        form = _complete_form()
        form.phone = " "
        with pytest.raises(ValidationError, match="Phone number"):
            form.require_complete()

    def test_postal_code_error_blocks(self):
        form = _complete_form()
        form.set_postal_code("400001", RegionGate().city_for)
        with pytest.raises(ValidationError, match="only within Odisha"):
            form.require_complete()

    def test_update_rejects_gated_fields(self):
        with pytest.raises(ValidationError, match="Unknown shipping field"):
            ShippingForm().update(country="Nepal")

    def test_payment_method_must_be_supported(self):
        form = ShippingForm()
        form.select_payment_method("upi")
        assert form.payment_method == "upi"
        with pytest.raises(ValidationError, match="Unsupported payment method"):
            form.select_payment_method("bitcoin")
