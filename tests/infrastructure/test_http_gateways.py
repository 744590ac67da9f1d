"""Tests for the HTTP coupon and order gateways.

Requests are answered by ``httpx.MockTransport``; nothing leaves the process.
"""

import asyncio
import json

import httpx
import pytest

from storefront.application.coupon_validator import CouponValidator
from storefront.domain.exceptions import (
    EntityNotFoundError,
    GatewayError,
    SubmissionError,
)
from storefront.domain.model.cart import CartItem
from storefront.domain.model.checkout import ShippingForm
from storefront.domain.model.coupon import DiscountType
from storefront.domain.model.identity import Identity
from storefront.domain.model.order import OrderDraft
from storefront.domain.model.value_objects import Money
from storefront.domain.service.order_total_calculator import compute
from storefront.domain.service.region_gate import RegionGate
from storefront.infrastructure.http.api_client import ApiClient
from storefront.infrastructure.http.http_coupon_gateway import HttpCouponGateway
from storefront.infrastructure.http.http_order_gateway import HttpOrderGateway

BASE_URL = "https://shop.test/api"

COUPON_JSON = {
    "id": "cpn-1",
    "code": "CAKE15",
    "name": "15% off cakes",
    "discountType": "PERCENTAGE",
    "discountValue": 15,
    "minimumAmount": 700,
    "maximumDiscount": 300,
    "validUntil": "2099-01-01T00:00:00.000Z",
    "isActive": True,
}


def _run(handler, call):
    """Run ``call(api)`` against a client whose requests go to ``handler``."""
    async def scenario():
        async with ApiClient(BASE_URL, transport=httpx.MockTransport(handler)) as api:
            return await call(api)
    return asyncio.run(scenario())


def _draft() -> OrderDraft:
    form = ShippingForm(
        first_name="Asha",
        last_name="Das",
        email="asha@example.com",
        phone="9876543210",
        address="12 Janpath",
    )
    form.set_postal_code("751001", RegionGate().city_for)
    items = [CartItem(id="p1", name="Truffle", price=Money.of("599"), quantity=2)]
    return OrderDraft.create(
        Identity(id="u1", email="asha@example.com"), items, form, compute(items)
    )


class TestCouponValidate:

    def test_sends_expected_body(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200, json={"valid": True, "coupon": COUPON_JSON, "discountAmount": 224.7}
            )

        result = _run(
            handler,
            lambda api: HttpCouponGateway(api).validate("CAKE15", "u1", Money.of("1498")),
        )
        assert seen == {
            "method": "POST",
            "path": "/api/coupons/validate",
            "body": {"couponCode": "CAKE15", "customerId": "u1", "orderAmount": 1498.0},
        }
        assert result.valid
        assert result.applied.discount_amount == Money.of("224.70")
        assert result.applied.order_amount == Money.of("1498")
        assert result.applied.coupon.discount_type is DiscountType.PERCENTAGE
        assert result.applied.coupon.maximum_discount == Money.of("300")

    def test_rejection_carries_backend_error(self):
        def handler(request):
            return httpx.Response(400, json={"valid": False, "error": "This coupon has expired"})

        result = _run(
            handler, lambda api: HttpCouponGateway(api).validate("OLD", "u1", Money.of("100"))
        )
        assert not result.valid
        assert result.error == "This coupon has expired"

    def test_server_error_raises(self):
        def handler(request):
            return httpx.Response(503, json={"error": "Service unavailable"})

        with pytest.raises(GatewayError) as excinfo:
            _run(handler, lambda api: HttpCouponGateway(api).validate("X", "u1", Money.of("1")))
        assert excinfo.value.status_code == 503

    def test_unreachable_backend_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(GatewayError, match="Could not reach"):
            _run(handler, lambda api: HttpCouponGateway(api).validate("X", "u1", Money.of("1")))

    def test_non_json_body_raises(self):
        def handler(request):
            return httpx.Response(200, text="<html>oops</html>")

        with pytest.raises(GatewayError, match="unreadable"):
            _run(handler, lambda api: HttpCouponGateway(api).validate("X", "u1", Money.of("1")))


class TestCouponList:

    def test_skips_malformed_entries(self):
        def handler(request):
            assert request.url.path == "/api/coupons/customer/u1"
            return httpx.Response(200, json=[COUPON_JSON, {"code": "BROKEN"}])

        coupons = _run(handler, lambda api: HttpCouponGateway(api).list_for_customer("u1"))
        assert [c.code for c in coupons] == ["CAKE15"]

    def test_non_list_body_raises(self):
        def handler(request):
            return httpx.Response(200, json={"coupons": []})

        with pytest.raises(GatewayError, match="Malformed coupon list"):
            _run(handler, lambda api: HttpCouponGateway(api).list_for_customer("u1"))

    def test_non_object_entries_skipped(self):
        def handler(request):
            return httpx.Response(200, json=["CAKE15", COUPON_JSON])

        coupons = _run(handler, lambda api: HttpCouponGateway(api).list_for_customer("u1"))
        assert [c.code for c in coupons] == ["CAKE15"]

    def test_validator_offers_nothing_on_malformed_list(self):
        def handler(request):
            return httpx.Response(200, json={"coupons": []})

        coupons = _run(
            handler,
            lambda api: CouponValidator(HttpCouponGateway(api)).available_coupons("u1"),
        )
        assert coupons == []


class TestOrderGateway:

    def test_create_order_posts_payload(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                201,
                json={"id": "o-1", "orderNumber": "MF100042", "status": "PENDING", "totalAmount": 1298},
            )

        receipt = _run(handler, lambda api: HttpOrderGateway(api).create_order(_draft()))
        assert seen["path"] == "/api/orders"
        assert seen["body"]["userId"] == "u1"
        assert seen["body"]["shippingAddress"]["pincode"] == "751001"
        assert seen["body"]["items"] == [{"productId": "p1", "quantity": 2, "unitPrice": 599.0}]
        assert receipt.order_number == "MF100042"

    def test_create_order_failure_message(self):
        def handler(request):
            return httpx.Response(400, json={"error": "Product out of stock"})

        with pytest.raises(SubmissionError, match="Product out of stock"):
            _run(handler, lambda api: HttpOrderGateway(api).create_order(_draft()))

    def test_create_order_without_number_is_an_error(self):
        def handler(request):
            return httpx.Response(201, json={"id": "o-1"})

        with pytest.raises(SubmissionError, match="no order number"):
            _run(handler, lambda api: HttpOrderGateway(api).create_order(_draft()))

    def test_unknown_order_number(self):
        def handler(request):
            return httpx.Response(404, json={"error": "Order not found"})

        with pytest.raises(EntityNotFoundError):
            _run(handler, lambda api: HttpOrderGateway(api).get_by_number("MF999999"))

    def test_list_for_user_passes_query(self):
        def handler(request):
            assert request.url.path == "/api/customer-orders"
            assert request.url.params["userId"] == "u1"
            return httpx.Response(200, json=[{"id": "o-1", "orderNumber": "MF100001"}])

        receipts = _run(handler, lambda api: HttpOrderGateway(api).list_for_user("u1"))
        assert [r.order_number for r in receipts] == ["MF100001"]
