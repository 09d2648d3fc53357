"""Integration tests for checkout and the customer's order endpoints."""

import time

import anyio
import httpx
import pytest
from agrimarket.app import create_app
from agrimarket.ordering.cart import ShoppingCart
from agrimarket.ordering.order import Order
from agrimarket.payments.fake import FakeGateway
from protean import current_domain


def _checkout(client, headers, address_id, payment_type="cash", **extra):
    return client.post(
        "/api/order/placeOrder",
        json={"addressId": address_id, "paymentType": payment_type, **extra},
        headers=headers,
    )


class TestPlaceOrder:
    def test_cash_order(self, client, auth_headers, address_id, fill_cart, channel):
        fill_cart(price=2500, quantity=2)

        response = _checkout(client, auth_headers, address_id)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Order placed successfully"
        assert body["paymentUrl"] is None
        order = body["order"]
        assert order["status"] == "pending"
        assert order["paymentStatus"] == "pending"
        assert order["amount"] == 5000
        assert order["items"][0]["subtotal"] == "5000.00"
        assert order["address"]["city"] == "Kigali"
        assert channel.published[0]["event"] == "newOrder"
        assert len(current_domain.repository_for(ShoppingCart).for_customer("cust-001").items) == 0

    def test_online_order(self, client, auth_headers, address_id, fill_cart):
        fill_cart()

        response = _checkout(client, auth_headers, address_id, "online")

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Order created, redirect to payment"
        assert body["paymentUrl"].startswith("https://checkout.fake/pay/")
        assert body["order"]["txRef"].startswith("ORDER-")

    def test_gateway_failure(self, client, auth_headers, address_id, fill_cart, gateway):
        fill_cart()
        gateway.configure(should_succeed=False, failure_reason="Gateway unavailable")

        response = _checkout(client, auth_headers, address_id, "online")

        assert response.status_code == 400
        assert response.json() == {"error": "Payment initiation failed: Gateway unavailable"}
        assert current_domain.repository_for(Order).created_since() == []

    def test_empty_cart(self, client, auth_headers, address_id):
        response = _checkout(client, auth_headers, address_id)
        assert response.status_code == 400
        assert current_domain.repository_for(Order).created_since() == []

    def test_missing_address(self, client, auth_headers, customer_id, fill_cart):
        fill_cart()
        response = client.post("/api/order/placeOrder", json={"paymentType": "cash"}, headers=auth_headers)
        assert response.status_code == 400

    def test_invalid_payment_type(self, client, auth_headers, address_id, fill_cart):
        fill_cart()
        response = _checkout(client, auth_headers, address_id, "card")
        assert response.status_code == 400

    def test_foreign_address(self, client, make_token, address_id, fill_cart):
        fill_cart()
        other = {"Authorization": f"Bearer {make_token('cust-002')}"}
        response = _checkout(client, other, address_id)
        assert response.status_code == 404


class TestCustomerOrders:
    def test_lists_own_orders(self, client, auth_headers, address_id, fill_cart):
        fill_cart()
        _checkout(client, auth_headers, address_id)
        fill_cart(name="Beans")
        _checkout(client, auth_headers, address_id)

        response = client.get("/api/order/getUserOrders", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert len(body["orders"]) == 2
        assert body["pagination"]["totalOrders"] == 2

    def test_order_details(self, client, auth_headers, address_id, fill_cart):
        fill_cart()
        order_id = _checkout(client, auth_headers, address_id).json()["order"]["id"]

        response = client.get(f"/api/order/getOrderDetails/{order_id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["order"]["id"] == order_id

    def test_other_customers_order_is_hidden(self, client, auth_headers, make_token, address_id, fill_cart):
        fill_cart()
        order_id = _checkout(client, auth_headers, address_id).json()["order"]["id"]
        other = {"Authorization": f"Bearer {make_token('cust-002')}"}

        response = client.get(f"/api/order/getOrderDetails/{order_id}", headers=other)

        assert response.status_code == 404


class SlowGateway(FakeGateway):
    """Gateway whose checkout call holds the worker for ``delay`` seconds."""

    def __init__(self, delay):
        super().__init__()
        self.delay = delay

    def create_payment(self, request):
        time.sleep(self.delay)
        return super().create_payment(request)


class TestCheckoutConcurrency:
    @pytest.mark.anyio
    async def test_gateway_call_does_not_stall_other_requests(
        self, settings, channel, address_id, fill_cart, auth_headers
    ):
        fill_cart()
        app = create_app(settings=settings, gateway=SlowGateway(delay=1.0), channel=channel)
        responses = {}

        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as http:

            async def checkout():
                responses["order"] = await http.post(
                    "/api/order/placeOrder",
                    json={"addressId": address_id, "paymentType": "online"},
                    headers=auth_headers,
                )

            async with anyio.create_task_group() as tg:
                tg.start_soon(checkout)
                await anyio.sleep(0.2)
                started = time.perf_counter()
                responses["health"] = await http.get("/health")
                elapsed = time.perf_counter() - started

        assert responses["health"].status_code == 200
        assert elapsed < 0.5
        assert responses["order"].status_code == 201
        assert responses["order"].json()["paymentUrl"].startswith("https://checkout.fake/pay/")
