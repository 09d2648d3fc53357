"""Application-wide concerns: settings, token verification, pagination and health."""

import jwt
import pytest
from agrimarket.auth import InvalidToken, decode_token
from agrimarket.domain import agrimarket
from agrimarket.settings import MarketSettings
from agrimarket.utils.api import pagination
from protean.exceptions import ExpectedVersionError


class TestMarketSettings:
    def test_reads_test_overlay_from_domain_config(self):
        settings = MarketSettings.from_domain(agrimarket)
        assert settings.gateway == "fake"
        assert settings.jwt_secret == "test-secret"
        assert settings.flw_webhook_hash == "test-webhook-hash"
        assert settings.currency == "RWF"

    def test_allowed_origins_are_split(self):
        settings = MarketSettings(allowed_origins="http://a.test, http://b.test,")
        assert settings.allowed_origins == ["http://a.test", "http://b.test"]

    def test_uppercase_keys_are_accepted(self):
        settings = MarketSettings.model_validate({"GATEWAY": "fake", "GATEWAY_TIMEOUT": "5"})
        assert settings.gateway == "fake"
        assert settings.gateway_timeout == 5.0


class TestDecodeToken:
    def test_customer_token(self, settings, make_token):
        user = decode_token(make_token("cust-001"), settings)
        assert user.user_id == "cust-001"
        assert user.is_admin is False

    def test_admin_token(self, settings, make_token):
        assert decode_token(make_token("admin-001", is_admin=True), settings).is_admin is True

    def test_seller_token_carries_admin_id(self, settings):
        token = jwt.encode({"adminId": "seller-001", "isAdmin": True}, settings.jwt_secret, algorithm="HS256")
        user = decode_token(token, settings)
        assert user.user_id == "seller-001"
        assert user.is_admin is True

    def test_token_without_user_id(self, settings):
        token = jwt.encode({"isAdmin": True}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
        with pytest.raises(InvalidToken):
            decode_token(token, settings)

    def test_token_signed_with_another_secret(self, settings):
        token = jwt.encode({"_id": "cust-001"}, "another-secret", algorithm="HS256")
        with pytest.raises(InvalidToken):
            decode_token(token, settings)


class TestPagination:
    def test_middle_page(self):
        assert pagination(25, 2, 10, "totalOrders") == {
            "totalOrders": 25,
            "totalPages": 3,
            "currentPage": 2,
            "hasNextPage": True,
            "hasPrevPage": True,
        }

    def test_empty_result(self):
        block = pagination(0, 1, 10, "totalProducts")
        assert block["totalPages"] == 0
        assert block["hasNextPage"] is False
        assert block["hasPrevPage"] is False


class TestHttpSurface:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "domain": agrimarket.name}

    def test_missing_token_is_unauthorized(self, client):
        response = client.get("/api/cart")
        assert response.status_code == 401

    def test_bad_token_is_forbidden(self, client):
        response = client.get("/api/cart", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 403

    def test_customer_cannot_reach_admin_routes(self, client, auth_headers):
        response = client.get("/api/order/getAllOrders", headers=auth_headers)
        assert response.status_code == 403

    def test_seller_token_reaches_admin_routes(self, client, settings):
        token = jwt.encode({"adminId": "seller-001", "isAdmin": True}, settings.jwt_secret, algorithm="HS256")
        response = client.get("/api/order/getAllOrders", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["orders"] == []

    def test_stale_write_is_a_conflict(self, client):
        def save_outdated_copy():
            raise ExpectedVersionError("Wrong expected version: 0 (Aggregate: ShoppingCart, Version: 1)")

        client.app.add_api_route("/api/stale-write", save_outdated_copy)

        response = client.get("/api/stale-write")

        assert response.status_code == 409
        assert response.json() == {"error": "The record was changed by another request. Please retry."}
