"""Integration tests for the category endpoints via TestClient."""

import json

from agrimarket.catalogue.category import Category
from protean import current_domain


class TestAddCategory:
    def test_add_category_with_encoded_field(self, client, admin_headers):
        response = client.post(
            "/api/category/addCategory",
            json={"categoryData": json.dumps({"name": "Fruits", "description": "Seasonal fruit"})},
            headers=admin_headers,
        )
        assert response.status_code == 201
        category = response.json()["category"]
        assert category["name"] == "Fruits"
        assert category["status"] == "active"

    def test_add_category_with_plain_fields(self, client, admin_headers):
        response = client.post(
            "/api/category/addCategory",
            json={"name": "Fruits", "description": "Seasonal fruit", "status": "inactive"},
            headers=admin_headers,
        )
        assert response.status_code == 201
        assert response.json()["category"]["status"] == "inactive"

    def test_missing_description_is_rejected(self, client, admin_headers):
        response = client.post("/api/category/addCategory", json={"name": "Fruits"}, headers=admin_headers)
        assert response.status_code == 400

    def test_malformed_encoded_field_is_rejected(self, client, admin_headers):
        response = client.post(
            "/api/category/addCategory",
            data={"categoryData": "[broken"},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert "Invalid category data format" in json.dumps(response.json())

    def test_requires_admin(self, client, auth_headers):
        response = client.post(
            "/api/category/addCategory",
            json={"name": "Fruits", "description": "Seasonal fruit"},
            headers=auth_headers,
        )
        assert response.status_code == 403


class TestBrowseCategories:
    def test_list_categories(self, client, category_id):
        response = client.get("/api/category/getAllCategories")
        assert response.status_code == 200
        assert [c["id"] for c in response.json()["categories"]] == [str(category_id)]

    def test_category_products(self, client, category_id, make_product):
        make_product(name="Beans")
        response = client.get(f"/api/category/{category_id}/products")
        assert response.status_code == 200
        body = response.json()
        assert body["category"]["name"] == "Vegetables"
        assert [p["name"] for p in body["products"]] == ["Beans"]
        assert body["pagination"]["totalProducts"] == 1

    def test_unknown_category_products(self, client):
        response = client.get("/api/category/missing/products")
        assert response.status_code == 404


class TestManageCategories:
    def test_update_category(self, client, admin_headers, category_id):
        response = client.put(
            f"/api/category/{category_id}",
            json={"categoryData": json.dumps({"name": "Greens"})},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["category"]["name"] == "Greens"
        assert current_domain.repository_for(Category).get(category_id).description == (
            "Fresh vegetables from local farms"
        )

    def test_delete_category(self, client, admin_headers, category_id):
        response = client.delete(f"/api/category/{category_id}", headers=admin_headers)
        assert response.status_code == 200
        assert current_domain.repository_for(Category).get_or_none(category_id) is None

    def test_delete_unknown_category(self, client, admin_headers):
        response = client.delete("/api/category/missing", headers=admin_headers)
        assert response.status_code == 404
