"""Integration tests for the seller administration endpoints."""

import jwt


class TestListSellers:
    def test_lists_sellers_only(self, client, admin_headers, make_seller, customer_id):
        make_seller()

        response = client.get("/api/seller/getAllSeller", headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert [s["id"] for s in body["sellers"]] == ["seller-001"]
        assert body["sellers"][0]["companyName"] == "Green Farm Ltd"
        assert body["pagination"] == {
            "currentPage": 1,
            "totalPages": 1,
            "totalItems": 1,
            "itemsPerPage": 10,
            "hasNextPage": False,
            "hasPrevPage": False,
            "nextPage": None,
            "prevPage": None,
        }

    def test_paging_and_sort(self, client, admin_headers, make_seller):
        make_seller()
        make_seller(seller_id="seller-002", full_name="Diane Ingabire", email="diane@hills.rw")
        make_seller(seller_id="seller-003", full_name="Alain Habimana", email="alain@valley.rw")

        response = client.get(
            "/api/seller/getAllSeller",
            params={"page": 2, "limit": 2, "sortBy": "fullName", "sortOrder": "asc"},
            headers=admin_headers,
        )

        body = response.json()
        assert [s["fullName"] for s in body["sellers"]] == ["Jean Ndayisaba"]
        assert body["pagination"]["totalPages"] == 2
        assert body["pagination"]["hasPrevPage"] is True
        assert body["pagination"]["prevPage"] == 1
        assert body["pagination"]["nextPage"] is None

    def test_search_without_match(self, client, admin_headers, make_seller):
        make_seller()

        response = client.get("/api/seller/getAllSeller", params={"search": "nobody"}, headers=admin_headers)

        body = response.json()
        assert body["sellers"] == []
        assert body["message"] == "No sellers found matching your search"
        assert body["pagination"]["totalPages"] == 0

    def test_requires_admin(self, client, auth_headers):
        assert client.get("/api/seller/getAllSeller", headers=auth_headers).status_code == 403


class TestSellerDetails:
    def test_get_seller(self, client, admin_headers, make_seller):
        make_seller()

        response = client.get("/api/seller/getSeller/seller-001", headers=admin_headers)

        assert response.status_code == 200
        seller = response.json()["seller"]
        assert seller["email"] == "jean@greenfarm.rw"
        assert seller["companyAddress"] == "Musanze, Northern Province"
        assert seller["isAdmin"] is True

    def test_customer_is_not_found_as_seller(self, client, admin_headers, customer_id):
        response = client.get(f"/api/seller/getSeller/{customer_id}", headers=admin_headers)
        assert response.status_code == 404

    def test_update_seller(self, client, admin_headers, make_seller):
        make_seller()

        response = client.put(
            "/api/seller/update/seller-001",
            json={"phoneNumber": "+250788000222", "companyName": "Green Farm Cooperative"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Seller updated successfully"
        assert body["seller"]["phoneNumber"] == "+250788000222"
        assert body["seller"]["fullName"] == "Jean Ndayisaba"

    def test_update_unknown_seller(self, client, admin_headers):
        response = client.put("/api/seller/update/missing", json={"fullName": "X"}, headers=admin_headers)
        assert response.status_code == 404

    def test_delete_seller(self, client, admin_headers, make_seller):
        make_seller()

        response = client.delete("/api/seller/delete/seller-001", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Seller deleted successfully"
        assert client.get("/api/seller/getSeller/seller-001", headers=admin_headers).status_code == 404

    def test_seller_token_can_manage_sellers(self, client, settings, make_seller):
        make_seller()
        token = jwt.encode({"adminId": "seller-001", "isAdmin": True}, settings.jwt_secret, algorithm="HS256")

        response = client.get("/api/seller/getSeller/seller-001", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
