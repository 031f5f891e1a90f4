"""
BileMo API — User Endpoint Tests
==================================

What:  HTTP tests for /api/users, focused on ownership and cache coupling.

What we test:
    ✅ Customers see, update and delete only their own users (403 otherwise)
    ✅ 404 wins over 403 for unknown ids
    ✅ Created users are linked to the acting customer
    ✅ A user write evicts cached customer pages (which embed users)
"""

import pytest


class TestUserReads:

    @pytest.mark.asyncio
    async def test_list_has_action_links(self, client, acme_headers, seed):
        response = await client.get("/api/users?page=1&limit=10", headers=acme_headers)

        assert response.status_code == 200
        body = response.json()
        assert [u["email"] for u in body] == ["alice@example.com", "bob@example.com"]
        href = f"/api/users/{seed.alice_id}"
        assert body[0]["_links"] == {
            "self": {"href": href},
            "update": {"href": href},
            "delete": {"href": href},
        }

    @pytest.mark.asyncio
    async def test_list_page_is_shared_between_principals(
        self, client, acme_headers, admin_headers
    ):
        as_customer = await client.get("/api/users?page=1&limit=10", headers=acme_headers)
        as_admin = await client.get("/api/users?page=1&limit=10", headers=admin_headers)

        assert as_customer.content == as_admin.content

    @pytest.mark.asyncio
    async def test_offset_beyond_sql_integer_is_400(self, client, acme_headers):
        response = await client.get(
            f"/api/users?page={2 ** 40}&limit={2 ** 40}", headers=acme_headers
        )

        assert response.status_code == 400
        assert response.json()["violations"] == [
            {"field": "page", "message": "Page is too large for this limit."}
        ]

    @pytest.mark.asyncio
    async def test_owner_can_read(self, client, acme_headers, seed):
        response = await client.get(f"/api/users/{seed.alice_id}", headers=acme_headers)

        assert response.status_code == 200
        assert response.json()["firstname"] == "Alice"

    @pytest.mark.asyncio
    async def test_other_customer_is_403(self, client, globex_headers, seed):
        response = await client.get(f"/api/users/{seed.alice_id}", headers=globex_headers)

        assert response.status_code == 403
        assert response.json()["message"] == "Not authorized to detail this user."

    @pytest.mark.asyncio
    async def test_unknown_user_is_404_not_403(self, client, globex_headers):
        response = await client.get("/api/users/9999", headers=globex_headers)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_admin_does_not_own_users(self, client, admin_headers, seed):
        response = await client.get(f"/api/users/{seed.alice_id}", headers=admin_headers)

        assert response.status_code == 403


class TestUserWrites:

    @pytest.mark.asyncio
    async def test_create_links_acting_customer(self, client, acme_headers, admin_headers, seed):
        response = await client.post(
            "/api/users",
            json={"email": "carol@example.com", "firstname": "Carol", "lastname": "Petit"},
            headers=acme_headers,
        )

        assert response.status_code == 201
        user_id = response.json()["id"]
        assert response.headers["Location"].endswith(f"/api/users/{user_id}")

        owner = await client.get(f"/api/users/{user_id}", headers=acme_headers)
        assert owner.status_code == 200

        customer = (await client.get(f"/api/customers/{seed.acme_id}", headers=admin_headers)).json()
        assert user_id in [u["id"] for u in customer["users"]]

    @pytest.mark.asyncio
    async def test_admin_create_with_id_customer(self, client, admin_headers, globex_headers, seed):
        response = await client.post(
            "/api/users",
            json={
                "email": "dave@example.com",
                "firstname": "Dave",
                "lastname": "Moreau",
                "idCustomer": seed.globex_id,
            },
            headers=admin_headers,
        )

        assert response.status_code == 201
        owner = await client.get(f"/api/users/{response.json()['id']}", headers=globex_headers)
        assert owner.status_code == 200

    @pytest.mark.asyncio
    async def test_create_duplicate_email_is_400(self, client, acme_headers):
        response = await client.post(
            "/api/users",
            json={"email": "bob@example.com", "firstname": "B", "lastname": "D"},
            headers=acme_headers,
        )

        assert response.status_code == 400
        assert response.json()["violations"][0]["field"] == "email"

    @pytest.mark.asyncio
    async def test_create_missing_fields_is_400(self, client, acme_headers):
        response = await client.post(
            "/api/users", json={"email": "eve@example.com"}, headers=acme_headers
        )

        assert response.status_code == 400
        fields = {v["field"] for v in response.json()["violations"]}
        assert fields == {"firstname", "lastname"}

    @pytest.mark.asyncio
    async def test_owner_update(self, client, acme_headers, seed):
        response = await client.put(
            f"/api/users/{seed.alice_id}", json={"lastname": "Bernard"}, headers=acme_headers
        )
        assert response.status_code == 204

        detail = (await client.get(f"/api/users/{seed.alice_id}", headers=acme_headers)).json()
        assert detail["lastname"] == "Bernard"
        assert detail["firstname"] == "Alice"

    @pytest.mark.asyncio
    async def test_update_with_invalid_email_is_400(self, client, acme_headers, seed):
        response = await client.put(
            f"/api/users/{seed.alice_id}", json={"email": "nope"}, headers=acme_headers
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_non_owner_update_is_403(self, client, globex_headers, seed):
        response = await client.put(
            f"/api/users/{seed.alice_id}", json={"lastname": "X"}, headers=globex_headers
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_non_owner_delete_is_403(self, client, globex_headers, acme_headers, seed):
        response = await client.delete(f"/api/users/{seed.alice_id}", headers=globex_headers)
        assert response.status_code == 403

        still_there = await client.get(f"/api/users/{seed.alice_id}", headers=acme_headers)
        assert still_there.status_code == 200

    @pytest.mark.asyncio
    async def test_owner_delete(self, client, acme_headers, seed):
        response = await client.delete(f"/api/users/{seed.alice_id}", headers=acme_headers)
        assert response.status_code == 204

        missing = await client.get(f"/api/users/{seed.alice_id}", headers=acme_headers)
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_user_write_evicts_customer_pages(
        self, client, acme_headers, admin_headers, cache_store, seed
    ):
        await client.get("/api/customers?page=1&limit=10", headers=admin_headers)
        await client.get("/api/products?page=1&limit=10", headers=acme_headers)

        await client.put(
            f"/api/users/{seed.alice_id}", json={"firstname": "Alicia"}, headers=acme_headers
        )

        assert "getAllCustomers-1-10" not in cache_store
        assert "getAllProducts-1-10" in cache_store
        page = (await client.get("/api/customers?page=1&limit=10", headers=admin_headers)).json()
        assert page[0]["users"][0]["firstname"] == "Alicia"
