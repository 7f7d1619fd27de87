# tests/integration/test_marketplace_flow.py
"""End-to-end: list → purchase → ship → deliver → complete, with messages.

Requires a running PostgreSQL DB with migrations applied (alembic upgrade head).
Each test registers fresh users and creates its own listing so runs never
depend on leftover state; only the seeded admin account is shared.
"""

import asyncio
import uuid

import pytest
from httpx import AsyncClient

pytestmark = [pytest.mark.asyncio(loop_scope="session"), pytest.mark.integration]

SEED_ADMIN = {"email": "admin@example.com", "password": "Passw0rd!"}

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _login(client: AsyncClient, email: str, password: str) -> dict[str, str]:
    resp = await client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['data']['access_token']}"}


async def _new_user(client: AsyncClient) -> dict[str, str]:
    """Register a fresh user and return its auth headers."""
    email = f"flow_{uuid.uuid4().hex[:10]}@example.com"
    resp = await client.post(
        "/api/v1/auth/register", json={"email": email, "password": "TestPass123!"}
    )
    assert resp.status_code == 201, resp.text
    return await _login(client, email, "TestPass123!")


async def _new_listing(client: AsyncClient, seller: dict[str, str], price: int = 500) -> int:
    resp = await client.post(
        "/api/v1/listings", json={"title": "Desk lamp", "price": price}, headers=seller
    )
    assert resp.status_code == 201, resp.text
    return int(resp.json()["data"]["id"])


async def _purchase(client: AsyncClient, buyer: dict[str, str], listing_id: int) -> int:
    resp = await client.post("/api/v1/orders", json={"listing_id": listing_id}, headers=buyer)
    assert resp.status_code == 201, resp.text
    return int(resp.json()["data"]["id"])


# ---------------------------------------------------------------------------
# Purchase
# ---------------------------------------------------------------------------


class TestPurchase:
    async def test_purchase_marks_listing_sold(self, client: AsyncClient) -> None:
        seller, buyer = await _new_user(client), await _new_user(client)
        listing_id = await _new_listing(client, seller)

        order_id = await _purchase(client, buyer, listing_id)

        resp = await client.get(f"/api/v1/orders/{order_id}", headers=seller)
        data = resp.json()["data"]
        assert data["status"] == "CREATED"
        assert data["listing"]["status"] == "Sold"
        listing = await client.get(f"/api/v1/listings/{listing_id}")
        assert listing.json()["data"]["status"] == "Sold"

    async def test_sold_listing_rejects_second_buyer(self, client: AsyncClient) -> None:
        seller, first, second = [await _new_user(client) for _ in range(3)]
        listing_id = await _new_listing(client, seller)
        await _purchase(client, first, listing_id)

        resp = await client.post("/api/v1/orders", json={"listing_id": listing_id}, headers=second)

        assert resp.status_code == 409
        assert resp.json()["code"] == 3002

    async def test_concurrent_buyers_one_order(self, client: AsyncClient) -> None:
        seller = await _new_user(client)
        buyers = [await _new_user(client) for _ in range(8)]
        listing_id = await _new_listing(client, seller)

        responses = await asyncio.gather(
            *(
                client.post("/api/v1/orders", json={"listing_id": listing_id}, headers=b)
                for b in buyers
            )
        )

        codes = sorted(r.status_code for r in responses)
        assert codes == [201] + [409] * (len(buyers) - 1)
        sold = await client.get("/api/v1/orders/seller/me", headers=seller)
        assert [o["listing_id"] for o in sold.json()["data"]["items"]] == [listing_id]

    async def test_cannot_buy_own_listing(self, client: AsyncClient) -> None:
        seller = await _new_user(client)
        listing_id = await _new_listing(client, seller)

        resp = await client.post("/api/v1/orders", json={"listing_id": listing_id}, headers=seller)

        assert resp.status_code == 403
        assert resp.json()["code"] == 3003


# ---------------------------------------------------------------------------
# Lifecycle + messages
# ---------------------------------------------------------------------------


class TestLifecycle:
    async def test_full_lifecycle_with_messages(self, client: AsyncClient) -> None:
        seller, buyer = await _new_user(client), await _new_user(client)
        admin = await _login(client, **SEED_ADMIN)
        order_id = await _purchase(client, buyer, await _new_listing(client, seller))

        resp = await client.post(
            f"/api/v1/orders/{order_id}/messages", json={"text": "When will it ship?"},
            headers=buyer,
        )
        assert resp.status_code == 201

        # Buyer cannot ship; seller can, once
        assert (await client.post(f"/api/v1/orders/{order_id}/ship", headers=buyer)).status_code == 403
        assert (await client.post(f"/api/v1/orders/{order_id}/ship", headers=seller)).status_code == 200
        assert (await client.post(f"/api/v1/orders/{order_id}/ship", headers=seller)).status_code == 409

        await client.post(
            f"/api/v1/orders/{order_id}/messages", json={"text": "Shipped today"}, headers=seller
        )
        assert (await client.post(f"/api/v1/orders/{order_id}/deliver", headers=buyer)).status_code == 200
        assert (await client.post(f"/api/v1/orders/{order_id}/complete", headers=buyer)).status_code == 200

        resp = await client.post(
            f"/api/v1/orders/{order_id}/messages", json={"text": "Thanks!"}, headers=buyer
        )
        assert resp.status_code == 409
        assert resp.json()["code"] == 5002

        resp = await client.get(f"/api/v1/orders/{order_id}/messages", headers=admin)
        assert [m["body"] for m in resp.json()["data"]] == ["When will it ship?", "Shipped today"]

        resp = await client.post(
            f"/api/v1/orders/{order_id}/messages", json={"text": "admin here"}, headers=admin
        )
        assert resp.status_code == 403
        assert resp.json()["code"] == 1102

        resp = await client.get(f"/api/v1/orders/{order_id}/events", headers=buyer)
        assert [e["event_type"] for e in resp.json()["data"]] == [
            "ORDER_CREATED", "ORDER_SHIPPED", "ORDER_DELIVERED", "ORDER_COMPLETED",
        ]

    async def test_outsider_sees_nothing(self, client: AsyncClient) -> None:
        seller, buyer, outsider = [await _new_user(client) for _ in range(3)]
        order_id = await _purchase(client, buyer, await _new_listing(client, seller))

        assert (await client.get(f"/api/v1/orders/{order_id}", headers=outsider)).status_code == 403
        resp = await client.get(f"/api/v1/orders/{order_id}/messages", headers=outsider)
        assert resp.status_code == 403

    async def test_sold_listing_cannot_be_paused(self, client: AsyncClient) -> None:
        seller, buyer = await _new_user(client), await _new_user(client)
        listing_id = await _new_listing(client, seller)
        await _purchase(client, buyer, listing_id)

        resp = await client.post(f"/api/v1/listings/{listing_id}/pause", headers=seller)

        assert resp.status_code == 409
        assert resp.json()["code"] == 3004
