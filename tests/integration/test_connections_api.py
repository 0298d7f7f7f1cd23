"""Integration tests: connect and list connections."""

from __future__ import annotations

import pytest
from httpx import AsyncClient
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from reign.db.models import Connection

MISSING = "3f2b8c1e-9a4d-4e6f-8b2a-1c3d5e7f9a0b"


async def _user(client: AsyncClient, email: str) -> str:
    response = await client.post("/profiles", json={"email": email})
    assert response.status_code == 201, response.text
    return response.json()["data"]["user"]["id"]


class TestConnect:

    @pytest.mark.asyncio
    async def test_connect_is_idempotent(self, client: AsyncClient, db_session: AsyncSession):
        a = await _user(client, "a@example.com")
        b = await _user(client, "b@example.com")

        first = await client.post("/connect", json={"fromUser": a, "toUser": b})
        second = await client.post("/connect", json={"fromUser": a, "toUser": b})
        assert first.status_code == 200
        assert first.json()["message"] == "Connected successfully"
        assert first.json()["data"]["created"] is True
        assert first.json()["data"]["status"] == "connected"
        assert second.status_code == 200
        assert second.json()["message"] == "Already connected"
        assert second.json()["data"]["created"] is False
        assert second.json()["data"]["status"] == "connected"

        rows = await db_session.scalar(
            select(func.count(Connection.id)).where(or_(Connection.from_user == a, Connection.to_user == a))
        )
        assert rows == 1
        assert (await client.get(f"/connections/{a}")).json() == [b]

    @pytest.mark.asyncio
    async def test_reverse_direction_is_already_connected(self, client: AsyncClient):
        a = await _user(client, "fwd@example.com")
        b = await _user(client, "rev@example.com")
        await client.post("/connect", json={"fromUser": a, "toUser": b})

        response = await client.post("/connect", json={"fromUser": b, "toUser": a})
        assert response.json()["message"] == "Already connected"
        assert (await client.get(f"/connections/{b}")).json() == [a]

    @pytest.mark.asyncio
    async def test_pending_edge_reports_its_status(self, client: AsyncClient, db_session: AsyncSession):
        a = await _user(client, "asker@example.com")
        b = await _user(client, "undecided@example.com")
        db_session.add(Connection(from_user=b, to_user=a, status="pending"))
        await db_session.commit()

        response = await client.post("/connect", json={"fromUser": a, "toUser": b})
        assert response.status_code == 200
        assert response.json()["message"] == "Connection already exists with status pending"
        assert response.json()["data"] == {"created": False, "status": "pending"}
        assert (await client.get(f"/connections/{a}")).json() == []

    @pytest.mark.asyncio
    async def test_self_connection(self, client: AsyncClient):
        a = await _user(client, "self@example.com")
        response = await client.post("/connect", json={"fromUser": a, "toUser": a})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid connection"

    @pytest.mark.asyncio
    async def test_missing_user(self, client: AsyncClient):
        a = await _user(client, "lonely@example.com")
        response = await client.post("/connect", json={"fromUser": a, "toUser": MISSING})
        assert response.status_code == 404
        assert response.json() == {"error": "User not found", "details": "One or both users do not exist"}

    @pytest.mark.asyncio
    async def test_malformed_ids(self, client: AsyncClient):
        response = await client.post("/connect", json={"fromUser": "abc", "toUser": MISSING})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid fromUser"


class TestListConnections:

    @pytest.mark.asyncio
    async def test_both_directions(self, client: AsyncClient):
        hub = await _user(client, "hub@example.com")
        out = await _user(client, "out@example.com")
        inbound = await _user(client, "in@example.com")
        await _user(client, "stranger@example.com")
        await client.post("/connect", json={"fromUser": hub, "toUser": out})
        await client.post("/connect", json={"fromUser": inbound, "toUser": hub})

        response = await client.get(f"/connections/{hub}")
        assert response.status_code == 200
        assert sorted(response.json()) == sorted([out, inbound])

    @pytest.mark.asyncio
    async def test_no_connections(self, client: AsyncClient):
        a = await _user(client, "none@example.com")
        assert (await client.get(f"/connections/{a}")).json() == []

    @pytest.mark.asyncio
    async def test_unknown_user(self, client: AsyncClient):
        response = await client.get(f"/connections/{MISSING}")
        assert response.status_code == 404
