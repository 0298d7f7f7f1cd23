"""Integration tests: locations, broadcasting status and nearby-user search."""

from __future__ import annotations

from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from reign.db.models import Location, UserStatus

# NEAR is ~600 m north of ORIGIN, FAR ~11 km north.
ORIGIN = (48.8566, 2.3522)
NEAR = (48.8620, 2.3522)
FAR = (48.9566, 2.3522)


async def _user(client: AsyncClient, email: str, name: str | None = None) -> str:
    payload = {"email": email}
    if name:
        payload["name"] = name
    response = await client.post("/profiles", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]["user"]["id"]


async def _place(client: AsyncClient, user_id: str, point: tuple[float, float], broadcasting: bool = True):
    response = await client.post("/locations", json={"userId": user_id, "lat": point[0], "lng": point[1]})
    assert response.status_code == 200, response.text
    response = await client.post("/status/broadcasting", json={"userId": user_id, "is_broadcasting": broadcasting})
    assert response.status_code == 200, response.text


class TestUpsertLocation:

    @pytest.mark.asyncio
    async def test_one_row_per_user(self, client: AsyncClient, db_session: AsyncSession):
        user_id = await _user(client, "walker@example.com")

        first = await client.post("/locations", json={"userId": user_id, "lat": 1.0, "lng": 2.0})
        second = await client.post("/locations", json={"userId": user_id, "latitude": 3.0, "longitude": 4.0})
        assert first.status_code == 200
        assert second.json()["message"] == "Location saved successfully"
        assert second.json()["data"]["latitude"] == 3.0
        assert second.json()["data"]["longitude"] == 4.0

        rows = await db_session.scalar(select(func.count(Location.id)).where(Location.user_id == user_id))
        assert rows == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("lat,lng,error", [
        (91, 0, "Invalid latitude"),
        (-90.5, 0, "Invalid latitude"),
        (0, 181, "Invalid longitude"),
    ])
    async def test_out_of_range(self, client: AsyncClient, lat, lng, error):
        user_id = await _user(client, "range@example.com")
        response = await client.post("/locations", json={"userId": user_id, "lat": lat, "lng": lng})
        assert response.status_code == 400
        assert response.json()["error"] == error

    @pytest.mark.asyncio
    async def test_unknown_user(self, client: AsyncClient):
        response = await client.post("/locations", json={
            "userId": "3f2b8c1e-9a4d-4e6f-8b2a-1c3d5e7f9a0b", "lat": 0, "lng": 0,
        })
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_missing_fields(self, client: AsyncClient):
        response = await client.post("/locations", json={"userId": "3f2b8c1e-9a4d-4e6f-8b2a-1c3d5e7f9a0b"})
        assert response.status_code == 400
        assert response.json()["error"] == "Missing or invalid fields"


class TestNearbyLocations:

    @pytest.mark.asyncio
    async def test_radius_filters_by_great_circle_distance(self, client: AsyncClient):
        near = await _user(client, "near@example.com", "Near")
        far = await _user(client, "far@example.com")
        await _place(client, near, NEAR)
        await _place(client, far, FAR)

        response = await client.get("/locations/nearby", params={"lat": ORIGIN[0], "lng": ORIGIN[1], "radius": 2})
        assert response.status_code == 200
        rows = response.json()
        assert [r["userId"] for r in rows] == [near]
        assert rows[0]["displayName"] == "Near"
        assert rows[0]["isBroadcasting"] is True

        wide = await client.get("/locations/nearby", params={"lat": ORIGIN[0], "lng": ORIGIN[1], "radius": 20})
        assert {r["userId"] for r in wide.json()} == {near, far}

    @pytest.mark.asyncio
    async def test_radius_boundary_is_in_kilometers(self, client: AsyncClient):
        near = await _user(client, "edge@example.com")
        await _place(client, near, NEAR)

        inside = await client.get("/locations/nearby", params={"lat": ORIGIN[0], "lng": ORIGIN[1], "radius": 0.7})
        outside = await client.get("/locations/nearby", params={"lat": ORIGIN[0], "lng": ORIGIN[1], "radius": 0.5})
        assert [r["userId"] for r in inside.json()] == [near]
        assert outside.json() == []

    @pytest.mark.asyncio
    async def test_hidden_unless_broadcasting_and_recent(self, client: AsyncClient, db_session: AsyncSession):
        quiet = await _user(client, "quiet@example.com")
        stale = await _user(client, "stale@example.com")
        no_status = await _user(client, "nostatus@example.com")
        await _place(client, quiet, NEAR, broadcasting=False)
        await _place(client, stale, NEAR)
        await client.post("/locations", json={"userId": no_status, "lat": NEAR[0], "lng": NEAR[1]})

        await db_session.execute(
            update(UserStatus)
            .where(UserStatus.user_id == stale)
            .values(last_seen=func.now() - timedelta(minutes=4))
        )
        await db_session.commit()

        response = await client.get("/locations/nearby", params={"lat": ORIGIN[0], "lng": ORIGIN[1], "radius": 5})
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_users_without_location_never_match(self, client: AsyncClient):
        user_id = await _user(client, "nowhere@example.com")
        await client.post("/status/broadcasting", json={"userId": user_id, "is_broadcasting": True})
        response = await client.get("/locations/nearby", params={"lat": 0, "lng": 0, "radius": 20000})
        assert response.json() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params,error", [
        ({"lat": 0, "lng": 0, "radius": 0}, "Invalid radius"),
        ({"lat": 0, "lng": 0, "radius": -3}, "Invalid radius"),
        ({"lat": 95, "lng": 0, "radius": 1}, "Invalid latitude"),
    ])
    async def test_bad_query(self, client: AsyncClient, params, error):
        response = await client.get("/locations/nearby", params=params)
        assert response.status_code == 400
        assert response.json()["error"] == error

    @pytest.mark.asyncio
    async def test_non_numeric_query(self, client: AsyncClient):
        response = await client.get("/locations/nearby", params={"lat": "north", "lng": 0, "radius": 1})
        assert response.status_code == 400


class TestStatus:

    @pytest.mark.asyncio
    async def test_default_offline(self, client: AsyncClient):
        user_id = await _user(client, "silent@example.com")
        response = await client.get(f"/status/{user_id}")
        assert response.status_code == 200
        data = response.json()
        assert data["isOnline"] is False
        assert data["isBroadcasting"] is False
        assert data["lastSeen"] is None

    @pytest.mark.asyncio
    async def test_heartbeat_creates_non_broadcasting_row(self, client: AsyncClient):
        user_id = await _user(client, "beat@example.com")
        response = await client.post("/status/heartbeat", json={"userId": user_id})
        assert response.status_code == 200
        assert response.json()["data"]["isBroadcasting"] is False

        status = (await client.get(f"/status/{user_id}")).json()
        assert status["isOnline"] is True
        assert status["isBroadcasting"] is False

    @pytest.mark.asyncio
    async def test_heartbeat_keeps_broadcasting_flag(self, client: AsyncClient):
        user_id = await _user(client, "flag@example.com")
        on = await client.post("/status/broadcasting", json={"userId": user_id, "is_broadcasting": True})
        assert on.json()["message"] == "Broadcasting status enabled"

        await client.post("/status/heartbeat", json={"userId": user_id})
        status = (await client.get(f"/status/{user_id}")).json()
        assert status["isBroadcasting"] is True

    @pytest.mark.asyncio
    async def test_offline_after_window(self, client: AsyncClient, db_session: AsyncSession):
        user_id = await _user(client, "gone@example.com")
        await client.post("/status/heartbeat", json={"userId": user_id})
        await db_session.execute(
            update(UserStatus)
            .where(UserStatus.user_id == user_id)
            .values(last_seen=func.now() - timedelta(minutes=5))
        )
        await db_session.commit()

        status = (await client.get(f"/status/{user_id}")).json()
        assert status["isOnline"] is False

    @pytest.mark.asyncio
    async def test_broadcasting_requires_boolean(self, client: AsyncClient):
        user_id = await _user(client, "strict@example.com")
        response = await client.post("/status/broadcasting", json={"userId": user_id, "is_broadcasting": "yes"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_user(self, client: AsyncClient):
        response = await client.post("/status/heartbeat", json={"userId": "3f2b8c1e-9a4d-4e6f-8b2a-1c3d5e7f9a0b"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_malformed_id(self, client: AsyncClient):
        response = await client.get("/status/not-a-uuid")
        assert response.status_code == 400
