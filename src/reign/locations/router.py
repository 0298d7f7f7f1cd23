"""Location endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from reign.database import get_session
from reign.locations.schemas import LocationData, NearbyUserResponse, UpsertLocationRequest
from reign.locations.service import find_nearby_users, upsert_location
from reign.schemas import OkResponse
from reign.validators import require_uuid

router = APIRouter(prefix="/locations", tags=["Locations"])


@router.post("", response_model=OkResponse[LocationData])
async def upsert_location_endpoint(
    body: UpsertLocationRequest,
    db: AsyncSession = Depends(get_session),
):
    """Save the caller's current position, replacing any previous one."""
    user_id = require_uuid(body.user_id)
    location = await upsert_location(db, user_id, body.latitude, body.longitude)
    await db.commit()
    return OkResponse[LocationData](
        message="Location saved successfully",
        data=LocationData(
            user_id=location.user_id,
            latitude=location.latitude,
            longitude=location.longitude,
            updated_at=location.created_at,
        ),
    )


@router.get("/nearby", response_model=list[NearbyUserResponse])
async def nearby_locations_endpoint(
    lat: float = Query(...),
    lng: float = Query(...),
    radius: float = Query(..., description="Search radius in kilometers"),
    db: AsyncSession = Depends(get_session),
):
    """Broadcasting, recently seen users within ``radius`` km of a point."""
    users = await find_nearby_users(db, lat, lng, radius)
    return [
        NearbyUserResponse(
            user_id=u.user_id,
            email=u.email,
            name=u.name,
            display_name=u.display_name,
            latitude=u.latitude,
            longitude=u.longitude,
            location_updated_at=u.location_updated_at,
            last_seen=u.last_seen,
            is_broadcasting=u.is_broadcasting,
        )
        for u in users
    ]
