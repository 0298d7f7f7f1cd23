"""Ping endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from reign.database import get_session
from reign.pings.schemas import CreatePingRequest, FilterOptionsResponse, NearbyPingResponse, PingData
from reign.pings.service import create_ping, find_nearby_pings, list_filter_options
from reign.schemas import OkResponse
from reign.validators import require_uuid

router = APIRouter(prefix="/pings", tags=["Pings"])


@router.post("", response_model=OkResponse[PingData])
async def create_ping_endpoint(
    body: CreatePingRequest,
    db: AsyncSession = Depends(get_session),
):
    user_id = require_uuid(body.user_id)
    ping = await create_ping(
        db,
        user_id,
        body.message,
        body.mood,
        body.latitude,
        body.longitude,
        category=body.category,
        value=body.value,
    )
    await db.commit()
    return OkResponse[PingData](
        message="Ping created successfully",
        data=PingData(
            id=ping.id,
            user_id=ping.user_id,
            message=ping.message,
            mood=ping.mood,
            latitude=ping.latitude,
            longitude=ping.longitude,
            category=ping.category,
            value=ping.value,
            created_at=ping.created_at,
        ),
    )


@router.get("/nearby", response_model=list[NearbyPingResponse])
async def nearby_pings_endpoint(
    lat: float = Query(...),
    lng: float = Query(...),
    user_id: str = Query(..., alias="userId"),
    radius: float | None = Query(None, description="Search radius in kilometers, defaults to 1"),
    db: AsyncSession = Depends(get_session),
):
    """Recent pings from other users around a point, closest first."""
    requester_id = require_uuid(user_id)
    pings = await find_nearby_pings(db, lat, lng, requester_id, radius_km=radius)
    return [
        NearbyPingResponse(
            id=p.id,
            user_id=p.user_id,
            name=p.name,
            display_name=p.display_name,
            mood=p.mood,
            message=p.message,
            category=p.category,
            value=p.value,
            latitude=p.latitude,
            longitude=p.longitude,
            created_at=p.created_at,
            distance=p.distance,
        )
        for p in pings
    ]


@router.get("/filter-options", response_model=FilterOptionsResponse)
async def filter_options_endpoint(db: AsyncSession = Depends(get_session)):
    """Distinct skill, education and experience payloads for client filter pickers."""
    options = await list_filter_options(db)
    return FilterOptionsResponse(**options)
