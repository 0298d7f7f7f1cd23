"""Presence endpoints: broadcasting toggle, heartbeat, status lookup."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from reign.database import get_session
from reign.db.models import UserStatus
from reign.schemas import OkResponse
from reign.status.schemas import BroadcastingRequest, HeartbeatRequest, StatusData, UserStatusResponse
from reign.status.service import get_status, heartbeat, is_online, set_broadcasting
from reign.validators import require_uuid

router = APIRouter(prefix="/status", tags=["Status"])


def _status_data(status: UserStatus) -> StatusData:
    return StatusData(
        user_id=status.user_id,
        is_broadcasting=status.is_broadcasting,
        last_seen=status.last_seen,
        updated_at=status.updated_at,
    )


@router.post("/broadcasting", response_model=OkResponse[StatusData])
async def broadcasting_endpoint(
    body: BroadcastingRequest,
    db: AsyncSession = Depends(get_session),
):
    user_id = require_uuid(body.user_id)
    status = await set_broadcasting(db, user_id, body.is_broadcasting)
    await db.commit()
    state = "enabled" if body.is_broadcasting else "disabled"
    return OkResponse[StatusData](message=f"Broadcasting status {state}", data=_status_data(status))


@router.post("/heartbeat", response_model=OkResponse[StatusData])
async def heartbeat_endpoint(
    body: HeartbeatRequest,
    db: AsyncSession = Depends(get_session),
):
    user_id = require_uuid(body.user_id)
    status = await heartbeat(db, user_id)
    await db.commit()
    return OkResponse[StatusData](message="Heartbeat updated", data=_status_data(status))


@router.get("/{user_id}", response_model=UserStatusResponse)
async def get_status_endpoint(
    user_id: str,
    db: AsyncSession = Depends(get_session),
):
    """Current presence of a user. Users that never reported are offline."""
    user_id = require_uuid(user_id)
    status = await get_status(db, user_id)
    if status is None:
        return UserStatusResponse(
            user_id=user_id,
            message="No status record found - user defaults to offline",
        )
    return UserStatusResponse(
        user_id=status.user_id,
        is_broadcasting=status.is_broadcasting,
        last_seen=status.last_seen,
        is_online=is_online(status.last_seen),
        created_at=status.created_at,
        updated_at=status.updated_at,
    )
