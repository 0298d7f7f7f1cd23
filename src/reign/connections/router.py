"""Connection endpoints. Mounted at the root: ``/connect`` and ``/connections``."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from reign.connections.schemas import ConnectData, ConnectRequest
from reign.connections.service import connect, list_connections
from reign.database import get_session
from reign.db.enums import ConnectionStatus
from reign.schemas import OkResponse
from reign.validators import require_uuid

router = APIRouter(tags=["Connections"])


def _connect_message(created: bool, status: str) -> str:
    if created:
        return "Connected successfully"
    if status == ConnectionStatus.CONNECTED.value:
        return "Already connected"
    return f"Connection already exists with status {status}"


@router.post("/connect", response_model=OkResponse[ConnectData])
async def connect_endpoint(
    body: ConnectRequest,
    db: AsyncSession = Depends(get_session),
):
    """Connect two users. Repeating the call is harmless."""
    from_user = require_uuid(body.from_user, "fromUser")
    to_user = require_uuid(body.to_user, "toUser")
    created, status = await connect(db, from_user, to_user)
    await db.commit()
    return OkResponse[ConnectData](
        message=_connect_message(created, status),
        data=ConnectData(created=created, status=status),
    )


@router.get("/connections/{user_id}", response_model=list[str])
async def list_connections_endpoint(
    user_id: str,
    db: AsyncSession = Depends(get_session),
):
    """Ids of every user connected to ``user_id``."""
    return await list_connections(db, require_uuid(user_id))
