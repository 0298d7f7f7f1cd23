"""Broadcasting flag and heartbeat tracking.

"Online" is never stored. It is derived from ``last_seen`` each time
status is read.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert

from reign.config import get_settings
from reign.db.models import UserStatus
from reign.users.service import require_user

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


def is_online(last_seen: datetime | None, now: datetime | None = None) -> bool:
    """Whether a heartbeat at ``last_seen`` still counts as online."""
    if last_seen is None:
        return False
    now = now or datetime.now(timezone.utc)
    return now - last_seen <= timedelta(minutes=get_settings().online_window_minutes)


def seen_recently() -> ColumnElement[bool]:
    """SQL form of ``is_online``: ``last_seen`` inside the window, boundary included."""
    window = timedelta(minutes=get_settings().online_window_minutes)
    return UserStatus.last_seen >= func.now() - window


async def _upsert_status(db: AsyncSession, user_id: str, is_broadcasting: bool | None) -> UserStatus:
    insert_values = {
        "user_id": user_id,
        "is_broadcasting": bool(is_broadcasting),
        "last_seen": func.now(),
    }
    update_values = {"last_seen": func.now(), "updated_at": func.now()}
    if is_broadcasting is not None:
        update_values["is_broadcasting"] = is_broadcasting

    stmt = (
        pg_insert(UserStatus)
        .values(**insert_values)
        .on_conflict_do_update(index_elements=[UserStatus.user_id], set_=update_values)
        .returning(UserStatus)
    )
    result = await db.execute(stmt.execution_options(populate_existing=True))
    return result.scalar_one()


async def set_broadcasting(db: AsyncSession, user_id: str, is_broadcasting: bool) -> UserStatus:
    """
    Turn discoverability on or off, refreshing the heartbeat.

    Raises:
        UserNotFoundError: If the user does not exist.
    """
    await require_user(db, user_id)
    status = await _upsert_status(db, user_id, is_broadcasting)
    logger.info("broadcasting_changed", user_id=user_id, is_broadcasting=is_broadcasting)
    return status


async def heartbeat(db: AsyncSession, user_id: str) -> UserStatus:
    """
    Refresh ``last_seen`` only. A missing row is created not broadcasting.

    Raises:
        UserNotFoundError: If the user does not exist.
    """
    await require_user(db, user_id)
    return await _upsert_status(db, user_id, None)


async def get_status(db: AsyncSession, user_id: str) -> UserStatus | None:
    """
    Get the status row of an existing user, or None if it never reported.

    Raises:
        UserNotFoundError: If the user does not exist.
    """
    await require_user(db, user_id)
    result = await db.execute(select(UserStatus).where(UserStatus.user_id == user_id))
    return result.scalar_one_or_none()
