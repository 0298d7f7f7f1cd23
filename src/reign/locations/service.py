"""Current-location upserts and broadcasting-aware proximity search."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert

from reign.db.models import Location, User, UserStatus
from reign.geo import within_radius
from reign.status.service import seen_recently
from reign.users.service import require_user
from reign.validators import validate_coordinates, validate_radius

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


@dataclass(frozen=True)
class NearbyUser:
    user_id: str
    email: str
    name: str | None
    latitude: float
    longitude: float
    location_updated_at: datetime
    last_seen: datetime
    is_broadcasting: bool

    @property
    def display_name(self) -> str:
        return self.name or self.email


async def upsert_location(db: AsyncSession, user_id: str, latitude: float, longitude: float) -> Location:
    """
    Insert or overwrite the single location row of a user.

    Raises:
        InvalidCoordinateError: If latitude or longitude is out of range.
        UserNotFoundError: If the user does not exist.
    """
    validate_coordinates(latitude, longitude)
    await require_user(db, user_id)

    stmt = (
        pg_insert(Location)
        .values(user_id=user_id, latitude=latitude, longitude=longitude, created_at=func.now())
        .on_conflict_do_update(
            constraint="unique_user_location",
            set_={"latitude": latitude, "longitude": longitude, "created_at": func.now()},
        )
        .returning(Location)
    )
    result = await db.execute(stmt.execution_options(populate_existing=True))
    location = result.scalar_one()
    logger.info("location_updated", user_id=user_id)
    return location


async def find_nearby_users(
    db: AsyncSession, latitude: float, longitude: float, radius_km: float
) -> list[NearbyUser]:
    """
    Users within ``radius_km`` that are broadcasting and were seen recently.

    Only users with a location and a status row can match. Newest location first.
    """
    validate_coordinates(latitude, longitude)
    validate_radius(radius_km)

    result = await db.execute(
        select(
            User.id,
            User.email,
            User.name,
            Location.latitude,
            Location.longitude,
            Location.created_at,
            UserStatus.last_seen,
            UserStatus.is_broadcasting,
        )
        .select_from(Location)
        .join(User, User.id == Location.user_id)
        .join(UserStatus, UserStatus.user_id == User.id)
        .where(within_radius(Location.latitude, Location.longitude, latitude, longitude, radius_km))
        .where(UserStatus.is_broadcasting.is_(True))
        .where(seen_recently())
        .order_by(Location.created_at.desc())
    )
    return [NearbyUser(*row) for row in result.all()]
