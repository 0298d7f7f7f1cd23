"""Ephemeral location-stamped pings.

A ping is visible to nearby search for ``ping_visibility_minutes`` after
it was created, and never to its own author.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import func, select

from reign.config import get_settings
from reign.db.enums import FILTERABLE_ITEM_TYPES, PingCategory
from reign.db.models import Ping, ProfileItem, User
from reign.errors import InvalidCategoryError
from reign.geo import distance_meters, within_radius
from reign.users.service import require_user
from reign.validators import validate_coordinates, validate_radius

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


@dataclass(frozen=True)
class NearbyPing:
    id: str
    user_id: str
    name: str | None
    email: str
    mood: str
    message: str
    category: str | None
    value: str | None
    latitude: float
    longitude: float
    created_at: datetime
    distance: int

    @property
    def display_name(self) -> str:
        return self.name or self.email


def parse_ping_category(category: str | None) -> PingCategory | None:
    if category is None:
        return None
    try:
        return PingCategory(category)
    except ValueError:
        allowed = ", ".join(c.value for c in PingCategory)
        raise InvalidCategoryError(f"Category must be one of: {allowed}") from None


async def create_ping(
    db: AsyncSession,
    user_id: str,
    message: str,
    mood: str,
    latitude: float,
    longitude: float,
    category: str | None = None,
    value: str | None = None,
) -> Ping:
    """
    Broadcast a ping from the given point.

    Raises:
        InvalidCoordinateError: If the point is out of range.
        InvalidCategoryError: If ``category`` is not skill, education or experience.
        UserNotFoundError: If the author does not exist.
    """
    validate_coordinates(latitude, longitude)
    parsed = parse_ping_category(category)
    await require_user(db, user_id)

    ping = Ping(
        user_id=user_id,
        message=message,
        mood=mood,
        latitude=latitude,
        longitude=longitude,
        category=parsed.value if parsed else None,
        value=value,
    )
    db.add(ping)
    await db.flush()
    logger.info("ping_created", ping_id=ping.id, user_id=user_id, category=ping.category)
    return ping


async def find_nearby_pings(
    db: AsyncSession,
    latitude: float,
    longitude: float,
    requester_id: str,
    radius_km: float | None = None,
) -> list[NearbyPing]:
    """Recent pings by other users within ``radius_km``, closest first then newest."""
    settings = get_settings()
    if radius_km is None:
        radius_km = settings.default_ping_radius_km
    validate_coordinates(latitude, longitude)
    validate_radius(radius_km)

    distance = distance_meters(Ping.latitude, Ping.longitude, latitude, longitude).label("distance")
    visible_since = func.now() - timedelta(minutes=settings.ping_visibility_minutes)
    result = await db.execute(
        select(
            Ping.id,
            Ping.user_id,
            User.name,
            User.email,
            Ping.mood,
            Ping.message,
            Ping.category,
            Ping.value,
            Ping.latitude,
            Ping.longitude,
            Ping.created_at,
            distance,
        )
        .select_from(Ping)
        .join(User, User.id == Ping.user_id)
        .where(Ping.user_id != requester_id)
        .where(Ping.created_at > visible_since)
        .where(within_radius(Ping.latitude, Ping.longitude, latitude, longitude, radius_km))
        .order_by(distance.asc(), Ping.created_at.desc())
    )
    return [NearbyPing(*row[:-1], distance=round(row.distance)) for row in result.all()]


async def list_filter_options(db: AsyncSession) -> dict[str, list[Any]]:
    """Distinct item payloads per filterable profile item type."""
    result = await db.execute(
        select(ProfileItem.item_type, ProfileItem.item_data)
        .where(ProfileItem.item_type.in_(FILTERABLE_ITEM_TYPES))
        .distinct()
    )
    options: dict[str, list[Any]] = {item_type: [] for item_type in FILTERABLE_ITEM_TYPES}
    for item_type, item_data in result.all():
        options[item_type].append(item_data)
    return options
