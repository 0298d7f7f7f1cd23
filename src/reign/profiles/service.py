"""Profile business logic.

Profiles aggregate a user row with its profile items, a single profile
image (stored as a ``profile_image`` item), the current location, the
latest ping and mood badges. Writes run in the caller's transaction; all
input checks happen before the first statement is issued.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from reign.config import get_settings
from reign.db.enums import PROFILE_IMAGE_ITEM_TYPE
from reign.db.errors import violated_constraint
from reign.db.models import Location, MoodBadge, Ping, ProfileItem, User
from reign.errors import DuplicateEmailError, InvalidRequestError, UserNotFoundError
from reign.profiles.images import validate_profile_image
from reign.profiles.items import (
    MoodBadgeInput,
    ProfileItemInput,
    normalize_items,
    normalize_mood_badges,
)
from reign.users.service import get_user, get_user_by_email, require_user
from reign.validators import is_valid_uuid

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

EMAIL_CONSTRAINT = "users_email_key"


@dataclass
class Profile:
    """Everything GET /profiles returns for one user."""

    user: User
    items: list[ProfileItem] = field(default_factory=list)
    image: ProfileItem | None = None
    location: Location | None = None
    last_ping: Ping | None = None
    mood_badges: list[MoodBadge] = field(default_factory=list)

    @property
    def image_data(self) -> str | None:
        if self.image is None or not isinstance(self.image.item_data, dict):
            return None
        return self.image.item_data.get("imageData")


def _duplicate_email(email: str) -> DuplicateEmailError:
    return DuplicateEmailError(f"The email address {email} is already registered")


async def _flush_user(db: AsyncSession, email: str) -> None:
    """Flush pending user changes, remapping the email unique violation."""
    try:
        await db.flush()
    except IntegrityError as e:
        if violated_constraint(e) == EMAIL_CONSTRAINT:
            raise _duplicate_email(email) from e
        raise


async def _insert_items(db: AsyncSession, user_id: str, items: list[ProfileItemInput]) -> list[ProfileItem]:
    rows = [ProfileItem(user_id=user_id, item_type=i.item_type, item_data=i.item_data) for i in items]
    db.add_all(rows)
    await db.flush()
    return rows


async def _replace_image(db: AsyncSession, user_id: str, image: str) -> ProfileItem:
    """Delete-then-insert so a user never holds more than one image."""
    await db.execute(
        delete(ProfileItem)
        .where(ProfileItem.user_id == user_id)
        .where(ProfileItem.item_type == PROFILE_IMAGE_ITEM_TYPE)
    )
    row = ProfileItem(user_id=user_id, item_type=PROFILE_IMAGE_ITEM_TYPE, item_data={"imageData": image})
    db.add(row)
    await db.flush()
    return row


async def _replace_mood_badges(db: AsyncSession, user_id: str, badges: list[MoodBadgeInput]) -> None:
    await db.execute(delete(MoodBadge).where(MoodBadge.user_id == user_id))
    db.add_all(MoodBadge(user_id=user_id, mood=b.mood, category=b.category, value=b.value) for b in badges)
    await db.flush()


async def create_profile(
    db: AsyncSession,
    email: str,
    name: str | None = None,
    items: list[Any] | None = None,
    profile_image: str | None = None,
) -> Profile:
    """
    Create a user with optional profile items and profile image.

    Raises:
        InvalidItemError: If any item matches neither accepted shape.
        InvalidImageError: If the image is not an acceptable JPEG data URI.
        DuplicateEmailError: If the email is already registered.
    """
    normalized = normalize_items(items or [])
    if profile_image is not None:
        validate_profile_image(profile_image, get_settings().profile_image_max_bytes)

    if await get_user_by_email(db, email) is not None:
        raise _duplicate_email(email)

    user = User(email=email, name=name or None)
    db.add(user)
    await _flush_user(db, email)

    created_items = await _insert_items(db, user.id, normalized)
    image = await _replace_image(db, user.id, profile_image) if profile_image is not None else None

    logger.info("profile_created", user_id=user.id, items=len(created_items), has_image=image is not None)
    return Profile(user=user, items=created_items, image=image)


async def resolve_user(db: AsyncSession, identifier: str) -> User:
    """
    Find a user by UUID or by email address.

    Raises:
        InvalidRequestError: If the identifier is neither.
        UserNotFoundError: If no such user exists.
    """
    if is_valid_uuid(identifier):
        user = await get_user(db, identifier.lower())
    elif "@" in identifier:
        user = await get_user_by_email(db, identifier)
    else:
        raise InvalidRequestError("Identifier must be a user UUID or an email address", error="Invalid id")

    if user is None:
        raise UserNotFoundError(details=f"No user exists with id or email {identifier}")
    return user


async def load_profile(db: AsyncSession, user: User) -> Profile:
    """Aggregate a user's profile from its owned rows."""
    items_result = await db.execute(
        select(ProfileItem)
        .where(ProfileItem.user_id == user.id)
        .where(ProfileItem.item_type != PROFILE_IMAGE_ITEM_TYPE)
        .order_by(ProfileItem.created_at.desc())
    )
    image_result = await db.execute(
        select(ProfileItem)
        .where(ProfileItem.user_id == user.id)
        .where(ProfileItem.item_type == PROFILE_IMAGE_ITEM_TYPE)
        .order_by(ProfileItem.created_at.desc())
        .limit(1)
    )
    location_result = await db.execute(
        select(Location).where(Location.user_id == user.id).order_by(Location.created_at.desc()).limit(1)
    )
    ping_result = await db.execute(
        select(Ping).where(Ping.user_id == user.id).order_by(Ping.created_at.desc()).limit(1)
    )
    badges_result = await db.execute(
        select(MoodBadge).where(MoodBadge.user_id == user.id).order_by(MoodBadge.created_at.desc())
    )

    return Profile(
        user=user,
        items=list(items_result.scalars().all()),
        image=image_result.scalar_one_or_none(),
        location=location_result.scalar_one_or_none(),
        last_ping=ping_result.scalar_one_or_none(),
        mood_badges=list(badges_result.scalars().all()),
    )


async def get_profile(db: AsyncSession, identifier: str) -> Profile:
    """Get the aggregated profile by UUID or email."""
    user = await resolve_user(db, identifier)
    return await load_profile(db, user)


async def update_profile(
    db: AsyncSession,
    user_id: str,
    name: str | None = None,
    email: str | None = None,
    items: list[Any] | None = None,
    mood_badges: list[Any] | None = None,
    profile_image: str | None = None,
) -> Profile:
    """
    Partially update a profile. ``None`` means "leave unchanged".

    Supplied ``items`` replace every non-image item, supplied
    ``mood_badges`` replace every badge, and a supplied ``profile_image``
    replaces the current image.

    Raises:
        UserNotFoundError: If the user does not exist.
        DuplicateEmailError: If the new email belongs to another user.
        InvalidItemError / InvalidMoodBadgeError / InvalidImageError: On bad input.
    """
    normalized_items = normalize_items(items) if items is not None else None
    normalized_badges = normalize_mood_badges(mood_badges) if mood_badges is not None else None
    if profile_image is not None:
        validate_profile_image(profile_image, get_settings().profile_image_max_bytes)

    user = await require_user(db, user_id)

    if email is not None and email != user.email:
        existing = await get_user_by_email(db, email)
        if existing is not None and existing.id != user.id:
            raise _duplicate_email(email)
        user.email = email
    if name is not None:
        user.name = name
    user.updated_at = datetime.now(timezone.utc)
    await _flush_user(db, user.email)

    if normalized_items is not None:
        await db.execute(
            delete(ProfileItem)
            .where(ProfileItem.user_id == user.id)
            .where(ProfileItem.item_type != PROFILE_IMAGE_ITEM_TYPE)
        )
        await _insert_items(db, user.id, normalized_items)

    if normalized_badges is not None:
        await _replace_mood_badges(db, user.id, normalized_badges)

    if profile_image is not None:
        await _replace_image(db, user.id, profile_image)

    logger.info(
        "profile_updated",
        user_id=user.id,
        items_replaced=normalized_items is not None,
        badges_replaced=normalized_badges is not None,
        image_replaced=profile_image is not None,
    )
    return await load_profile(db, user)
