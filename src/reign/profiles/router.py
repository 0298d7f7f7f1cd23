"""Profile endpoints: create, read (by id or email), partial update."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from reign.database import get_session
from reign.db.models import MoodBadge, ProfileItem, User
from reign.profiles.schemas import (
    CreateProfileRequest,
    LastPingSnapshot,
    LocationSnapshot,
    MoodBadgeResponse,
    ProfileCreatedData,
    ProfileItemResponse,
    ProfileResponse,
    UpdateProfileRequest,
    UserResponse,
)
from reign.profiles.service import Profile, create_profile, get_profile, update_profile
from reign.schemas import OkResponse
from reign.validators import require_uuid

router = APIRouter(prefix="/profiles", tags=["Profiles"])


def _user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def _item_response(item: ProfileItem) -> ProfileItemResponse:
    return ProfileItemResponse(
        id=item.id,
        item_type=item.item_type,
        item_data=item.item_data,
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


def _badge_response(badge: MoodBadge) -> MoodBadgeResponse:
    return MoodBadgeResponse(
        id=badge.id,
        mood=badge.mood,
        category=badge.category,
        value=badge.value,
        created_at=badge.created_at,
    )


def _profile_response(profile: Profile) -> ProfileResponse:
    user = profile.user
    location = None
    if profile.location is not None:
        location = LocationSnapshot(
            latitude=profile.location.latitude,
            longitude=profile.location.longitude,
            updated_at=profile.location.created_at,
        )
    last_ping = None
    if profile.last_ping is not None:
        last_ping = LastPingSnapshot(mood=profile.last_ping.mood, updated_at=profile.last_ping.created_at)

    return ProfileResponse(
        user_id=user.id,
        email=user.email,
        name=user.name,
        display_name=user.display_name,
        created_at=user.created_at,
        updated_at=user.updated_at,
        items=[_item_response(i) for i in profile.items],
        profile_image=profile.image_data,
        location=location,
        last_ping=last_ping,
        mood_badges=[_badge_response(b) for b in profile.mood_badges],
    )


@router.post("", response_model=OkResponse[ProfileCreatedData], status_code=201)
async def create_profile_endpoint(
    body: CreateProfileRequest,
    db: AsyncSession = Depends(get_session),
):
    """Create a user with its initial profile items and optional image."""
    profile = await create_profile(db, body.email, body.name, body.items, body.profile_image)
    await db.commit()
    return OkResponse[ProfileCreatedData](
        message="Profile created successfully",
        data=ProfileCreatedData(
            user=_user_response(profile.user),
            items=[_item_response(i) for i in profile.items],
            profile_image=profile.image_data,
        ),
    )


@router.get("/{identifier}", response_model=ProfileResponse)
async def get_profile_endpoint(
    identifier: str,
    db: AsyncSession = Depends(get_session),
):
    """Get the aggregated profile of a user by UUID or email."""
    profile = await get_profile(db, identifier)
    return _profile_response(profile)


@router.put("/{user_id}", response_model=OkResponse[ProfileResponse])
async def update_profile_endpoint(
    user_id: str,
    body: UpdateProfileRequest,
    db: AsyncSession = Depends(get_session),
):
    """Partially update a profile; omitted fields stay unchanged."""
    user_id = require_uuid(user_id)
    profile = await update_profile(
        db,
        user_id,
        name=body.name,
        email=body.email,
        items=body.items,
        mood_badges=body.mood_badges,
        profile_image=body.profile_image,
    )
    await db.commit()
    return OkResponse[ProfileResponse](message="Profile updated successfully", data=_profile_response(profile))
