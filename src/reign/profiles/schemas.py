"""Pydantic schemas for profile endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import EmailStr, Field, field_validator

from reign.schemas import CamelModel

# --- Requests ---


class CreateProfileRequest(CamelModel):
    email: EmailStr
    name: str | None = Field(None, max_length=255)
    items: list[Any] | None = None
    profile_image: str | None = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower().strip()


class UpdateProfileRequest(CamelModel):
    name: str | None = Field(None, max_length=255)
    email: EmailStr | None = None
    items: list[Any] | None = None
    mood_badges: list[Any] | None = None
    profile_image: str | None = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str | None) -> str | None:
        """Normalize email to lowercase."""
        return v.lower().strip() if v is not None else None


# --- Responses ---


class UserResponse(CamelModel):
    id: str
    email: str
    name: str | None = None
    created_at: datetime
    updated_at: datetime


class ProfileItemResponse(CamelModel):
    id: str
    item_type: str
    item_data: Any
    created_at: datetime
    updated_at: datetime


class LocationSnapshot(CamelModel):
    latitude: float
    longitude: float
    updated_at: datetime


class LastPingSnapshot(CamelModel):
    mood: str
    updated_at: datetime


class MoodBadgeResponse(CamelModel):
    id: str
    mood: str
    category: str
    value: str
    created_at: datetime


class ProfileCreatedData(CamelModel):
    user: UserResponse
    items: list[ProfileItemResponse] = []
    profile_image: str | None = None


class ProfileResponse(CamelModel):
    user_id: str
    email: str
    name: str | None = None
    display_name: str
    created_at: datetime
    updated_at: datetime
    items: list[ProfileItemResponse] = []
    profile_image: str | None = None
    location: LocationSnapshot | None = None
    last_ping: LastPingSnapshot | None = None
    mood_badges: list[MoodBadgeResponse] = []
