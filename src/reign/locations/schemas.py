"""Pydantic schemas for location endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, Field

from reign.schemas import CamelModel


class UpsertLocationRequest(CamelModel):
    user_id: str
    latitude: float = Field(validation_alias=AliasChoices("lat", "latitude"))
    longitude: float = Field(validation_alias=AliasChoices("lng", "longitude"))


class LocationData(CamelModel):
    user_id: str
    latitude: float
    longitude: float
    updated_at: datetime


class NearbyUserResponse(CamelModel):
    user_id: str
    email: str
    name: str | None = None
    display_name: str
    latitude: float
    longitude: float
    location_updated_at: datetime
    last_seen: datetime
    is_broadcasting: bool
