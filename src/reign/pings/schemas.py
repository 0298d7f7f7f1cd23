"""Pydantic schemas for ping endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, Field

from reign.schemas import CamelModel


class CreatePingRequest(CamelModel):
    user_id: str
    message: str = Field(..., min_length=1)
    mood: str = Field(..., min_length=1)
    latitude: float = Field(validation_alias=AliasChoices("latitude", "lat"))
    longitude: float = Field(validation_alias=AliasChoices("longitude", "lng"))
    category: str | None = None
    value: str | None = None


class PingData(CamelModel):
    id: str
    user_id: str
    message: str
    mood: str
    latitude: float
    longitude: float
    category: str | None = None
    value: str | None = None
    created_at: datetime


class NearbyPingResponse(CamelModel):
    id: str
    user_id: str
    name: str | None = None
    display_name: str
    mood: str
    message: str
    category: str | None = None
    value: str | None = None
    latitude: float
    longitude: float
    created_at: datetime
    distance: int


class FilterOptionsResponse(CamelModel):
    skill: list[Any] = []
    education: list[Any] = []
    experience: list[Any] = []
