"""Pydantic schemas for status endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, Field, StrictBool

from reign.schemas import CamelModel


class BroadcastingRequest(CamelModel):
    user_id: str
    is_broadcasting: StrictBool = Field(validation_alias=AliasChoices("is_broadcasting", "isBroadcasting"))


class HeartbeatRequest(CamelModel):
    user_id: str


class StatusData(CamelModel):
    user_id: str
    is_broadcasting: bool
    last_seen: datetime
    updated_at: datetime


class UserStatusResponse(CamelModel):
    user_id: str
    is_broadcasting: bool = False
    last_seen: datetime | None = None
    is_online: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    message: str | None = None
