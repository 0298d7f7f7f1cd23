"""Pydantic schemas for connection endpoints."""

from __future__ import annotations

from reign.schemas import CamelModel


class ConnectRequest(CamelModel):
    from_user: str
    to_user: str


class ConnectData(CamelModel):
    created: bool
    status: str
