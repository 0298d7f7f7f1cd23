"""Pydantic schemas for the validation workflow endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from reign.schemas import CamelModel


class RequestValidationRequest(CamelModel):
    from_user_id: str
    to_user_id: str
    category: str
    specific_item: str = Field(..., min_length=1)


class RespondToValidationRequest(CamelModel):
    request_id: str
    response: str


class ValidationRequestCreated(CamelModel):
    request_id: str
    created_at: datetime
    expires_at: datetime
    message: str


class MessageResponse(CamelModel):
    message: str


class ProfileItemSnapshot(CamelModel):
    item_type: str
    item_data: Any


class ValidatableUserResponse(CamelModel):
    user_id: str
    name: str | None = None
    email: str
    display_name: str
    profile_items: list[ProfileItemSnapshot] = []
    connection_state: str
    validation_count: int


class PendingRequestResponse(CamelModel):
    id: str
    from_user_id: str
    category: str
    specific_item: str
    created_at: datetime
    expires_at: datetime
    requester_name: str | None = None
    requester_email: str
    requester_display_name: str


class ItemCount(CamelModel):
    item: str
    validation_count: int


class ValidationSummaryResponse(CamelModel):
    user_id: str
    total_validations: int
    category_breakdown: dict[str, int]
    item_breakdown: dict[str, list[ItemCount]]
