"""Validation workflow endpoints under ``/validation``."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from reign.database import get_session
from reign.errors import RequestExpiredError
from reign.validations.schemas import (
    ItemCount,
    MessageResponse,
    PendingRequestResponse,
    ProfileItemSnapshot,
    RequestValidationRequest,
    RespondToValidationRequest,
    ValidatableUserResponse,
    ValidationRequestCreated,
    ValidationSummaryResponse,
)
from reign.validations.service import (
    list_pending,
    list_validatable,
    request_validation,
    respond_to_validation,
    summarize,
)
from reign.validators import require_uuid

router = APIRouter(prefix="/validation", tags=["Validation"])


@router.get("/nearby", response_model=list[ValidatableUserResponse])
async def validatable_users_endpoint(
    user_id: str = Query(..., alias="userId"),
    db: AsyncSession = Depends(get_session),
):
    """Connected peers the user can ask for validation."""
    users = await list_validatable(db, require_uuid(user_id))
    return [
        ValidatableUserResponse(
            user_id=u.user_id,
            name=u.name,
            email=u.email,
            display_name=u.display_name,
            profile_items=[ProfileItemSnapshot(item_type=t, item_data=d) for t, d in u.profile_items],
            connection_state=u.connection_state,
            validation_count=u.validation_count,
        )
        for u in users
    ]


@router.post("/request", response_model=ValidationRequestCreated, status_code=201)
async def request_validation_endpoint(
    body: RequestValidationRequest,
    db: AsyncSession = Depends(get_session),
):
    from_user_id = require_uuid(body.from_user_id, "fromUserId")
    to_user_id = require_uuid(body.to_user_id, "toUserId")
    request = await request_validation(db, from_user_id, to_user_id, body.category, body.specific_item)
    await db.commit()
    return ValidationRequestCreated(
        request_id=request.id,
        created_at=request.created_at,
        expires_at=request.expires_at,
        message="Validation request sent successfully",
    )


@router.post("/respond", response_model=MessageResponse)
async def respond_to_validation_endpoint(
    body: RespondToValidationRequest,
    db: AsyncSession = Depends(get_session),
):
    request_id = require_uuid(body.request_id, "requestId")
    try:
        request = await respond_to_validation(db, request_id, body.response)
    except RequestExpiredError:
        # The answer is refused but the request stays expired.
        await db.commit()
        raise
    await db.commit()
    return MessageResponse(message=f"Validation request {request.status} successfully")


@router.get("/pending/{user_id}", response_model=list[PendingRequestResponse])
async def pending_requests_endpoint(
    user_id: str,
    db: AsyncSession = Depends(get_session),
):
    """Requests waiting for this user's answer, newest first."""
    pending = await list_pending(db, require_uuid(user_id))
    # Commits requests that were found expired while listing.
    await db.commit()
    return [
        PendingRequestResponse(
            id=p.id,
            from_user_id=p.from_user_id,
            category=p.category,
            specific_item=p.specific_item,
            created_at=p.created_at,
            expires_at=p.expires_at,
            requester_name=p.requester_name,
            requester_email=p.requester_email,
            requester_display_name=p.requester_display_name,
        )
        for p in pending
    ]


@router.get("/summary/{user_id}", response_model=ValidationSummaryResponse)
async def validation_summary_endpoint(
    user_id: str,
    db: AsyncSession = Depends(get_session),
):
    summary = await summarize(db, require_uuid(user_id))
    return ValidationSummaryResponse(
        user_id=summary.user_id,
        total_validations=summary.total_validations,
        category_breakdown=summary.category_breakdown,
        item_breakdown={
            category: [ItemCount(item=item, validation_count=n) for item, n in items]
            for category, items in summary.item_breakdown.items()
        },
    )
