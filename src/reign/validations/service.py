"""Peer validation workflow.

A user asks a connected peer to vouch for one item on the peer's profile.
The peer approves or declines; an approval appends a ValidationRecord.
Expiry is evaluated lazily, when a request is listed or answered; nothing
sweeps stale rows in the background.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import Text, cast, func, select, update
from sqlalchemy.exc import IntegrityError

from reign.config import get_settings
from reign.connections.service import are_connected, peer_column, touches
from reign.db.enums import (
    PROFILE_IMAGE_ITEM_TYPE,
    ConnectionStatus,
    ValidationCategory,
    ValidationResponse,
    ValidationStatus,
)
from reign.db.errors import violated_constraint
from reign.db.models import Connection, ProfileItem, User, ValidationRecord, ValidationRequest
from reign.errors import (
    AlreadyValidatedError,
    DuplicateRequestError,
    InvalidCategoryError,
    InvalidRequestError,
    ItemNotFoundError,
    NotConnectedError,
    RequestExpiredError,
    RequestNotFoundError,
)
from reign.users.service import require_user, require_users
from reign.validations.states import is_expired, validate_transition

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

REQUEST_CONSTRAINT = "unique_validation_request"
RECORD_CONSTRAINT = "unique_validation_record"


@dataclass
class ValidatableUser:
    user_id: str
    name: str | None
    email: str
    validation_count: int
    profile_items: list[tuple[str, Any]] = field(default_factory=list)
    connection_state: str = ConnectionStatus.CONNECTED.value

    @property
    def display_name(self) -> str:
        return self.name or self.email


@dataclass(frozen=True)
class PendingRequest:
    id: str
    from_user_id: str
    category: str
    specific_item: str
    created_at: datetime
    expires_at: datetime
    requester_name: str | None
    requester_email: str

    @property
    def requester_display_name(self) -> str:
        return self.requester_name or self.requester_email


@dataclass
class ValidationSummary:
    user_id: str
    total_validations: int
    category_breakdown: dict[str, int]
    item_breakdown: dict[str, list[tuple[str, int]]]


def parse_category(category: str) -> ValidationCategory:
    try:
        return ValidationCategory(category)
    except ValueError:
        allowed = ", ".join(c.value for c in ValidationCategory)
        raise InvalidCategoryError(f"Category must be one of: {allowed}") from None


def parse_response(response: str) -> ValidationResponse:
    try:
        return ValidationResponse(response)
    except ValueError:
        raise InvalidRequestError(
            "Response must be either 'approved' or 'declined'", error="Invalid response"
        ) from None


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


async def list_validatable(db: AsyncSession, user_id: str) -> list[ValidatableUser]:
    """
    Connected peers of ``user_id`` with their profile items and validation counts.

    Raises:
        UserNotFoundError: If the user does not exist.
    """
    await require_user(db, user_id)

    peers = (
        select(peer_column(user_id).label("peer_id"))
        .where(touches(user_id))
        .where(Connection.status == ConnectionStatus.CONNECTED.value)
        .distinct()
        .subquery()
    )
    record_count = (
        select(func.count(ValidationRecord.id))
        .where(ValidationRecord.validated_user_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )
    result = await db.execute(
        select(User.id, User.name, User.email, record_count)
        .join(peers, peers.c.peer_id == User.id)
        .order_by(User.created_at)
    )
    users = [
        ValidatableUser(user_id=row[0], name=row[1], email=row[2], validation_count=int(row[3]))
        for row in result.all()
    ]
    if not users:
        return users

    by_id = {u.user_id: u for u in users}
    items = await db.execute(
        select(ProfileItem.user_id, ProfileItem.item_type, ProfileItem.item_data)
        .where(ProfileItem.user_id.in_(by_id))
        .where(ProfileItem.item_type != PROFILE_IMAGE_ITEM_TYPE)
        .order_by(ProfileItem.created_at.desc())
    )
    for owner_id, item_type, item_data in items.all():
        by_id[owner_id].profile_items.append((item_type, item_data))
    return users


async def expire_stale_requests(db: AsyncSession, user_id: str) -> int:
    """Mark pending requests addressed to ``user_id`` whose expiry has passed."""
    result = await db.execute(
        update(ValidationRequest)
        .where(ValidationRequest.to_user_id == user_id)
        .where(ValidationRequest.status == ValidationStatus.PENDING.value)
        .where(ValidationRequest.expires_at <= func.now())
        .values(status=ValidationStatus.EXPIRED.value, updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount:
        logger.info("validation_requests_expired", user_id=user_id, count=result.rowcount)
    return result.rowcount


async def list_pending(db: AsyncSession, user_id: str) -> list[PendingRequest]:
    """
    Pending, unexpired requests addressed to ``user_id``, newest first.

    Raises:
        UserNotFoundError: If the user does not exist.
    """
    await require_user(db, user_id)
    await expire_stale_requests(db, user_id)

    result = await db.execute(
        select(
            ValidationRequest.id,
            ValidationRequest.from_user_id,
            ValidationRequest.category,
            ValidationRequest.specific_item,
            ValidationRequest.created_at,
            ValidationRequest.expires_at,
            User.name,
            User.email,
        )
        .join(User, User.id == ValidationRequest.from_user_id)
        .where(ValidationRequest.to_user_id == user_id)
        .where(ValidationRequest.status == ValidationStatus.PENDING.value)
        .where(ValidationRequest.expires_at > func.now())
        .order_by(ValidationRequest.created_at.desc())
    )
    return [PendingRequest(*row) for row in result.all()]


async def summarize(db: AsyncSession, user_id: str) -> ValidationSummary:
    """
    Totals of approved validations received by ``user_id``.

    Every category appears in both breakdowns, with 0 or [] when empty.

    Raises:
        UserNotFoundError: If the user does not exist.
    """
    await require_user(db, user_id)

    count = func.count(ValidationRecord.id).label("count")
    result = await db.execute(
        select(ValidationRecord.category, ValidationRecord.specific_item, count)
        .where(ValidationRecord.validated_user_id == user_id)
        .group_by(ValidationRecord.category, ValidationRecord.specific_item)
        .order_by(ValidationRecord.category, count.desc(), ValidationRecord.specific_item)
    )

    category_breakdown = {c.value: 0 for c in ValidationCategory}
    item_breakdown: dict[str, list[tuple[str, int]]] = {c.value: [] for c in ValidationCategory}
    for category, item, n in result.all():
        category_breakdown[category] += n
        item_breakdown[category].append((item, n))

    return ValidationSummary(
        user_id=user_id,
        total_validations=sum(category_breakdown.values()),
        category_breakdown=category_breakdown,
        item_breakdown=item_breakdown,
    )


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


async def _profile_has_item(db: AsyncSession, user_id: str, category: ValidationCategory, item: str) -> bool:
    result = await db.execute(
        select(ProfileItem.id)
        .where(ProfileItem.user_id == user_id)
        .where(ProfileItem.item_type == category.item_type)
        .where(cast(ProfileItem.item_data, Text).icontains(item, autoescape=True))
        .limit(1)
    )
    return result.scalar_one_or_none() is not None


async def request_validation(
    db: AsyncSession,
    from_user_id: str,
    to_user_id: str,
    category: str,
    specific_item: str,
) -> ValidationRequest:
    """
    Offer ``from_user_id`` as validator of ``specific_item`` on the profile of
    ``to_user_id``. The item owner answers the request; approval records
    ``from_user_id`` as validator and ``to_user_id`` as validated user.

    Checks run in order and the first failure wins.

    Raises:
        InvalidRequestError: If both ids are the same user.
        InvalidCategoryError: If the category is unknown.
        UserNotFoundError: If either user is missing.
        NotConnectedError: If the users are not connected.
        ItemNotFoundError: If the target's profile has no matching item.
        DuplicateRequestError: If an identical request is pending (or already on file).
        AlreadyValidatedError: If this validator already vouched for this item.
    """
    if from_user_id == to_user_id:
        raise InvalidRequestError("Cannot request validation from yourself", error="Invalid request")
    parsed = parse_category(category)
    await require_users(db, from_user_id, to_user_id)

    if not await are_connected(db, from_user_id, to_user_id):
        raise NotConnectedError("Users must be connected to request validation")

    if not await _profile_has_item(db, to_user_id, parsed, specific_item):
        raise ItemNotFoundError(f"The specified {parsed.value} item was not found in the target user's profile")

    pending = await db.execute(
        select(ValidationRequest.id)
        .where(ValidationRequest.from_user_id == from_user_id)
        .where(ValidationRequest.to_user_id == to_user_id)
        .where(ValidationRequest.category == parsed.value)
        .where(ValidationRequest.specific_item == specific_item)
        .where(ValidationRequest.status == ValidationStatus.PENDING.value)
    )
    if pending.scalar_one_or_none() is not None:
        raise DuplicateRequestError("A validation request for this item already exists")

    record = await db.execute(
        select(ValidationRecord.id)
        .where(ValidationRecord.validated_user_id == to_user_id)
        .where(ValidationRecord.validator_user_id == from_user_id)
        .where(ValidationRecord.category == parsed.value)
        .where(ValidationRecord.specific_item == specific_item)
    )
    if record.scalar_one_or_none() is not None:
        raise AlreadyValidatedError("This item has already been validated by you")

    ttl = timedelta(days=get_settings().validation_request_ttl_days)
    request = ValidationRequest(
        from_user_id=from_user_id,
        to_user_id=to_user_id,
        category=parsed.value,
        specific_item=specific_item,
        status=ValidationStatus.PENDING.value,
        expires_at=datetime.now(timezone.utc) + ttl,
    )
    db.add(request)
    try:
        await db.flush()
    except IntegrityError as e:
        if violated_constraint(e) == REQUEST_CONSTRAINT:
            raise DuplicateRequestError("A validation request for this item already exists") from e
        raise

    logger.info(
        "validation_requested",
        request_id=request.id,
        from_user_id=from_user_id,
        to_user_id=to_user_id,
        category=parsed.value,
    )
    return request


async def respond_to_validation(db: AsyncSession, request_id: str, response: str) -> ValidationRequest:
    """
    Approve or decline a pending request.

    The request row is locked for the rest of the transaction. Approving
    appends a ValidationRecord in the same transaction. A request found
    past its expiry is marked expired and flushed before RequestExpiredError
    is raised, so the caller can commit the transition it rejected.

    Raises:
        InvalidRequestError: If ``response`` is neither approved nor declined.
        RequestNotFoundError: If no such request exists.
        RequestNotPendingError: If the request was already answered or expired.
        RequestExpiredError: If the request expired before this answer.
        AlreadyValidatedError: If an equivalent record already exists.
    """
    answer = parse_response(response)

    result = await db.execute(
        select(ValidationRequest).where(ValidationRequest.id == request_id).with_for_update()
    )
    request = result.scalar_one_or_none()
    if request is None:
        raise RequestNotFoundError("Validation request not found")

    validate_transition(request.status, answer.status)

    now = datetime.now(timezone.utc)
    if is_expired(request.expires_at, now):
        validate_transition(request.status, ValidationStatus.EXPIRED)
        request.status = ValidationStatus.EXPIRED.value
        request.updated_at = now
        await db.flush()
        logger.info("validation_request_expired", request_id=request.id)
        raise RequestExpiredError("This validation request has expired")

    request.status = answer.status.value
    request.updated_at = now
    if answer is ValidationResponse.APPROVED:
        db.add(
            ValidationRecord(
                validated_user_id=request.to_user_id,
                validator_user_id=request.from_user_id,
                category=request.category,
                specific_item=request.specific_item,
                validation_request_id=request.id,
            )
        )
    try:
        await db.flush()
    except IntegrityError as e:
        if violated_constraint(e) == RECORD_CONSTRAINT:
            raise AlreadyValidatedError("This item has already been validated by this user") from e
        raise

    logger.info("validation_responded", request_id=request.id, response=answer.value)
    return request
