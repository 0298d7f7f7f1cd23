"""Validation request lifecycle.

pending -> approved | declined | expired. Terminal states never change.
"""

from __future__ import annotations

from datetime import datetime, timezone

from reign.db.enums import ValidationStatus
from reign.errors import RequestNotPendingError

VALID_TRANSITIONS: dict[ValidationStatus, list[ValidationStatus]] = {
    ValidationStatus.PENDING: [
        ValidationStatus.APPROVED,
        ValidationStatus.DECLINED,
        ValidationStatus.EXPIRED,
    ],
    ValidationStatus.APPROVED: [],
    ValidationStatus.DECLINED: [],
    ValidationStatus.EXPIRED: [],
}


def validate_transition(current_status: str, target_status: ValidationStatus) -> None:
    """Validate a state transition. Raises RequestNotPendingError if invalid."""
    current = ValidationStatus(current_status)
    valid = VALID_TRANSITIONS[current]
    if target_status not in valid:
        raise RequestNotPendingError(
            f"This validation request has already been {current.value}",
        )


def is_expired(expires_at: datetime, now: datetime | None = None) -> bool:
    now = now or datetime.now(timezone.utc)
    return now > expires_at
