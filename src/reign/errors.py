"""Domain errors.

Every business-rule violation raised by a service is a ``ReignError``.
The global error handler turns it into ``{"error": ..., "details": ...}``
with the class's ``status_code``. Services never raise HTTP exceptions.
"""

from __future__ import annotations

from typing import Any


class ReignError(Exception):
    """Base exception for all domain errors."""

    status_code: int = 500
    error: str = "Internal server error"

    def __init__(self, details: Any = None, error: str | None = None) -> None:
        self.details = details
        if error is not None:
            self.error = error
        super().__init__(f"{self.error}: {details}" if details is not None else self.error)

    def to_dict(self) -> dict[str, Any]:
        """Convert the error to the JSON envelope."""
        return {"error": self.error, "details": self.details}


# ---------------------------------------------------------------------------
# Families
# ---------------------------------------------------------------------------


class ValidationError(ReignError):
    """Malformed, missing or out-of-range input."""

    status_code = 400
    error = "Invalid request"


class NotFoundError(ReignError):
    status_code = 404
    error = "Not found"


class ConflictError(ReignError):
    status_code = 409
    error = "Conflict"


class PreconditionError(ReignError):
    """A business precondition between existing entities does not hold."""

    status_code = 422
    error = "Precondition failed"


class StateError(ReignError):
    """The target entity is in a state that no longer accepts the operation."""

    status_code = 410
    error = "Gone"


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


class InvalidRequestError(ValidationError):
    error = "Invalid request"


class InvalidCoordinateError(ValidationError):
    error = "Invalid coordinate"


class InvalidRadiusError(ValidationError):
    error = "Invalid radius"


class InvalidCategoryError(ValidationError):
    error = "Invalid category"


class InvalidItemError(ValidationError):
    error = "Invalid profile item"


class InvalidImageError(ValidationError):
    error = "Invalid profile image"


class InvalidMoodBadgeError(ValidationError):
    error = "Invalid mood badge"


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


class UserNotFoundError(NotFoundError):
    error = "User not found"

    def __init__(self, user_id: str | None = None, details: Any = None) -> None:
        if details is None:
            details = f"No user exists with id {user_id}" if user_id else "One or both users do not exist"
        super().__init__(details)


class RequestNotFoundError(NotFoundError):
    error = "Request not found"


# ---------------------------------------------------------------------------
# Conflicts
# ---------------------------------------------------------------------------


class DuplicateEmailError(ConflictError):
    error = "Email already exists"


class DuplicateRequestError(ConflictError):
    error = "Duplicate request"


class AlreadyValidatedError(ConflictError):
    error = "Already validated"


# ---------------------------------------------------------------------------
# Preconditions
# ---------------------------------------------------------------------------


class NotConnectedError(PreconditionError):
    status_code = 403
    error = "Users not connected"


class ItemNotFoundError(PreconditionError):
    error = "Item not found"


# ---------------------------------------------------------------------------
# Workflow state
# ---------------------------------------------------------------------------


class RequestNotPendingError(StateError):
    error = "Request no longer pending"


class RequestExpiredError(StateError):
    error = "Request expired"
