"""Closed value sets stored as strings in the database."""

from __future__ import annotations

import enum


class ConnectionStatus(str, enum.Enum):
    CONNECTED = "connected"
    PENDING = "pending"
    BLOCKED = "blocked"


class ValidationStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"
    EXPIRED = "expired"


class ValidationResponse(str, enum.Enum):
    """Answers a validator may give to a pending request."""

    APPROVED = "approved"
    DECLINED = "declined"

    @property
    def status(self) -> ValidationStatus:
        return ValidationStatus(self.value)


class ValidationCategory(str, enum.Enum):
    SKILLS = "skills"
    EDUCATION = "education"
    EXPERIENCE = "experience"

    @property
    def item_type(self) -> str:
        """Profile item type that backs this category."""
        if self is ValidationCategory.SKILLS:
            return "skill"
        return self.value


class PingCategory(str, enum.Enum):
    SKILL = "skill"
    EDUCATION = "education"
    EXPERIENCE = "experience"


PROFILE_IMAGE_ITEM_TYPE = "profile_image"
FILTERABLE_ITEM_TYPES = tuple(c.value for c in PingCategory)
