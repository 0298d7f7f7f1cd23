"""Canonical form for incoming profile items and mood badges.

Clients send profile items in one of two historical shapes,
``{"type", "data"}`` or ``{"item_type", "item_data"}`` (camelCase
``itemType``/``itemData`` is the same shape). Both map to
``ProfileItemInput``; anything else is rejected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from reign.db.enums import PROFILE_IMAGE_ITEM_TYPE
from reign.errors import InvalidItemError, InvalidMoodBadgeError

MAX_ITEM_TYPE_LENGTH = 50
MAX_BADGE_FIELD_LENGTH = 50

_SHAPES = (
    ("type", "data"),
    ("item_type", "item_data"),
    ("itemType", "itemData"),
)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


@dataclass(frozen=True)
class ProfileItemInput:
    item_type: str
    item_data: Any

    @classmethod
    def from_payload(cls, payload: Any) -> ProfileItemInput:
        """Normalize one item from either accepted shape."""
        if not isinstance(payload, dict):
            raise InvalidItemError("Each profile item must be an object with type and data fields")

        for type_key, data_key in _SHAPES:
            if type_key in payload or data_key in payload:
                item_type, item_data = payload.get(type_key), payload.get(data_key)
                break
        else:
            raise InvalidItemError("Each profile item must have type and data fields")

        if not isinstance(item_type, str) or _is_blank(item_type) or _is_blank(item_data):
            raise InvalidItemError("Each profile item must have type and data fields")
        item_type = item_type.strip()
        if len(item_type) > MAX_ITEM_TYPE_LENGTH:
            raise InvalidItemError(f"Item type must be at most {MAX_ITEM_TYPE_LENGTH} characters")
        if item_type == PROFILE_IMAGE_ITEM_TYPE:
            raise InvalidItemError("Profile images must be sent in the profileImage field")
        return cls(item_type=item_type, item_data=item_data)


def normalize_items(payloads: list[Any]) -> list[ProfileItemInput]:
    return [ProfileItemInput.from_payload(p) for p in payloads]


@dataclass(frozen=True)
class MoodBadgeInput:
    mood: str
    category: str
    value: str

    @classmethod
    def from_payload(cls, payload: Any) -> MoodBadgeInput:
        if not isinstance(payload, dict):
            raise InvalidMoodBadgeError("Each mood badge must be an object with mood, category and value")
        fields = {}
        for key in ("mood", "category", "value"):
            raw = payload.get(key)
            if not isinstance(raw, str) or not raw.strip():
                raise InvalidMoodBadgeError(f"Mood badge field '{key}' must be a non-empty string")
            fields[key] = raw.strip()
        for key in ("mood", "category"):
            if len(fields[key]) > MAX_BADGE_FIELD_LENGTH:
                raise InvalidMoodBadgeError(f"Mood badge field '{key}' must be at most {MAX_BADGE_FIELD_LENGTH} characters")
        return cls(**fields)


def normalize_mood_badges(payloads: list[Any]) -> list[MoodBadgeInput]:
    return [MoodBadgeInput.from_payload(p) for p in payloads]
