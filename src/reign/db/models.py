"""ORM models for the Reign schema.

Tables are created by the Alembic revisions under ``alembic/versions``;
these mappings mirror them column for column, including constraint names
that the services match on when remapping integrity errors.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from reign.db.base import Base

_UUID_DEFAULT = text("uuid_generate_v4()")


# ---------------------------------------------------------------------------
# Users & profiles
# ---------------------------------------------------------------------------


class User(Base):
    """Identity anchor. Every other row cascades from it."""

    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("email", name="users_email_key"),)

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True, server_default=_UUID_DEFAULT)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    @property
    def display_name(self) -> str:
        return self.name or self.email


class ProfileItem(Base):
    """Typed freeform fact about a user (skill, education, experience, profile_image)."""

    __tablename__ = "profile_items"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True, server_default=_UUID_DEFAULT)
    user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    item_type: Mapped[str] = mapped_column(String(50), nullable=False)
    item_data: Mapped[Any] = mapped_column(JSONB, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class MoodBadge(Base):
    """A (mood, category, value) triple shown on a profile."""

    __tablename__ = "mood_badges"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True, server_default=_UUID_DEFAULT)
    user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    mood: Mapped[str] = mapped_column(String(50), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


class Location(Base):
    """Current position of a user. One row per user, overwritten on update."""

    __tablename__ = "locations"
    __table_args__ = (
        UniqueConstraint("user_id", name="unique_user_location"),
        CheckConstraint("latitude BETWEEN -90 AND 90", name="valid_latitude"),
        CheckConstraint("longitude BETWEEN -180 AND 180", name="valid_longitude"),
    )

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True, server_default=_UUID_DEFAULT)
    user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class UserStatus(Base):
    """Broadcasting flag and heartbeat for a user."""

    __tablename__ = "user_status"

    user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    is_broadcasting: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="false")
    last_seen: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Ping(Base):
    """Short-lived, location-stamped broadcast message."""

    __tablename__ = "pings"
    __table_args__ = (
        CheckConstraint("category IN ('skill', 'education', 'experience')", name="pings_category_check"),
    )

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True, server_default=_UUID_DEFAULT)
    user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    mood: Mapped[str] = mapped_column(Text, nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    category: Mapped[str | None] = mapped_column(Text, nullable=True)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


# ---------------------------------------------------------------------------
# Connections & validation
# ---------------------------------------------------------------------------


class Connection(Base):
    """Social edge between two distinct users, treated as symmetric."""

    __tablename__ = "connections"
    __table_args__ = (
        UniqueConstraint("from_user", "to_user", name="unique_connection"),
        CheckConstraint("from_user != to_user", name="no_self_connection"),
        CheckConstraint("status IN ('connected', 'pending', 'blocked')", name="connections_status_check"),
    )

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True, server_default=_UUID_DEFAULT)
    from_user: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    to_user: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, server_default="connected")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class ValidationRequest(Base):
    """A pending ask for ``from_user`` to vouch for an item on ``to_user``'s profile."""

    __tablename__ = "validation_requests"
    __table_args__ = (
        UniqueConstraint(
            "from_user_id", "to_user_id", "category", "specific_item", name="unique_validation_request"
        ),
        CheckConstraint("from_user_id != to_user_id", name="no_self_validation"),
        CheckConstraint(
            "category IN ('skills', 'education', 'experience')", name="validation_requests_category_check"
        ),
        CheckConstraint(
            "status IN ('pending', 'approved', 'declined', 'expired')", name="validation_requests_status_check"
        ),
    )

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True, server_default=_UUID_DEFAULT)
    from_user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    to_user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    specific_item: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, server_default="pending")
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class ValidationRecord(Base):
    """Append-only ledger entry created when a request is approved."""

    __tablename__ = "validation_records"
    __table_args__ = (
        UniqueConstraint(
            "validated_user_id", "validator_user_id", "category", "specific_item", name="unique_validation_record"
        ),
        CheckConstraint("validated_user_id != validator_user_id", name="no_self_validation_record"),
        CheckConstraint(
            "category IN ('skills', 'education', 'experience')", name="validation_records_category_check"
        ),
    )

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True, server_default=_UUID_DEFAULT)
    validated_user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    validator_user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    specific_item: Mapped[str] = mapped_column(Text, nullable=False)
    validation_request_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False), ForeignKey("validation_requests.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
