"""Declarative base for ORM models."""

from typing import Any, ClassVar

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    # Server defaults (ids, timestamps) are read back in the INSERT's RETURNING;
    # async sessions cannot lazy-load them afterwards.
    __mapper_args__: ClassVar[dict[str, Any]] = {"eager_defaults": True}
