"""User lookups shared by every feature module."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select

from reign.db.models import User
from reign.errors import UserNotFoundError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


async def get_user(db: AsyncSession, user_id: str) -> User | None:
    """Get a user by ID."""
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Get a user by email (case-insensitive)."""
    result = await db.execute(select(User).where(func.lower(User.email) == email.strip().lower()))
    return result.scalar_one_or_none()


async def require_user(db: AsyncSession, user_id: str) -> User:
    """
    Get a user by ID or fail.

    Raises:
        UserNotFoundError: If no such user exists.
    """
    user = await get_user(db, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


async def require_users(db: AsyncSession, *user_ids: str) -> dict[str, User]:
    """
    Get several distinct users at once, keyed by ID.

    Raises:
        UserNotFoundError: If any of them is missing.
    """
    wanted = set(user_ids)
    result = await db.execute(select(User).where(User.id.in_(wanted)))
    users = {str(u.id): u for u in result.scalars().all()}
    if len(users) != len(wanted):
        raise UserNotFoundError()
    return users
