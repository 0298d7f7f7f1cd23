"""Symmetric social edges between users.

An edge is stored once, in the direction it was first requested, and
every lookup checks both directions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import and_, case, or_, select
from sqlalchemy.dialects.postgresql import insert as pg_insert

from reign.db.enums import ConnectionStatus
from reign.db.models import Connection
from reign.errors import InvalidRequestError
from reign.users.service import require_user, require_users

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


def _between(user_a: str, user_b: str) -> ColumnElement[bool]:
    return or_(
        and_(Connection.from_user == user_a, Connection.to_user == user_b),
        and_(Connection.from_user == user_b, Connection.to_user == user_a),
    )


async def find_connection(db: AsyncSession, user_a: str, user_b: str) -> Connection | None:
    """Get the edge between two users in either direction."""
    result = await db.execute(select(Connection).where(_between(user_a, user_b)).limit(1))
    return result.scalar_one_or_none()


async def are_connected(db: AsyncSession, user_a: str, user_b: str) -> bool:
    """Whether a ``connected`` edge exists between two users."""
    result = await db.execute(
        select(Connection.id)
        .where(_between(user_a, user_b))
        .where(Connection.status == ConnectionStatus.CONNECTED.value)
        .limit(1)
    )
    return result.scalar_one_or_none() is not None


async def connect(db: AsyncSession, from_user: str, to_user: str) -> tuple[bool, str]:
    """
    Connect two users. Returns whether a new edge was created, and the edge status.

    An existing edge in either direction is left untouched and its status returned.

    Raises:
        InvalidRequestError: If both ids are the same user.
        UserNotFoundError: If either user is missing.
    """
    if from_user == to_user:
        raise InvalidRequestError("Cannot connect user to themselves", error="Invalid connection")
    await require_users(db, from_user, to_user)

    existing = await find_connection(db, from_user, to_user)
    if existing is not None:
        return False, existing.status

    stmt = (
        pg_insert(Connection)
        .values(from_user=from_user, to_user=to_user, status=ConnectionStatus.CONNECTED.value)
        .on_conflict_do_nothing(constraint="unique_connection")
        .returning(Connection.id)
    )
    result = await db.execute(stmt)
    if result.scalar_one_or_none() is None:
        # Lost a race with the same insert.
        existing = await find_connection(db, from_user, to_user)
        return False, existing.status if existing else ConnectionStatus.CONNECTED.value
    logger.info("users_connected", from_user=from_user, to_user=to_user)
    return True, ConnectionStatus.CONNECTED.value


def peer_column(user_id: str) -> ColumnElement[str]:
    """The other endpoint of an edge that touches ``user_id``."""
    return case((Connection.from_user == user_id, Connection.to_user), else_=Connection.from_user)


def touches(user_id: str) -> ColumnElement[bool]:
    return or_(Connection.from_user == user_id, Connection.to_user == user_id)


async def list_connections(db: AsyncSession, user_id: str) -> list[str]:
    """
    Distinct ids of users connected to ``user_id`` in either direction.

    Raises:
        UserNotFoundError: If the user does not exist.
    """
    await require_user(db, user_id)
    peer = peer_column(user_id).label("peer_id")
    result = await db.execute(
        select(peer)
        .where(touches(user_id))
        .where(Connection.status == ConnectionStatus.CONNECTED.value)
        .distinct()
        .order_by(peer)
    )
    return [str(peer_id) for peer_id in result.scalars().all()]
