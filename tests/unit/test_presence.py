"""Unit tests for the online window."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.dialects import postgresql

from reign.db.models import UserStatus
from reign.status.service import is_online, seen_recently


class TestIsOnline:

    def test_never_seen(self):
        assert not is_online(None)

    def test_recent_heartbeat(self):
        now = datetime.now(timezone.utc)
        assert is_online(now - timedelta(minutes=2, seconds=59), now)

    def test_window_is_inclusive(self):
        now = datetime.now(timezone.utc)
        assert is_online(now - timedelta(minutes=3), now)

    def test_stale_heartbeat(self):
        now = datetime.now(timezone.utc)
        assert not is_online(now - timedelta(minutes=3, seconds=1), now)


class TestSeenRecently:

    def test_matches_inclusive_window(self):
        sql = str(
            select(UserStatus.user_id).where(seen_recently()).compile(dialect=postgresql.dialect())
        )
        assert "user_status.last_seen >= now() - " in sql
