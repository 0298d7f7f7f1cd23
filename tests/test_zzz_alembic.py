"""Alembic migration tests.

File named test_zzz_alembic.py to sort LAST in pytest collection order.
"""

import subprocess
import sys

from conftest import PROJECT_ROOT, require_database


def _alembic(*args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, "-m", "alembic", *args],
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
    )


def test_alembic_upgrade_head() -> None:
    """alembic upgrade head succeeds without errors."""
    require_database()
    result = _alembic("upgrade", "head")
    assert result.returncode == 0, f"alembic upgrade failed: {result.stderr}"


def test_alembic_current_shows_head() -> None:
    """alembic current shows the latest revision."""
    require_database()
    result = _alembic("current")
    assert result.returncode == 0
    assert "002_validation_system" in result.stdout
