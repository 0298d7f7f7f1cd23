"""Helpers for classifying database integrity errors."""

from __future__ import annotations

import re

from sqlalchemy.exc import IntegrityError

_CONSTRAINT_RE = re.compile(r'constraint "([^"]+)"')


def violated_constraint(exc: IntegrityError) -> str | None:
    """Name of the constraint behind an IntegrityError, if the driver reports one."""
    orig = exc.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        name = getattr(candidate, "constraint_name", None)
        if name:
            return name
    match = _CONSTRAINT_RE.search(str(orig))
    return match.group(1) if match else None
