"""UTC time helpers."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def epoch_seconds() -> int:
    """Return current wall-clock time as whole Unix seconds."""
    return int(utc_now().timestamp())
