"""
Domain time utilities (pure).

Centralized timestamp validation and the clock used by the services.

Behavior and error messages must remain consistent across the domain model.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone


def require_utc_timestamp(name: str, value: datetime) -> None:
    """
    Enforces the requirement that stored timestamps are UTC.

    Invariants:
    - Timestamps must be timezone-aware.
    - Timestamps must have UTC offset 0.
    """

    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware (UTC)")
    if value.utcoffset() != timedelta(0):
        raise ValueError(f"{name} must be a UTC timestamp (offset 0)")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def local_today() -> date:
    """Server-local calendar date (reminder scans compare against this)."""

    return date.today()
