"""
Row conversion helpers shared by the Supabase adapters.

Supabase returns timestamps and dates as ISO-8601 strings (sometimes with a
trailing 'Z') and numeric columns as numbers or strings depending on type.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID


def to_iso_utc(dt: datetime) -> str:
    """
    Convert a timezone-aware datetime to an ISO-8601 string in UTC.

    Domain objects require UTC timestamps (offset 0); normalizing via
    `astimezone(timezone.utc)` keeps the payload consistent regardless.
    """

    if dt.tzinfo is None or dt.utcoffset() is None:
        raise ValueError("timestamp must be timezone-aware (UTC)")
    return dt.astimezone(timezone.utc).isoformat()


def parse_utc_datetime(value: Any) -> datetime:
    """Parse a Supabase timestamp into a timezone-aware UTC datetime."""

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        # Python's fromisoformat doesn't consistently accept 'Z' across versions.
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise TypeError(f"Unsupported timestamp type: {type(value)!r}")

    # A naive timestamp from the backend is interpreted as UTC so that the
    # domain model's UTC invariant is satisfied.
    if dt.tzinfo is None or dt.utcoffset() is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def parse_optional_datetime(value: Any) -> Optional[datetime]:
    return parse_utc_datetime(value) if value else None


def parse_optional_date(value: Any) -> Optional[date]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def parse_decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    return Decimal(str(value))


def optional_text(value: Any) -> Optional[str]:
    """Empty strings from the store are read back as None."""

    return str(value) if value else None


def to_column(value: Any) -> Any:
    """Serialize a domain value for a JSON row payload."""

    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return to_iso_utc(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, UUID):
        return str(value)
    return value
