"""Shared utility functions used across components."""

import uuid
from datetime import datetime, timezone
from typing import Optional


def new_id() -> str:
    """32-char hex primary key."""
    return uuid.uuid4().hex


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Return datetime as timezone-aware UTC. Returns None if input is None."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def parse_filter_datetime(value: Optional[str], *, end_of_day: bool = False) -> Optional[datetime]:
    """Parse a YYYY-MM-DD or ISO-8601 query value. Returns None when blank or unparseable.

    A bare date covers the whole day when ``end_of_day`` is set.
    """
    raw = (value or "").strip()
    if not raw:
        return None
    try:
        parsed = datetime.strptime(raw, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError:
        try:
            return ensure_utc(datetime.fromisoformat(raw.replace("Z", "+00:00")))
        except ValueError:
            return None
    if end_of_day:
        parsed = parsed.replace(hour=23, minute=59, second=59, microsecond=999999)
    return parsed
