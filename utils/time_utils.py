"""
utils/time_utils.py

Purpose: Time and expiry helpers

- ISO-8601 timestamps for stored records
- Millisecond clock for order IDs
- Reset token expiry checks
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
import time


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(dt: datetime) -> str:
    """
    Formats a UTC datetime as ISO-8601 with milliseconds and a Z suffix,
    e.g. 2024-05-01T08:30:00.123Z
    """
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now_iso() -> str:
    return to_iso(utc_now())


def epoch_millis() -> int:
    return time.time_ns() // 1_000_000


def is_expired(issued_at: Optional[datetime], ttl_minutes: int, now: Optional[datetime] = None) -> bool:
    """
    Checks if something issued at `issued_at` is older than `ttl_minutes`.
    """
    if not issued_at:
        return True

    expiry_time = issued_at + timedelta(minutes=ttl_minutes)
    return (now or utc_now()) >= expiry_time
