from __future__ import annotations

import time
from datetime import date, datetime, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo


def now_ms() -> int:
    """Current time as epoch milliseconds (the persisted timestamp unit)."""
    return int(time.time() * 1000)


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """
    Map an IANA zone name to a tzinfo.

    - None / "" -> None (system local time)
    - "UTC" -> timezone.utc
    """
    if not name:
        return None
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def local_datetime(timestamp_ms: int | float, tz: Optional[tzinfo] = None) -> datetime:
    """Epoch milliseconds -> datetime in tz (system local time when tz is None)."""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz)


def local_date(timestamp_ms: int | float, tz: Optional[tzinfo] = None) -> date:
    return local_datetime(timestamp_ms, tz).date()


def today(tz: Optional[tzinfo] = None) -> date:
    return datetime.now(tz).date()


def to_utc_z(timestamp_ms: Optional[int | float]) -> Optional[str]:
    """
    Serializes epoch milliseconds to ISO-8601 with trailing 'Z'.
    """
    if timestamp_ms is None:
        return None
    dt_utc = datetime.fromtimestamp(timestamp_ms / 1000, timezone.utc).replace(microsecond=0)
    return dt_utc.isoformat().replace("+00:00", "Z")
