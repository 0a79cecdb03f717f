"""UTC and business-zone datetime utilities."""

from datetime import datetime, timezone
from typing import Protocol
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


class Clock(Protocol):
    """Source of the current instant in the business time zone."""

    @property
    def tz(self) -> ZoneInfo: ...

    def now(self) -> datetime: ...


class BusinessClock:
    """System clock expressed in the configured business zone (Asia/Manila)."""

    def __init__(self, tz_name: str) -> None:
        self._tz = ZoneInfo(tz_name)

    @property
    def tz(self) -> ZoneInfo:
        return self._tz

    def now(self) -> datetime:
        return datetime.now(self._tz)
