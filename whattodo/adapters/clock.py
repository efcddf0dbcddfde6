"""Wall-clock adapter for the clock port."""

from __future__ import annotations

import time
from datetime import datetime, timedelta, timezone, tzinfo

from whattodo.ports.clock import Clock


_EPOCH = datetime(1970, 1, 1)
_DAY_SECONDS = 24 * 60 * 60


class LocalZone(tzinfo):
    """The host's local time zone, with the UTC offset in force at each instant.

    ``datetime.now().astimezone()`` pins one fixed offset, so wall-clock
    arithmetic across a daylight-saving change would be off by the shift.
    This zone asks the C library for the offset of every time it converts.
    """

    def utcoffset(self, dt: datetime | None) -> timedelta:
        return timedelta(seconds=self._local(dt).tm_gmtoff)

    def dst(self, dt: datetime | None) -> timedelta:
        if self._local(dt).tm_isdst > 0:
            return timedelta(hours=1)
        return timedelta(0)

    def tzname(self, dt: datetime | None) -> str:
        return self._local(dt).tm_zone

    def fromutc(self, dt: datetime) -> datetime:
        stamp = (dt.replace(tzinfo=None) - _EPOCH) // timedelta(seconds=1)
        offset = time.localtime(stamp).tm_gmtoff
        local = dt + timedelta(seconds=offset)
        # The repeated hour after clocks go back is the second occurrence.
        earlier_offset = time.localtime(stamp - _DAY_SECONDS).tm_gmtoff
        if earlier_offset > offset:
            first = time.localtime(stamp - (earlier_offset - offset))
            if first.tm_gmtoff == earlier_offset:
                return local.replace(fold=1)
        return local

    def _local(self, dt: datetime | None) -> time.struct_time:
        if dt is None:
            return time.localtime()
        wall = (dt.replace(tzinfo=None, fold=0) - _EPOCH) // timedelta(seconds=1)
        # Try the offsets in force a day either side; a wall time that maps
        # back onto itself under an offset is valid for that offset.
        matches: list[time.struct_time] = []
        for around in (wall - _DAY_SECONDS, wall + _DAY_SECONDS):
            offset = time.localtime(around).tm_gmtoff
            candidate = time.localtime(wall - offset)
            if candidate.tm_gmtoff == offset and all(
                match.tm_gmtoff != offset for match in matches
            ):
                matches.append(candidate)
        if not matches:
            # Skipped hour when clocks go forward: keep the offset from before.
            return time.localtime(wall - _DAY_SECONDS)
        return matches[-1] if dt.fold and len(matches) > 1 else matches[0]

    def __repr__(self) -> str:
        return "LocalZone()"


class SystemClock(Clock):
    """Current time in ``zone``, or in the host's local zone."""

    __slots__ = ("zone",)

    def __init__(self, zone: tzinfo | None = None) -> None:
        self.zone = zone or LocalZone()

    def now(self) -> datetime:
        return datetime.now(timezone.utc).astimezone(self.zone)
