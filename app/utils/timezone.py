# app/utils/timezone.py
"""
Timezone projection helpers.

All slot math reasons in the salon's local (civil) time, independent of the
server's clock or locale. Instants are aware datetimes in UTC; civil times are
plain field tuples interpreted in an IANA zone from the tz database.
"""
from datetime import date, datetime, timezone
from functools import lru_cache
from typing import NamedTuple, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.core.exceptions import ValidationError


class CivilTime(NamedTuple):
    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int


@lru_cache(maxsize=128)
def get_zone(name: str) -> ZoneInfo:
    """Resolve an IANA zone name, raising ValidationError for unknown zones."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"Unknown timezone: {name}")


def _zone(zone) -> ZoneInfo:
    return zone if isinstance(zone, ZoneInfo) else get_zone(zone)


def as_utc(value: datetime) -> datetime:
    """Normalise a datetime to an aware UTC instant; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 UTC string with a Z suffix, e.g. 2025-03-10T16:00:00Z"""
    if value is None:
        return None
    return as_utc(value).isoformat().replace("+00:00", "Z")


def civil_components(instant: datetime, zone) -> CivilTime:
    """Project an instant onto the wall clock of `zone`."""
    local = as_utc(instant).astimezone(_zone(zone))
    return CivilTime(local.year, local.month, local.day, local.hour, local.minute, local.second)


def _civil_at(seconds: int, tz: ZoneInfo) -> datetime:
    local = datetime.fromtimestamp(seconds, tz)
    return local.replace(tzinfo=None, fold=0)


def instant_from_civil(
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        zone="UTC"
) -> datetime:
    """
    Find the UTC instant whose projection into `zone` shows the given wall time.

    Civil to instant is not a function around DST changes, so ambiguity is
    resolved deterministically:

    - Both readings of the wall time (before and after a transition) are tried;
      every real-world offset keeps them within 14 hours of the naive guess.
    - Fall-back overlap (wall time occurs twice): the EARLIER instant wins.
    - Spring-forward gap (wall time never occurs): binary search between the
      two readings returns the first instant whose wall time is at or after
      the requested one, i.e. the first instant after the gap.

    Returns an aware datetime in UTC.
    """
    tz = _zone(zone)
    target = datetime(year, month, day, hour, minute, second)

    readings = sorted(
        target.replace(tzinfo=tz, fold=fold).astimezone(timezone.utc)
        for fold in (0, 1)
    )
    exact = [
        instant for instant in readings
        if instant.astimezone(tz).replace(tzinfo=None, fold=0) == target
    ]
    if exact:
        return exact[0]

    # Gap: wall time at low is before target, wall time at high is after it
    low = int(readings[0].timestamp())
    high = int(readings[1].timestamp())
    while low < high:
        mid = (low + high) // 2
        if _civil_at(mid, tz) >= target:
            high = mid
        else:
            low = mid + 1
    return datetime.fromtimestamp(high, timezone.utc)


def weekday_sunday_first(day: date) -> int:
    """Day of week for a calendar date with Sunday = 0 ... Saturday = 6"""
    return (day.weekday() + 1) % 7


def day_of_week(instant: datetime, zone) -> int:
    """Local day of week of an instant in `zone`, Sunday = 0."""
    civil = civil_components(instant, zone)
    return weekday_sunday_first(date(civil.year, civil.month, civil.day))


def local_date(instant: datetime, zone) -> date:
    civil = civil_components(instant, zone)
    return date(civil.year, civil.month, civil.day)
