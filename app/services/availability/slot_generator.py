# ============================================================================
# app/services/availability/slot_generator.py
# Pure slot generation - no database access, safe to recompute per request
# ============================================================================
from bisect import bisect_right
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional

from app.services.appointment.state_machine import effective_time, is_committed
from app.utils.timezone import (
    as_utc,
    get_zone,
    instant_from_civil,
    local_date,
    to_iso,
    utc_now,
    weekday_sunday_first,
)


@dataclass(frozen=True)
class Slot:
    start: datetime
    duration_minutes: int

    @property
    def end(self) -> datetime:
        return self.start + timedelta(minutes=self.duration_minutes)

    def to_dict(self) -> Dict:
        return {"time": to_iso(self.start), "available": True}


def _day_bounds(day: date, rule, zone):
    start = instant_from_civil(
        day.year, day.month, day.day,
        rule.start_time.hour, rule.start_time.minute, rule.start_time.second,
        zone
    )
    end = instant_from_civil(
        day.year, day.month, day.day,
        rule.end_time.hour, rule.end_time.minute, rule.end_time.second,
        zone
    )
    return start, end


def _collides(candidate_start: datetime, duration: timedelta, busy: List[datetime]) -> bool:
    """
    True when some busy instant b has [b, b + duration) overlapping
    [candidate_start, candidate_start + duration), i.e. start - d < b < start + d.
    `busy` must be sorted.
    """
    idx = bisect_right(busy, candidate_start - duration)
    return idx < len(busy) and busy[idx] < candidate_start + duration


def generate_slots(
        schedule: Iterable,
        horizon_days: int,
        committed: Iterable,
        salon_timezone: str,
        now: Optional[datetime] = None
) -> List[Slot]:
    """
    Generate bookable slot start instants for a salon.

    Walks each local calendar day in [today, today + horizon_days] in the
    salon's timezone, lays the matching weekly rule's window out in
    slot_duration steps, and drops slots that would run past the end of the
    window, overlap a committed appointment, or start before `now`.

    Args:
        schedule: availability rules (day_of_week with Sunday = 0, is_working_day,
            start_time, end_time, slot_duration)
        horizon_days: number of days to look ahead of today
        committed: appointments holding time; CONFIRMED block their requested
            time and RESCHEDULE_PROPOSED their proposed time
        salon_timezone: IANA zone name
        now: reference instant, defaults to the current time

    Returns:
        Slots in ascending chronological order
    """
    zone = get_zone(salon_timezone)
    now = as_utc(now) if now else utc_now()

    rules_by_day = {rule.day_of_week: rule for rule in schedule}
    busy = sorted(as_utc(effective_time(appt)) for appt in committed if is_committed(appt))

    today = local_date(now, zone)
    slots: List[Slot] = []

    for offset in range(horizon_days + 1):
        day = today + timedelta(days=offset)
        rule = rules_by_day.get(weekday_sunday_first(day))
        if rule is None or not rule.is_working_day or not rule.slot_duration or rule.slot_duration <= 0:
            continue

        day_start, day_end = _day_bounds(day, rule, zone)
        if day_start >= day_end:
            continue

        duration = timedelta(minutes=rule.slot_duration)
        cursor = day_start
        while cursor + duration <= day_end:
            if cursor >= now and not _collides(cursor, duration, busy):
                slots.append(Slot(start=cursor, duration_minutes=rule.slot_duration))
            cursor += duration

    return slots
