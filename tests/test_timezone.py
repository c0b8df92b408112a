from datetime import date, datetime, timezone

import pytest

from app.core.exceptions import ValidationError
from app.utils.timezone import (
    civil_components,
    day_of_week,
    get_zone,
    instant_from_civil,
    local_date,
    to_iso,
    weekday_sunday_first,
)


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


@pytest.mark.parametrize("zone, civil", [
    ("UTC", (2025, 1, 1, 0, 0, 0)),
    ("America/Los_Angeles", (2025, 7, 4, 18, 30, 0)),
    ("Asia/Kolkata", (2024, 2, 29, 23, 45, 10)),
    ("Asia/Kathmandu", (2025, 12, 31, 23, 59, 59)),
    ("Australia/Lord_Howe", (2025, 1, 15, 8, 0, 0)),
    ("Pacific/Chatham", (2025, 6, 1, 12, 15, 0)),
])
def test_civil_round_trip(zone, civil):
    instant = instant_from_civil(*civil, zone=zone)
    assert instant.tzinfo is not None
    assert tuple(civil_components(instant, zone)) == civil


def test_spring_forward_gap_moves_to_first_instant_after_gap():
    # 02:30 does not exist in New York on 2025-03-09; clocks jump 02:00 EST -> 03:00 EDT
    instant = instant_from_civil(2025, 3, 9, 2, 30, zone="America/New_York")
    assert instant == utc(2025, 3, 9, 7, 0)
    assert tuple(civil_components(instant, "America/New_York"))[3:5] == (3, 0)


def test_spring_forward_gap_los_angeles():
    instant = instant_from_civil(2025, 3, 9, 2, 30, zone="America/Los_Angeles")
    assert instant == utc(2025, 3, 9, 10, 0)


def test_fall_back_overlap_picks_earlier_instant():
    # 01:30 happens twice in New York on 2025-11-02: EDT (05:30Z) then EST (06:30Z)
    instant = instant_from_civil(2025, 11, 2, 1, 30, zone="America/New_York")
    assert instant == utc(2025, 11, 2, 5, 30)


def test_unknown_zone_raises_validation_error():
    with pytest.raises(ValidationError):
        get_zone("Mars/Olympus_Mons")


def test_day_of_week_is_sunday_first_and_zone_local():
    # Sunday evening on the US west coast, Monday everywhere east of it
    instant = utc(2025, 3, 10, 3, 0)
    assert day_of_week(instant, "America/Los_Angeles") == 0
    assert day_of_week(instant, "UTC") == 1
    assert day_of_week(instant, "Asia/Tokyo") == 1
    assert local_date(instant, "America/Los_Angeles") == date(2025, 3, 9)


def test_weekday_sunday_first():
    assert weekday_sunday_first(date(2025, 3, 9)) == 0   # Sunday
    assert weekday_sunday_first(date(2025, 3, 15)) == 6  # Saturday


def test_to_iso_uses_z_suffix():
    assert to_iso(utc(2025, 3, 10, 16, 0)) == "2025-03-10T16:00:00Z"
    assert to_iso(None) is None
