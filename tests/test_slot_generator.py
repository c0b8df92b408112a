from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from app.models.appointment import AppointmentStatus
from app.services.availability.slot_generator import generate_slots
from app.utils.timezone import civil_components, day_of_week
from tests.conftest import rule

LA = "America/Los_Angeles"

# Monday 2025-03-10 00:00 PDT
MONDAY_MIDNIGHT = datetime(2025, 3, 10, 7, 0, tzinfo=timezone.utc)


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def appt(status, requested_time, proposed_time=None):
    return SimpleNamespace(status=status.value, requested_time=requested_time, proposed_time=proposed_time)


def starts(slots):
    return [slot.start for slot in slots]


def test_monday_window_gives_two_hour_slots():
    slots = generate_slots([rule(1)], 0, [], LA, now=MONDAY_MIDNIGHT)

    assert starts(slots) == [utc(2025, 3, 10, 16, 0), utc(2025, 3, 10, 17, 0)]
    assert [s.to_dict()["time"] for s in slots] == ["2025-03-10T16:00:00Z", "2025-03-10T17:00:00Z"]
    assert all(s.to_dict()["available"] for s in slots)


def test_confirmed_appointment_blocks_its_slot():
    committed = [appt(AppointmentStatus.CONFIRMED, utc(2025, 3, 10, 16, 0))]
    slots = generate_slots([rule(1)], 0, committed, LA, now=MONDAY_MIDNIGHT)

    assert starts(slots) == [utc(2025, 3, 10, 17, 0)]


def test_partially_overlapping_confirmed_appointment_blocks_both_neighbours():
    committed = [appt(AppointmentStatus.CONFIRMED, utc(2025, 3, 10, 16, 30))]
    slots = generate_slots([rule(1)], 0, committed, LA, now=MONDAY_MIDNIGHT)

    assert slots == []


def test_reschedule_proposal_holds_proposed_time():
    committed = [
        appt(
            AppointmentStatus.RESCHEDULE_PROPOSED,
            requested_time=utc(2025, 3, 10, 16, 0),
            proposed_time=utc(2025, 3, 10, 17, 0),
        )
    ]
    slots = generate_slots([rule(1)], 0, committed, LA, now=MONDAY_MIDNIGHT)

    # The original request time is released, the proposal is held
    assert starts(slots) == [utc(2025, 3, 10, 16, 0)]


def test_pending_and_cancelled_do_not_block():
    committed = [
        appt(AppointmentStatus.PENDING, utc(2025, 3, 10, 16, 0)),
        appt(AppointmentStatus.CANCELLED, utc(2025, 3, 10, 17, 0)),
    ]
    slots = generate_slots([rule(1)], 0, committed, LA, now=MONDAY_MIDNIGHT)

    assert len(slots) == 2


def test_start_not_before_end_gives_no_slots():
    schedule = [rule(1, start="11:00", end="11:00"), rule(2, start="17:00", end="09:00")]
    assert generate_slots(schedule, 2, [], LA, now=MONDAY_MIDNIGHT) == []


def test_trailing_partial_slot_is_dropped():
    slots = generate_slots([rule(1, end="10:30")], 0, [], LA, now=MONDAY_MIDNIGHT)
    assert starts(slots) == [utc(2025, 3, 10, 16, 0)]


def test_non_working_day_and_missing_day_give_no_slots():
    schedule = [rule(1, is_working_day=False)]
    assert generate_slots(schedule, 6, [], LA, now=MONDAY_MIDNIGHT) == []


def test_slots_in_the_past_are_dropped():
    now = utc(2025, 3, 10, 16, 30)  # 09:30 local
    slots = generate_slots([rule(1)], 0, [], LA, now=now)
    assert starts(slots) == [utc(2025, 3, 10, 17, 0)]


def test_horizon_includes_today_and_last_day():
    schedule = [rule(day) for day in range(7)]
    slots = generate_slots(schedule, 2, [], LA, now=MONDAY_MIDNIGHT)

    local_days = sorted({civil_components(s.start, LA).day for s in slots})
    assert local_days == [10, 11, 12]


def test_spring_forward_day_uses_real_elapsed_time():
    # Sunday 2025-03-09: 01:00 PST to 04:00 PDT is only two real hours
    now = utc(2025, 3, 9, 8, 0)
    slots = generate_slots([rule(0, start="01:00", end="04:00")], 0, [], LA, now=now)

    assert starts(slots) == [utc(2025, 3, 9, 9, 0), utc(2025, 3, 9, 10, 0)]


def test_fall_back_day_offers_repeated_hour_twice():
    # Sunday 2025-11-02: 00:00 PDT to 03:00 PST is four real hours, 01:00 happens twice
    now = utc(2025, 11, 2, 7, 0)
    slots = generate_slots([rule(0, start="00:00", end="03:00")], 0, [], LA, now=now)

    assert starts(slots) == [
        utc(2025, 11, 2, 7, 0),   # 00:00 PDT
        utc(2025, 11, 2, 8, 0),   # 01:00 PDT
        utc(2025, 11, 2, 9, 0),   # 01:00 PST
        utc(2025, 11, 2, 10, 0),  # 02:00 PST
    ]
    assert [civil_components(s, LA).hour for s in starts(slots)] == [0, 1, 1, 2]


def test_schedule_is_respected_across_two_weeks():
    schedule = [
        rule(1, start="09:00", end="17:00", slot_duration=30),
        rule(3, start="10:00", end="14:00", slot_duration=45),
        rule(5, start="12:00", end="20:00", slot_duration=90),
        rule(6, is_working_day=False),
    ]
    by_day = {r.day_of_week: r for r in schedule}

    slots = generate_slots(schedule, 14, [], LA, now=MONDAY_MIDNIGHT)
    assert slots

    for slot in slots:
        day_rule = by_day[day_of_week(slot.start, LA)]
        assert day_rule.is_working_day
        assert slot.duration_minutes == day_rule.slot_duration

        civil = civil_components(slot.start, LA)
        start_minutes = civil.hour * 60 + civil.minute
        assert day_rule.start_time.hour * 60 + day_rule.start_time.minute <= start_minutes
        assert start_minutes + day_rule.slot_duration <= day_rule.end_time.hour * 60 + day_rule.end_time.minute


def test_no_slot_overlaps_a_committed_window():
    schedule = [rule(day, start="08:00", end="18:00", slot_duration=45) for day in range(7)]
    committed = [
        appt(AppointmentStatus.CONFIRMED, utc(2025, 3, 10, 17, 10)),
        appt(AppointmentStatus.CONFIRMED, utc(2025, 3, 11, 20, 0)),
        appt(AppointmentStatus.RESCHEDULE_PROPOSED, utc(2025, 3, 12, 16, 0), utc(2025, 3, 12, 18, 20)),
    ]
    busy = [utc(2025, 3, 10, 17, 10), utc(2025, 3, 11, 20, 0), utc(2025, 3, 12, 18, 20)]

    slots = generate_slots(schedule, 7, committed, LA, now=MONDAY_MIDNIGHT)
    window = timedelta(minutes=45)

    for slot in slots:
        for b in busy:
            assert not (slot.start - window < b < slot.start + window)


def test_generation_is_idempotent():
    schedule = [rule(day, start="09:00", end="17:00", slot_duration=30) for day in range(1, 6)]
    committed = [appt(AppointmentStatus.CONFIRMED, utc(2025, 3, 11, 18, 0))]

    first = generate_slots(schedule, 10, committed, LA, now=MONDAY_MIDNIGHT)
    second = generate_slots(schedule, 10, committed, LA, now=MONDAY_MIDNIGHT)

    assert first == second
    assert starts(first) == sorted(starts(first))
