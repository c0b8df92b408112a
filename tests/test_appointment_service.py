from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import InvalidStateTransition, NotFoundError, SlotUnavailable
from app.models import Appointment, AppointmentStatus
from app.services.appointment.appointment_service import AppointmentService
from app.services.appointment.state_machine import AppointmentAction

MONDAY_9AM = datetime(2030, 1, 7, 17, 0, tzinfo=timezone.utc)
MONDAY_10AM = datetime(2030, 1, 7, 18, 0, tzinfo=timezone.utc)


def test_partial_unique_index_rejects_second_confirmed_row(db, salon, customer):
    for _ in range(2):
        db.add(Appointment(
            salon_id=salon.id,
            customer_id=customer.id,
            requested_time=MONDAY_9AM,
            status=AppointmentStatus.CONFIRMED.value,
        ))

    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_unique_index_ignores_cancelled_rows(db, salon, customer):
    for status in (AppointmentStatus.CANCELLED, AppointmentStatus.CANCELLED, AppointmentStatus.CONFIRMED):
        db.add(Appointment(
            salon_id=salon.id,
            customer_id=customer.id,
            requested_time=MONDAY_9AM,
            status=status.value,
        ))
    db.commit()

    assert db.query(Appointment).count() == 3


def test_times_come_back_as_aware_utc(db, salon, customer):
    appointment = AppointmentService.create_appointment(
        db, salon.id, customer.id, datetime(2030, 1, 7, 9, 0)
    )
    db.expire_all()

    stored = db.get(Appointment, appointment.id)
    assert stored.requested_time == datetime(2030, 1, 7, 9, 0, tzinfo=timezone.utc)
    assert stored.requested_time.tzinfo is not None


def test_conflict_uses_slot_length_of_the_day(db, salon, customer, weekly_schedule):
    weekly_schedule(slot_duration=120)
    first = AppointmentService.create_appointment(db, salon.id, customer.id, MONDAY_9AM)
    AppointmentService.apply_action(db, first, AppointmentAction.CONFIRM)

    # 10:00 sits inside the confirmed 09:00-11:00 window
    with pytest.raises(SlotUnavailable):
        AppointmentService.create_appointment(db, salon.id, customer.id, MONDAY_10AM)


def test_failed_confirm_leaves_row_untouched(db, salon, customer):
    first = AppointmentService.create_appointment(db, salon.id, customer.id, MONDAY_9AM)
    second = AppointmentService.create_appointment(db, salon.id, customer.id, MONDAY_9AM)
    AppointmentService.apply_action(db, first, AppointmentAction.CONFIRM)

    with pytest.raises(SlotUnavailable):
        AppointmentService.apply_action(db, second, AppointmentAction.CONFIRM)

    db.expire_all()
    assert db.get(Appointment, second.id).status == AppointmentStatus.PENDING.value


def test_get_for_salon_hides_other_salons(db, salon, other_salon, customer):
    appointment = AppointmentService.create_appointment(db, salon.id, customer.id, MONDAY_9AM)

    assert AppointmentService.get_for_salon(db, salon.id, appointment.id).id == appointment.id
    with pytest.raises(NotFoundError):
        AppointmentService.get_for_salon(db, other_salon.id, appointment.id)


def test_stale_copy_cannot_confirm_cancelled_appointment(session_factory, salon, customer):
    owner_db = session_factory()
    customer_db = session_factory()
    try:
        created = AppointmentService.create_appointment(owner_db, salon.id, customer.id, MONDAY_9AM)
        owner_copy = AppointmentService.get_for_salon(owner_db, salon.id, created.id)

        customer_copy = AppointmentService.get_by_id(customer_db, created.id)
        AppointmentService.apply_action(customer_db, customer_copy, AppointmentAction.CANCEL)

        # Owner still sees PENDING in its session
        assert owner_copy.status == AppointmentStatus.PENDING.value
        with pytest.raises(InvalidStateTransition):
            AppointmentService.apply_action(owner_db, owner_copy, AppointmentAction.CONFIRM)

        customer_db.expire_all()
        assert customer_db.get(Appointment, created.id).status == AppointmentStatus.CANCELLED.value
    finally:
        owner_db.close()
        customer_db.close()


def test_stale_copy_cannot_accept_withdrawn_proposal(session_factory, salon, customer):
    owner_db = session_factory()
    customer_db = session_factory()
    try:
        created = AppointmentService.create_appointment(owner_db, salon.id, customer.id, MONDAY_9AM)
        AppointmentService.apply_action(
            owner_db, created, AppointmentAction.PROPOSE, proposed_time=MONDAY_10AM
        )
        customer_copy = AppointmentService.get_by_id(customer_db, created.id)
        assert customer_copy.status == AppointmentStatus.RESCHEDULE_PROPOSED.value

        AppointmentService.apply_action(owner_db, created, AppointmentAction.CANCEL)

        with pytest.raises(InvalidStateTransition):
            AppointmentService.apply_action(customer_db, customer_copy, AppointmentAction.ACCEPT)

        owner_db.expire_all()
        stored = owner_db.get(Appointment, created.id)
        assert stored.status == AppointmentStatus.CANCELLED.value
        assert stored.requested_time == MONDAY_9AM
        assert stored.proposed_time is None
    finally:
        owner_db.close()
        customer_db.close()
