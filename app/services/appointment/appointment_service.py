# ============================================================================
# app/services/appointment/appointment_service.py
# Booking and lifecycle writes - no FastAPI dependencies
# ============================================================================
"""Service for creating appointments and driving their lifecycle"""
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from app.config.settings import get_settings
from app.core.exceptions import AppointmentError, NotFoundError, SlotUnavailable
from app.models.appointment import Appointment, AppointmentStatus
from app.models.availability import AvailabilityRule
from app.models.salon import Salon
from app.services.appointment.state_machine import (
    AppointmentAction,
    AppointmentState,
    transition,
)
from app.services.salon.salon_service import SalonService
from app.utils.timezone import as_utc, day_of_week

logger = logging.getLogger(__name__)


class AppointmentService:
    """Handles appointment writes: booking guard plus state transitions"""

    @staticmethod
    def _lock_salon(db: Session, salon_id: UUID) -> Salon:
        """
        Take a row lock on the salon so conflict check and write happen as one
        unit; concurrent bookings for the same salon queue behind it.
        """
        salon = db.query(Salon).filter(Salon.id == salon_id).with_for_update().first()
        if not salon:
            raise NotFoundError("Salon not found")
        return salon

    @staticmethod
    def slot_duration_at(db: Session, salon: Salon, instant: datetime) -> int:
        """Slot length (minutes) of the rule covering `instant`'s local weekday"""
        rule = db.query(AvailabilityRule).filter(
            AvailabilityRule.salon_id == salon.id,
            AvailabilityRule.day_of_week == day_of_week(instant, salon.timezone)
        ).first()
        if rule and rule.is_working_day and rule.slot_duration:
            return rule.slot_duration
        return get_settings().DEFAULT_SLOT_DURATION_MINUTES

    @staticmethod
    def find_conflict(
            db: Session,
            salon: Salon,
            instant: datetime,
            exclude_id: Optional[UUID] = None
    ) -> Optional[Appointment]:
        """
        Confirmed appointment whose slot window overlaps the window starting at
        `instant`. Both windows use the slot length of `instant`'s day, matching
        the overlap test used when listing slots.
        """
        window = timedelta(minutes=AppointmentService.slot_duration_at(db, salon, instant))
        query = db.query(Appointment).filter(
            Appointment.salon_id == salon.id,
            Appointment.status == AppointmentStatus.CONFIRMED.value,
            Appointment.requested_time > instant - window,
            Appointment.requested_time < instant + window,
        )
        if exclude_id is not None:
            query = query.filter(Appointment.id != exclude_id)
        return query.first()

    @staticmethod
    def _commit_or_conflict(db: Session, message: str):
        try:
            db.commit()
        except IntegrityError as ie:
            db.rollback()
            logger.info(f"IntegrityError on commit (slot likely taken): {ie}")
            raise SlotUnavailable(message) from ie
        except SQLAlchemyError:
            db.rollback()
            raise

    @staticmethod
    def create_appointment(
            db: Session,
            salon_id: UUID,
            customer_id: UUID,
            requested_time: datetime,
            subscription_id: Optional[UUID] = None,
            notes: Optional[str] = None
    ) -> Appointment:
        """
        Create a PENDING appointment request.

        Raises:
            NotFoundError: unknown salon, or customer not in this salon
            SlotUnavailable: a confirmed appointment already holds that time
        """
        requested_time = as_utc(requested_time)
        salon = AppointmentService._lock_salon(db, salon_id)
        SalonService.require_customer(db, salon_id, customer_id)

        conflict = AppointmentService.find_conflict(db, salon, requested_time)
        if conflict:
            db.rollback()
            logger.warning(
                f"Booking conflict for salon {salon_id} at {requested_time.isoformat()} "
                f"(confirmed appointment {conflict.id})"
            )
            raise SlotUnavailable("Slot is no longer available")

        appointment = Appointment(
            salon_id=salon_id,
            customer_id=customer_id,
            subscription_id=subscription_id,
            requested_time=requested_time,
            status=AppointmentStatus.PENDING.value,
            notes=notes,
        )
        db.add(appointment)
        AppointmentService._commit_or_conflict(db, "Slot is no longer available")
        db.refresh(appointment)

        logger.info(f"Created appointment {appointment.id} for salon {salon_id} "
                    f"at {requested_time.isoformat()}")
        return appointment

    @staticmethod
    def get_for_salon(db: Session, salon_id: UUID, appointment_id: UUID) -> Appointment:
        """Appointment scoped to a salon; other salons' appointments look missing"""
        appointment = db.query(Appointment).filter(
            Appointment.id == appointment_id,
            Appointment.salon_id == salon_id
        ).first()
        if not appointment:
            raise NotFoundError("Appointment not found")
        return appointment

    @staticmethod
    def get_by_id(db: Session, appointment_id: UUID) -> Appointment:
        appointment = db.query(Appointment).filter(Appointment.id == appointment_id).first()
        if not appointment:
            raise NotFoundError("Appointment not found")
        return appointment

    @staticmethod
    def _lock_appointment(db: Session, appointment: Appointment) -> AppointmentState:
        """
        Lock the appointment row and reload the caller's copy from it.
        Returns the committed lifecycle fields.
        """
        locked = db.query(Appointment.id).filter(
            Appointment.id == appointment.id
        ).with_for_update().first()
        if locked is None:
            db.rollback()
            raise NotFoundError("Appointment not found")
        db.refresh(appointment)
        return AppointmentState.of(appointment)

    @staticmethod
    def apply_action(
            db: Session,
            appointment: Appointment,
            action: AppointmentAction,
            proposed_time: Optional[datetime] = None
    ) -> Appointment:
        """
        Run one lifecycle transition and persist it.

        The row is re-read under a lock first, so a caller holding a stale
        copy cannot undo a transition committed in the meantime.

        Transitions that end in CONFIRMED re-run the booking guard against
        other confirmed appointments.

        Raises:
            InvalidStateTransition: action not legal from the current status
            ValidationError: PROPOSE without a time
            SlotUnavailable: confirming would double-book the slot
        """
        current = AppointmentService._lock_appointment(db, appointment)
        try:
            new_state = transition(current, action, proposed_time)
        except AppointmentError:
            db.rollback()
            raise

        if new_state.status == AppointmentStatus.CONFIRMED:
            salon = AppointmentService._lock_salon(db, appointment.salon_id)
            conflict = AppointmentService.find_conflict(
                db, salon, new_state.requested_time, exclude_id=appointment.id
            )
            if conflict:
                db.rollback()
                logger.warning(
                    f"Cannot confirm appointment {appointment.id}: slot held by {conflict.id}"
                )
                raise SlotUnavailable("Slot is no longer available")

        appointment.status = new_state.status.value
        appointment.requested_time = new_state.requested_time
        appointment.proposed_time = new_state.proposed_time

        AppointmentService._commit_or_conflict(db, "Slot is no longer available")
        db.refresh(appointment)

        logger.info(
            f"Appointment {appointment.id}: {current.status.value} --{action.value}--> "
            f"{new_state.status.value}"
        )
        return appointment
