from typing import List, Dict, Optional
from datetime import datetime, time, timedelta
from uuid import UUID
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from app.config.settings import get_settings
from app.core.exceptions import NotFoundError, ValidationError
from app.models.availability import AvailabilityRule
from app.models.appointment import Appointment, AppointmentStatus
from app.schemas.availability import AvailabilitySetting, AvailabilityUpdateRequest
from app.services.availability.slot_generator import generate_slots
from app.services.salon.salon_service import SalonService
from app.utils.timezone import as_utc, utc_now
import logging

logger = logging.getLogger(__name__)

# Stored for non-working days, never used for slot generation
PLACEHOLDER_START = time(9, 0)
PLACEHOLDER_END = time(17, 0)


class AvailabilityService:
    """Weekly schedule management and slot listing for a salon"""

    @staticmethod
    def get_rules(db: Session, salon_id: UUID) -> List[AvailabilityRule]:
        return db.query(AvailabilityRule).filter(
            AvailabilityRule.salon_id == salon_id
        ).order_by(AvailabilityRule.day_of_week).all()

    @staticmethod
    def get_availability(db: Session, salon_id: UUID) -> List[Dict]:
        """Schedule rows ordered Sunday..Saturday, with day names"""
        SalonService.require_salon(db, salon_id)
        return [rule.to_dict() for rule in AvailabilityService.get_rules(db, salon_id)]

    @staticmethod
    def replace_availability(
            db: Session,
            salon_id: UUID,
            settings: List[AvailabilitySetting]
    ) -> List[AvailabilityRule]:
        """
        Replace the salon's weekly schedule wholesale.

        The payload must carry exactly one entry per day of week. Working days
        need both start and end times; non-working days get placeholder times.
        A working day whose start is not before its end is stored as given and
        simply yields no slots.
        """
        SalonService.require_salon(db, salon_id)

        days = [setting.day_of_week for setting in settings]
        if sorted(days) != list(range(7)):
            raise ValidationError(
                "availabilitySettings must contain exactly one entry for each day of week (0-6)"
            )

        for setting in settings:
            if setting.is_working_day and (setting.start_time is None or setting.end_time is None):
                raise ValidationError(
                    f"startTime and endTime are required for working day {setting.day_of_week}"
                )

        app_settings = get_settings()
        try:
            db.query(AvailabilityRule).filter(
                AvailabilityRule.salon_id == salon_id
            ).delete(synchronize_session=False)

            rules = []
            for setting in sorted(settings, key=lambda s: s.day_of_week):
                rules.append(AvailabilityRule(
                    salon_id=salon_id,
                    day_of_week=setting.day_of_week,
                    is_working_day=setting.is_working_day,
                    start_time=setting.start_time if setting.is_working_day else PLACEHOLDER_START,
                    end_time=setting.end_time if setting.is_working_day else PLACEHOLDER_END,
                    slot_duration=setting.slot_duration or app_settings.DEFAULT_SLOT_DURATION_MINUTES,
                ))

            db.add_all(rules)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception(f"Failed to replace availability for salon {salon_id}")
            raise

        for rule in rules:
            db.refresh(rule)

        logger.info(f"Replaced availability for salon {salon_id}: "
                    f"{sum(1 for r in rules if r.is_working_day)} working days")
        return rules

    @staticmethod
    def update_rule(
            db: Session,
            salon_id: UUID,
            rule_id: UUID,
            changes: AvailabilityUpdateRequest
    ) -> AvailabilityRule:
        """Patch a single day; fields left out of the request keep their value."""
        rule = db.query(AvailabilityRule).filter(
            AvailabilityRule.id == rule_id,
            AvailabilityRule.salon_id == salon_id
        ).first()

        if not rule:
            raise NotFoundError("Availability setting not found")

        for field, value in changes.model_dump(exclude_none=True).items():
            setattr(rule, field, value)

        try:
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception(f"Failed to update availability setting {rule_id}")
            raise

        db.refresh(rule)
        logger.info(f"Updated availability setting {rule_id} for salon {salon_id}")
        return rule

    @staticmethod
    def get_committed_appointments(
            db: Session,
            salon_id: UUID,
            since: datetime
    ) -> List[Appointment]:
        """Appointments currently holding time from `since` onwards"""
        return db.query(Appointment).filter(
            Appointment.salon_id == salon_id,
            Appointment.status.in_([
                AppointmentStatus.CONFIRMED.value,
                AppointmentStatus.RESCHEDULE_PROPOSED.value,
            ]),
            (Appointment.requested_time >= since) | (Appointment.proposed_time >= since)
        ).all()

    @staticmethod
    def get_available_slots(
            db: Session,
            salon_id: UUID,
            days: Optional[int] = None,
            now: Optional[datetime] = None
    ) -> Dict:
        """
        List bookable slots for the next `days` days in the salon's timezone.
        Computed fresh from the stored schedule and committed appointments on
        every call.
        """
        app_settings = get_settings()
        if days is None:
            days = app_settings.DEFAULT_SLOT_HORIZON_DAYS
        if days < 0 or days > app_settings.MAX_SLOT_HORIZON_DAYS:
            raise ValidationError(
                f"days must be between 0 and {app_settings.MAX_SLOT_HORIZON_DAYS}"
            )

        salon = SalonService.require_salon(db, salon_id)
        salon_timezone = salon.timezone or app_settings.DEFAULT_TIMEZONE

        rules = AvailabilityService.get_rules(db, salon_id)
        if not rules:
            logger.warning(f"No availability rules found for salon {salon_id}")
            return {"slots": [], "salonTimezone": salon_timezone}

        now = as_utc(now) if now else utc_now()
        committed = AvailabilityService.get_committed_appointments(
            db, salon_id, since=now - timedelta(days=1)
        )

        slots = generate_slots(rules, days, committed, salon_timezone, now=now)
        logger.debug(f"Generated {len(slots)} slots for salon {salon_id} over {days} days")

        return {
            "slots": [slot.to_dict() for slot in slots],
            "salonTimezone": salon_timezone,
        }
