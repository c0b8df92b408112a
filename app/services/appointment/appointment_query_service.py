# ============================================================================
# app/services/appointment/appointment_query_service.py
# Read-only appointment listings - no FastAPI dependencies, fully testable
# ============================================================================
from sqlalchemy.orm import Session
from sqlalchemy import desc
from typing import Optional, Dict, Any
from uuid import UUID

from app.core.exceptions import ValidationError
from app.models.appointment import Appointment, AppointmentStatus
from app.services.salon.salon_service import SalonService
from app.utils.timezone import to_iso


class AppointmentQueryService:
    """Service layer for appointment listings."""

    @staticmethod
    def list_for_owner(
            db: Session,
            salon_id: UUID,
            status: Optional[str] = None
    ) -> Dict[str, Any]:
        """All appointments of a salon, newest requested time first, with customer contact details."""
        salon = SalonService.require_salon(db, salon_id)

        query = db.query(Appointment).filter(Appointment.salon_id == salon_id)

        if status:
            try:
                status = AppointmentStatus(status.upper()).value
            except ValueError:
                raise ValidationError(f"Unknown status: {status}")
            query = query.filter(Appointment.status == status)

        appointments = query.order_by(desc(Appointment.requested_time)).all()

        return {
            "appointments": [
                AppointmentQueryService.serialize_appointment(appt, include_customer=True)
                for appt in appointments
            ],
            "salonTimezone": salon.timezone,
        }

    @staticmethod
    def list_for_customer(db: Session, customer_id: UUID) -> Dict[str, Any]:
        """A customer's appointments, each tagged with the salon name and timezone for display."""
        appointments = db.query(Appointment).filter(
            Appointment.customer_id == customer_id
        ).order_by(desc(Appointment.requested_time)).all()

        return {
            "appointments": [
                AppointmentQueryService.serialize_appointment(appt, include_salon=True)
                for appt in appointments
            ]
        }

    @staticmethod
    def serialize_appointment(
            appointment: Appointment,
            include_customer: bool = False,
            include_salon: bool = False
    ) -> Dict[str, Any]:
        """Convert Appointment model to its wire representation."""
        base = {
            "id": str(appointment.id),
            "salonId": str(appointment.salon_id),
            "customerId": str(appointment.customer_id),
            "subscriptionId": str(appointment.subscription_id) if appointment.subscription_id else None,
            "requestedTime": to_iso(appointment.requested_time),
            "proposedTime": to_iso(appointment.proposed_time),
            "status": appointment.status,
            "notes": appointment.notes,
            "createdAt": to_iso(appointment.created_at),
            "updatedAt": to_iso(appointment.updated_at),
        }

        if include_customer:
            customer = appointment.customer
            base.update({
                "customerName": customer.name if customer else None,
                "customerEmail": customer.email if customer else None,
                "customerPhone": customer.phone if customer else None,
            })

        if include_salon:
            salon = appointment.salon
            base.update({
                "salonName": salon.name if salon else None,
                "salonTimezone": salon.timezone if salon else None,
            })

        return base
