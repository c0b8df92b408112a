# ============================================================================
# FILE: app/api/v1/appointments.py
# Appointment booking and lifecycle endpoints - thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends, Query, Path, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from app.config.database import get_db
from app.api.dependencies import OwnerContext, get_current_owner, optional_current_owner
from app.schemas.appointment import AppointmentCreateRequest, ProposeTimeRequest
from app.services.appointment.appointment_service import AppointmentService
from app.services.appointment.appointment_query_service import AppointmentQueryService
from app.services.appointment.state_machine import AppointmentAction
from app.services.availability.availability_service import AvailabilityService

router = APIRouter(prefix="/appointments", tags=["appointments"])


def _appointment_response(appointment) -> dict:
    return {"appointment": AppointmentQueryService.serialize_appointment(appointment)}


@router.get("/available-slots")
def get_available_slots(
        salon_id: UUID = Query(..., alias="salonId", description="Salon to list slots for"),
        days: Optional[int] = Query(None, description="Days to look ahead (default 30)"),
        db: Session = Depends(get_db)
):
    """
    Open slots a customer can request, computed fresh from the salon's weekly
    schedule minus confirmed and provisionally held appointments.
    """
    return AvailabilityService.get_available_slots(db=db, salon_id=salon_id, days=days)


@router.get("/owner")
def list_owner_appointments(
        status_filter: Optional[str] = Query(
            None, alias="status",
            description="Filter by status (PENDING, CONFIRMED, RESCHEDULE_PROPOSED, CANCELLED)"
        ),
        owner: OwnerContext = Depends(get_current_owner),
        db: Session = Depends(get_db)
):
    """
    All appointments for the owner's salon.
    Requires owner token.
    """
    return AppointmentQueryService.list_for_owner(
        db=db,
        salon_id=owner.salon_id,
        status=status_filter
    )


@router.get("/customer/{customer_id}")
def list_customer_appointments(
        customer_id: UUID = Path(..., description="The customer ID"),
        db: Session = Depends(get_db)
):
    """All appointments for a customer, newest first."""
    return AppointmentQueryService.list_for_customer(db=db, customer_id=customer_id)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_appointment(
        request: AppointmentCreateRequest,
        db: Session = Depends(get_db)
):
    """
    Request an appointment. Starts in PENDING.
    Returns 409 if a confirmed appointment already holds the slot.
    """
    appointment = AppointmentService.create_appointment(
        db=db,
        salon_id=request.salon_id,
        customer_id=request.customer_id,
        requested_time=request.requested_time,
        subscription_id=request.subscription_id,
        notes=request.notes
    )
    return _appointment_response(appointment)


@router.patch("/{appointment_id}/confirm")
def confirm_appointment(
        appointment_id: UUID = Path(..., description="The appointment ID"),
        owner: OwnerContext = Depends(get_current_owner),
        db: Session = Depends(get_db)
):
    """PENDING -> CONFIRMED. Requires owner token."""
    appointment = AppointmentService.get_for_salon(db, owner.salon_id, appointment_id)
    appointment = AppointmentService.apply_action(db, appointment, AppointmentAction.CONFIRM)
    return _appointment_response(appointment)


@router.patch("/{appointment_id}/propose")
def propose_new_time(
        request: ProposeTimeRequest,
        appointment_id: UUID = Path(..., description="The appointment ID"),
        owner: OwnerContext = Depends(get_current_owner),
        db: Session = Depends(get_db)
):
    """PENDING -> RESCHEDULE_PROPOSED with a new time. Requires owner token."""
    appointment = AppointmentService.get_for_salon(db, owner.salon_id, appointment_id)
    appointment = AppointmentService.apply_action(
        db, appointment, AppointmentAction.PROPOSE, proposed_time=request.proposed_time
    )
    return _appointment_response(appointment)


@router.patch("/{appointment_id}/accept-proposal")
def accept_proposal(
        appointment_id: UUID = Path(..., description="The appointment ID"),
        db: Session = Depends(get_db)
):
    """Customer accepts the proposed time: RESCHEDULE_PROPOSED -> CONFIRMED."""
    appointment = AppointmentService.get_by_id(db, appointment_id)
    appointment = AppointmentService.apply_action(db, appointment, AppointmentAction.ACCEPT)
    return _appointment_response(appointment)


@router.patch("/{appointment_id}/decline-proposal")
def decline_proposal(
        appointment_id: UUID = Path(..., description="The appointment ID"),
        db: Session = Depends(get_db)
):
    """Customer declines the proposed time: RESCHEDULE_PROPOSED -> CANCELLED."""
    appointment = AppointmentService.get_by_id(db, appointment_id)
    appointment = AppointmentService.apply_action(db, appointment, AppointmentAction.DECLINE)
    return _appointment_response(appointment)


@router.patch("/{appointment_id}/cancel")
def cancel_appointment(
        appointment_id: UUID = Path(..., description="The appointment ID"),
        owner: Optional[OwnerContext] = Depends(optional_current_owner),
        db: Session = Depends(get_db)
):
    """
    Cancel from any non-terminal status.
    With an owner token the appointment must belong to the owner's salon.
    """
    if owner:
        appointment = AppointmentService.get_for_salon(db, owner.salon_id, appointment_id)
    else:
        appointment = AppointmentService.get_by_id(db, appointment_id)

    appointment = AppointmentService.apply_action(db, appointment, AppointmentAction.CANCEL)
    return _appointment_response(appointment)
