# ============================================================================
# app/services/appointment/state_machine.py
# Appointment lifecycle - pure functions, no database access
# ============================================================================
"""
Appointment lifecycle transitions.

    PENDING --confirm--> CONFIRMED
    PENDING --propose(t)--> RESCHEDULE_PROPOSED
    RESCHEDULE_PROPOSED --accept--> CONFIRMED      (requested := proposed)
    RESCHEDULE_PROPOSED --decline--> CANCELLED
    PENDING | CONFIRMED | RESCHEDULE_PROPOSED --cancel--> CANCELLED

Every other (status, action) pair raises InvalidStateTransition.
"""
import enum
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from app.core.exceptions import InvalidStateTransition, ValidationError
from app.models.appointment import AppointmentStatus
from app.utils.timezone import as_utc


class AppointmentAction(str, enum.Enum):
    CONFIRM = "CONFIRM"    # owner
    PROPOSE = "PROPOSE"    # owner
    ACCEPT = "ACCEPT"      # customer
    DECLINE = "DECLINE"    # customer
    CANCEL = "CANCEL"      # either side


# Statuses whose effective time blocks a slot
COMMITTED_STATUSES = frozenset({
    AppointmentStatus.CONFIRMED,
    AppointmentStatus.RESCHEDULE_PROPOSED,
})

TRANSITIONS = {
    (AppointmentStatus.PENDING, AppointmentAction.CONFIRM): AppointmentStatus.CONFIRMED,
    (AppointmentStatus.PENDING, AppointmentAction.PROPOSE): AppointmentStatus.RESCHEDULE_PROPOSED,
    (AppointmentStatus.RESCHEDULE_PROPOSED, AppointmentAction.ACCEPT): AppointmentStatus.CONFIRMED,
    (AppointmentStatus.RESCHEDULE_PROPOSED, AppointmentAction.DECLINE): AppointmentStatus.CANCELLED,
    (AppointmentStatus.PENDING, AppointmentAction.CANCEL): AppointmentStatus.CANCELLED,
    (AppointmentStatus.CONFIRMED, AppointmentAction.CANCEL): AppointmentStatus.CANCELLED,
    (AppointmentStatus.RESCHEDULE_PROPOSED, AppointmentAction.CANCEL): AppointmentStatus.CANCELLED,
}


@dataclass(frozen=True)
class AppointmentState:
    status: AppointmentStatus
    requested_time: datetime
    proposed_time: Optional[datetime] = None

    @classmethod
    def of(cls, appointment) -> "AppointmentState":
        """Snapshot the lifecycle fields of an Appointment row."""
        return cls(
            status=AppointmentStatus(appointment.status),
            requested_time=appointment.requested_time,
            proposed_time=appointment.proposed_time,
        )


def transition(
        current: AppointmentState,
        action: AppointmentAction,
        proposed_time: Optional[datetime] = None
) -> AppointmentState:
    """
    Apply `action` to `current` and return the resulting state.

    Raises:
        InvalidStateTransition: action is not legal from current.status
        ValidationError: PROPOSE without a proposed_time
    """
    target = TRANSITIONS.get((current.status, action))
    if target is None:
        raise InvalidStateTransition(current.status.value, action.value)

    if action == AppointmentAction.PROPOSE:
        if proposed_time is None:
            raise ValidationError("proposedTime is required")
        return replace(current, status=target, proposed_time=as_utc(proposed_time))

    if action == AppointmentAction.ACCEPT:
        if current.proposed_time is None:
            raise InvalidStateTransition(current.status.value, action.value)
        return AppointmentState(
            status=target,
            requested_time=current.proposed_time,
            proposed_time=None,
        )

    # CONFIRM from PENDING never carries a proposal; DECLINE/CANCEL drop it
    return replace(current, status=target, proposed_time=None)


def effective_time(appointment) -> datetime:
    """The instant an appointment currently occupies: the proposal if any, else the request."""
    if appointment.proposed_time is not None:
        return appointment.proposed_time
    return appointment.requested_time


def is_committed(appointment) -> bool:
    return AppointmentStatus(appointment.status) in COMMITTED_STATUSES
