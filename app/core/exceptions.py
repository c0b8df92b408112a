# app/core/exceptions.py
"""Domain errors raised by services and translated to HTTP responses in one place"""
from typing import Optional


class AppointmentError(Exception):
    """Base class for errors reported back to the caller with an explicit kind."""
    status_code: int = 400
    error_code: str = "error"

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(AppointmentError):
    """Missing or malformed input the caller can correct."""
    status_code = 400
    error_code = "validation_error"


class NotFoundError(AppointmentError):
    """Resource missing, or owned by another salon (reported identically)."""
    status_code = 404
    error_code = "not_found"


class InvalidStateTransition(AppointmentError):
    """Action not legal from the appointment's current status."""
    status_code = 400
    error_code = "invalid_state_transition"

    def __init__(self, current_status: str, action: str):
        super().__init__(
            f"Cannot {action.lower()} an appointment in status {current_status}",
            details={"current_status": current_status, "action": action},
        )
        self.current_status = current_status
        self.action = action


class SlotUnavailable(AppointmentError):
    """Requested time collides with a confirmed appointment."""
    status_code = 409
    error_code = "slot_unavailable"


class InternalError(AppointmentError):
    status_code = 500
    error_code = "internal_error"
