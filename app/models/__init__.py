# app/models/__init__.py
from .base import Base, UTCDateTime
from .salon import Salon
from .customer import Customer
from .availability import AvailabilityRule, DAY_NAMES, ALLOWED_SLOT_DURATIONS
from .appointment import Appointment, AppointmentStatus

__all__ = [
    "Base",
    "UTCDateTime",
    "Salon",
    "Customer",
    "AvailabilityRule",
    "DAY_NAMES",
    "ALLOWED_SLOT_DURATIONS",
    "Appointment",
    "AppointmentStatus",
]
