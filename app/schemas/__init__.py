# app/schemas/__init__.py
from .appointment import (
    AppointmentCreateRequest,
    ProposeTimeRequest
)

from .availability import (
    AvailabilitySetting,
    AvailabilityReplaceRequest,
    AvailabilityUpdateRequest
)

__all__ = [
    "AppointmentCreateRequest",
    "ProposeTimeRequest",
    "AvailabilitySetting",
    "AvailabilityReplaceRequest",
    "AvailabilityUpdateRequest",
]
