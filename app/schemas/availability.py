"""
Pydantic schemas for salon availability settings
"""
from datetime import time
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.models.availability import ALLOWED_SLOT_DURATIONS


def _check_slot_duration(v: Optional[int]) -> Optional[int]:
    if v is not None and v not in ALLOWED_SLOT_DURATIONS:
        allowed = ", ".join(str(d) for d in ALLOWED_SLOT_DURATIONS)
        raise ValueError(f"slotDuration must be one of {allowed}")
    return v


class AvailabilitySetting(BaseModel):
    """One day of the weekly schedule as sent by the owner dashboard"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    day_of_week: int = Field(..., ge=0, le=6, description="0=Sunday, 6=Saturday")
    is_working_day: bool
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    slot_duration: Optional[int] = Field(None, description="Minutes per slot")

    @field_validator("slot_duration")
    @classmethod
    def validate_slot_duration(cls, v):
        return _check_slot_duration(v)


class AvailabilityReplaceRequest(BaseModel):
    """Full weekly schedule; replaces whatever the salon had before"""
    availability_settings: List[AvailabilitySetting]

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "availabilitySettings": [
                    {"dayOfWeek": 0, "isWorkingDay": False},
                    {"dayOfWeek": 1, "isWorkingDay": True, "startTime": "09:00",
                     "endTime": "17:00", "slotDuration": 60},
                ]
            }
        }
    )


class AvailabilityUpdateRequest(BaseModel):
    """Partial update of a single day; omitted fields keep their value"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    is_working_day: Optional[bool] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    slot_duration: Optional[int] = None

    @field_validator("slot_duration")
    @classmethod
    def validate_slot_duration(cls, v):
        return _check_slot_duration(v)
