"""
Pydantic schemas for appointment requests
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AppointmentCreateRequest(BaseModel):
    """Customer booking request. Times are ISO-8601 instants; naive values are read as UTC."""
    customer_id: UUID
    salon_id: UUID
    subscription_id: Optional[UUID] = None
    requested_time: datetime
    notes: Optional[str] = Field(None, max_length=2000)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "customerId": "7d7c2a3e-8a55-4c3f-9c1e-2f0b7e3a9d10",
                "salonId": "4267ca4e-1b71-4b5c-882b-c52475f8c613",
                "requestedTime": "2025-03-10T16:00:00Z",
                "notes": "Trim and blow-dry"
            }
        }
    )


class ProposeTimeRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    proposed_time: datetime
