# ============================================================================
# FILE: app/api/v1/availability.py
# Weekly availability schedule endpoints
# ============================================================================
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session
from uuid import UUID

from app.config.database import get_db
from app.api.dependencies import OwnerContext, get_current_owner
from app.schemas.availability import AvailabilityReplaceRequest, AvailabilityUpdateRequest
from app.services.availability.availability_service import AvailabilityService

router = APIRouter(prefix="/availability", tags=["availability"])


@router.get("/{salon_id}")
def get_availability(
        salon_id: UUID = Path(..., description="The salon ID"),
        db: Session = Depends(get_db)
):
    """Weekly schedule for a salon, Sunday first."""
    return {"availability": AvailabilityService.get_availability(db, salon_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
def replace_availability(
        request: AvailabilityReplaceRequest,
        owner: OwnerContext = Depends(get_current_owner),
        db: Session = Depends(get_db)
):
    """
    Replace the whole weekly schedule of the owner's salon.
    Requires owner token.
    """
    rules = AvailabilityService.replace_availability(
        db, owner.salon_id, request.availability_settings
    )
    return {"availability": [rule.to_dict() for rule in rules]}


@router.patch("/{setting_id}")
def update_availability_setting(
        request: AvailabilityUpdateRequest,
        setting_id: UUID = Path(..., description="The availability setting ID"),
        owner: OwnerContext = Depends(get_current_owner),
        db: Session = Depends(get_db)
):
    """
    Update a single day of the schedule.
    Requires owner token.
    """
    rule = AvailabilityService.update_rule(db, owner.salon_id, setting_id, request)
    return {"availability": rule.to_dict()}
