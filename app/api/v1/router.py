"""
API router setup
Organized into: public/customer routes and owner routes (JWT)
"""
from fastapi import APIRouter

from app.api.v1 import appointments, availability

api_v1_router = APIRouter()

# ============================================================================
# APPOINTMENTS (customer routes are public, owner routes need a JWT)
# ============================================================================
api_v1_router.include_router(appointments.router)

# ============================================================================
# AVAILABILITY (read is public, writes need an owner JWT)
# ============================================================================
api_v1_router.include_router(availability.router)


# ============================================================================
# ROOT ENDPOINT - API Info
# ============================================================================
@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """
    API information and available endpoints.
    """
    return {
        "version": "1.0",
        "authentication": {
            "customer": "No authentication required",
            "owner": "JWT Bearer token with role OWNER and salon_id claim required"
        }
    }
