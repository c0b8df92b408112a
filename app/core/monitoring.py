"""Health endpoints"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.config.settings import get_settings
from app.core.exceptions import ValidationError
from app.utils.timezone import get_zone

logger = logging.getLogger(__name__)

health_router = APIRouter()


@health_router.get("")
async def health_check():
    """Liveness only; touches nothing"""
    return {"status": "healthy", "service": "salon-appointments-api"}


@health_router.get("/detailed")
def detailed_health_check(db: Session = Depends(get_db)):
    """Database reachability and tz database presence"""
    checks = {"database": "unknown", "tzdata": "unknown"}

    try:
        db.execute(text("SELECT 1"))
        checks["database"] = "healthy"
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        checks["database"] = "unhealthy"

    try:
        get_zone(get_settings().DEFAULT_TIMEZONE)
        checks["tzdata"] = "healthy"
    except ValidationError as e:
        logger.error(f"Timezone database check failed: {e.message}")
        checks["tzdata"] = "unhealthy"

    healthy = all(value == "healthy" for value in checks.values())
    return {"status": "healthy" if healthy else "degraded", "checks": checks}
