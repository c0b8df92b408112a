from sqlalchemy import Column, Integer, Boolean, Time, ForeignKey, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from app.models.base import Base, UTCDateTime

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
ALLOWED_SLOT_DURATIONS = (15, 30, 45, 60, 90, 120)


class AvailabilityRule(Base):
    """Weekly recurring working hours, one row per salon and day of week"""
    __tablename__ = "salon_availability"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    salon_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("salons.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    day_of_week = Column(Integer, nullable=False)  # 0=Sunday, 6=Saturday
    is_working_day = Column(Boolean, nullable=False, default=True)

    # Civil times of day in the salon's timezone; placeholders on days off
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    slot_duration = Column(Integer, nullable=False, default=30)  # minutes

    created_at = Column(UTCDateTime(), server_default=func.now())
    updated_at = Column(UTCDateTime(), server_default=func.now(), onupdate=func.now())

    salon = relationship("Salon", back_populates="availability_rules")

    __table_args__ = (
        UniqueConstraint("salon_id", "day_of_week", name="uq_salon_availability_day"),
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="check_availability_day_of_week"),
    )

    @property
    def day_name(self) -> str:
        return DAY_NAMES[self.day_of_week]

    def to_dict(self):
        return {
            "id": str(self.id),
            "salonId": str(self.salon_id),
            "dayOfWeek": self.day_of_week,
            "dayName": self.day_name,
            "isWorkingDay": self.is_working_day,
            "startTime": self.start_time.strftime("%H:%M:%S") if self.start_time else None,
            "endTime": self.end_time.strftime("%H:%M:%S") if self.end_time else None,
            "slotDuration": self.slot_duration,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<AvailabilityRule(salon_id={self.salon_id}, day={self.day_of_week})>"
