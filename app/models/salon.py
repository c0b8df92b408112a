# app/models/salon.py
"""
Salon Model
Owns the weekly availability schedule and all appointments booked against it.
"""
from sqlalchemy import Column, String, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from app.models.base import Base, UTCDateTime


class Salon(Base):
    __tablename__ = "salons"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)

    # IANA zone name; every slot and local-time calculation for this salon uses it
    timezone = Column(String(50), nullable=False, default="UTC")

    created_at = Column(UTCDateTime(), server_default=func.now())
    updated_at = Column(UTCDateTime(), server_default=func.now(), onupdate=func.now())

    availability_rules = relationship(
        "AvailabilityRule",
        back_populates="salon",
        order_by="AvailabilityRule.day_of_week",
        cascade="all, delete-orphan",
    )
    customers = relationship("Customer", back_populates="salon")

    def __repr__(self):
        return f"<Salon(id={self.id}, name={self.name}, timezone={self.timezone})>"

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "name": self.name,
            "timezone": self.timezone,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
