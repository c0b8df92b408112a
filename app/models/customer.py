# app/models/customer.py
"""
Customer Model
Managed by the customer/subscription side of the product; appointments
only read it for ownership checks and owner-facing contact details.
"""
from sqlalchemy import Column, String, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from app.models.base import Base, UTCDateTime


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    salon_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("salons.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(30), nullable=True)

    created_at = Column(UTCDateTime(), server_default=func.now())

    salon = relationship("Salon", back_populates="customers")

    def __repr__(self):
        return f"<Customer(id={self.id}, salon_id={self.salon_id}, name={self.name})>"
