from sqlalchemy import Column, String, Text, ForeignKey, Index, CheckConstraint, Uuid, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
import uuid

from app.models.base import Base, UTCDateTime


class AppointmentStatus(str, enum.Enum):
    """Appointment lifecycle states."""
    PENDING = "PENDING"                          # Requested by customer, awaiting owner
    CONFIRMED = "CONFIRMED"
    RESCHEDULE_PROPOSED = "RESCHEDULE_PROPOSED"  # Owner proposed another time
    CANCELLED = "CANCELLED"                      # Terminal


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # References
    salon_id = Column(Uuid(as_uuid=True), ForeignKey("salons.id"), nullable=False, index=True)
    customer_id = Column(Uuid(as_uuid=True), ForeignKey("customers.id"), nullable=False, index=True)
    subscription_id = Column(Uuid(as_uuid=True), nullable=True)  # Owned by the subscriptions system

    # Scheduling, stored as UTC instants
    requested_time = Column(UTCDateTime(), nullable=False)
    proposed_time = Column(UTCDateTime(), nullable=True)  # Set only while RESCHEDULE_PROPOSED

    status = Column(String(30), nullable=False, default=AppointmentStatus.PENDING.value)
    notes = Column(Text, nullable=True)

    created_at = Column(UTCDateTime(), server_default=func.now())
    updated_at = Column(UTCDateTime(), server_default=func.now(), onupdate=func.now())

    customer = relationship("Customer", lazy="joined")
    salon = relationship("Salon", lazy="joined")

    __table_args__ = (
        # At most one confirmed appointment per salon instant
        Index(
            "uq_appointments_confirmed_slot",
            "salon_id",
            "requested_time",
            unique=True,
            postgresql_where=text("status = 'CONFIRMED'"),
            sqlite_where=text("status = 'CONFIRMED'"),
        ),
        Index("idx_appointments_salon_status", "salon_id", "status"),
        CheckConstraint(
            "(status = 'RESCHEDULE_PROPOSED') = (proposed_time IS NOT NULL)",
            name="check_proposed_time_only_when_proposed"
        ),
    )

    def __repr__(self):
        return f"<Appointment(id={self.id}, salon_id={self.salon_id}, status={self.status})>"
