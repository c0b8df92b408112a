# app/services/salon/salon_service.py
"""Service for salon lookups shared by availability and appointments"""
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.models.customer import Customer
from app.models.salon import Salon


class SalonService:
    """Read-only access to salons and their customers"""

    @staticmethod
    def get_salon(db: Session, salon_id: UUID) -> Optional[Salon]:
        return db.query(Salon).filter(Salon.id == salon_id).first()

    @staticmethod
    def require_salon(db: Session, salon_id: UUID) -> Salon:
        """Get salon or raise NotFoundError"""
        salon = SalonService.get_salon(db, salon_id)
        if not salon:
            raise NotFoundError("Salon not found")
        return salon

    @staticmethod
    def require_customer(db: Session, salon_id: UUID, customer_id: UUID) -> Customer:
        """Get a customer of this salon; customers of other salons are reported as missing"""
        customer = db.query(Customer).filter(
            Customer.id == customer_id,
            Customer.salon_id == salon_id
        ).first()
        if not customer:
            raise NotFoundError("Customer not found")
        return customer
