from sqlalchemy import Column, String, Boolean, DateTime, Numeric, Text, JSON
from sqlalchemy.dialects.postgresql import UUID
from uuid import uuid4
from app.database.database import Base
from app.common.mixins import TenantMixin, TimestampMixin


class Client(Base, TenantMixin, TimestampMixin):
    """Client du point de vente (fidélité, consentements RGPD)"""
    __tablename__ = "clients"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)

    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)

    # RGPD
    gdpr_consent = Column(Boolean, default=False, nullable=False)
    gdpr_consent_date = Column(DateTime(timezone=True), nullable=True)
    marketing_consent = Column(Boolean, default=False, nullable=False)

    # Fidélité
    loyalty_program = Column(Boolean, default=False, nullable=False)
    discount = Column(Numeric(5, 2), default=0, nullable=False)

    notes = Column(Text, nullable=True)
    alerts = Column(Text, nullable=True)

    # Free-form data (city, postal code...)
    metadata_ = Column("metadata", JSON, nullable=True)

    @property
    def city(self):
        return (self.metadata_ or {}).get("city")
