from sqlalchemy import Column, String, Boolean
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from uuid import uuid4
from app.database.database import Base
from app.common.mixins import TenantMixin, TimestampMixin


class Establishment(Base, TenantMixin, TimestampMixin):
    """Point de vente physique. Unité de rattachement des caisses et vendeurs."""
    __tablename__ = "establishments"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(255), nullable=False)

    address = Column(String(500), nullable=True)
    postal_code = Column(String(10), nullable=True)
    city = Column(String(100), nullable=True)
    country = Column(String(100), nullable=False, default="France")

    phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)

    siret = Column(String(14), nullable=True)
    naf = Column(String(5), nullable=True)
    tva_number = Column(String(20), nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)

    registers = relationship("Register", back_populates="establishment")
