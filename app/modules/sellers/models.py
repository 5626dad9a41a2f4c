from sqlalchemy import Column, String, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from uuid import uuid4
from app.database.database import Base
from app.common.mixins import TenantMixin, TimestampMixin


class Seller(Base, TenantMixin, TimestampMixin):
    __tablename__ = "sellers"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(100), nullable=False)
    code = Column(String(20), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    establishment_links = relationship(
        "SellerEstablishment",
        back_populates="seller",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint("tenant_id", "code", name="uq_seller_tenant_code"),
    )

    @property
    def establishment_ids(self):
        return [link.establishment_id for link in self.establishment_links]


class SellerEstablishment(Base, TenantMixin):
    """Association vendeur <-> établissement"""
    __tablename__ = "seller_establishments"

    seller_id = Column(UUID(as_uuid=True), ForeignKey("sellers.id", ondelete="CASCADE"), primary_key=True)
    establishment_id = Column(UUID(as_uuid=True), ForeignKey("establishments.id", ondelete="CASCADE"), primary_key=True)

    seller = relationship("Seller", back_populates="establishment_links")
    establishment = relationship("Establishment")
