from sqlalchemy import Column, String, Integer, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from uuid import uuid4
from app.database.database import Base
from app.common.mixins import TenantMixin, TimestampMixin, ArchiveMixin


class VariationGroup(Base, TenantMixin, TimestampMixin, ArchiveMixin):
    """Groupe de variations (ex. Taille, Couleur)"""
    __tablename__ = "variation_groups"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(255), nullable=False)

    variations = relationship("Variation", back_populates="group", order_by="Variation.sort_order")


class Variation(Base, TenantMixin, TimestampMixin, ArchiveMixin):
    __tablename__ = "variations"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    group_id = Column(UUID(as_uuid=True), ForeignKey("variation_groups.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)

    group = relationship("VariationGroup", back_populates="variations")
