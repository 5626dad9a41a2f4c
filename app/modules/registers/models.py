from sqlalchemy import Column, String, Boolean, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from uuid import uuid4
from app.database.database import Base
from app.common.mixins import TenantMixin, TimestampMixin


class Register(Base, TenantMixin, TimestampMixin):
    """Caisse enregistreuse. Jamais supprimée physiquement, seulement désactivée."""
    __tablename__ = "registers"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    establishment_id = Column(UUID(as_uuid=True), ForeignKey("establishments.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    establishment = relationship("Establishment", back_populates="registers")
