from sqlalchemy import Column, String, Integer, Numeric, DateTime, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from uuid import uuid4
from app.database.database import Base
from app.common.mixins import TenantMixin


class Closure(Base, TenantMixin):
    """Clôture journalière d'une caisse. Immuable, jamais supprimée."""
    __tablename__ = "closures"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    register_id = Column(UUID(as_uuid=True), ForeignKey("registers.id"), nullable=False, index=True)
    establishment_id = Column(UUID(as_uuid=True), ForeignKey("establishments.id"), nullable=False)

    # YYYY-MM-DD
    closure_date = Column(String(10), nullable=False, index=True)

    ticket_count = Column(Integer, default=0, nullable=False)
    cancelled_count = Column(Integer, default=0, nullable=False)

    total_ht = Column(Numeric(12, 2), nullable=False)
    total_tva = Column(Numeric(12, 2), nullable=False)
    total_ttc = Column(Numeric(12, 2), nullable=False)

    # {"Espèces": 150.0, "Carte": 250.0}
    payment_methods = Column(JSON, nullable=False, default=dict)

    closure_hash = Column(String(64), nullable=False, unique=True)
    first_ticket_number = Column(String(50), nullable=True)
    last_ticket_number = Column(String(50), nullable=True)
    last_ticket_hash = Column(String(64), nullable=True)

    closed_by = Column(String(255), nullable=True)
    closed_by_id = Column(String(64), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    register = relationship("Register")

    __table_args__ = (
        UniqueConstraint('tenant_id', 'register_id', 'closure_date', name='uq_closure_tenant_register_date'),
    )
