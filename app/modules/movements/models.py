import enum
from sqlalchemy import Column, String, Integer, Text, DateTime, Enum, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from uuid import uuid4
from app.database.database import Base
from app.common.mixins import TenantMixin


class MovementType(str, enum.Enum):
    RECEPTION = "reception"
    ADJUSTMENT = "adjustment"
    LOSS = "loss"
    TRANSFER = "transfer"


MOVEMENT_PREFIXES = {
    MovementType.RECEPTION: "REC",
    MovementType.ADJUSTMENT: "ADJ",
    MovementType.LOSS: "PER",
    MovementType.TRANSFER: "TRF",
}


class Movement(Base, TenantMixin):
    """En-tête d'un mouvement de stock. Jamais supprimé."""
    __tablename__ = "movements"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    movement_number = Column(String(20), nullable=False)
    type = Column(Enum(MovementType), nullable=False, index=True)
    comment = Column(Text, nullable=True)
    user_id = Column(String(64), nullable=True)
    user_name = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint('tenant_id', 'movement_number', name='uq_movement_tenant_number'),
    )


class MovementSequence(Base, TenantMixin):
    """Compteur de numérotation par tenant, type et année."""
    __tablename__ = "movement_sequences"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    type = Column(Enum(MovementType), nullable=False)
    year = Column(Integer, nullable=False)
    last_value = Column(Integer, default=0, nullable=False)

    __table_args__ = (
        UniqueConstraint('tenant_id', 'type', 'year', name='uq_movement_sequence'),
    )
