from app.database.database import Base
from sqlalchemy import Column, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID

from uuid import uuid4
from app.common.mixins import TenantMixin, TimestampMixin, ArchiveMixin


class Brand(Base, TenantMixin, TimestampMixin, ArchiveMixin):
    __tablename__ = "brands"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("tenant_id", "name", name="uq_brand_tenant_name"),
    )
