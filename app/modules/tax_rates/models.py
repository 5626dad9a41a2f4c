from sqlalchemy import Column, String, Boolean, Numeric, Index, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from uuid import uuid4
from app.database.database import Base
from app.common.mixins import TenantMixin, TimestampMixin, ArchiveMixin


class TaxRate(Base, TenantMixin, TimestampMixin, ArchiveMixin):
    """Taux de TVA. Archivé, jamais supprimé."""
    __tablename__ = "tax_rates"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(100), nullable=False)
    rate = Column(Numeric(5, 2), nullable=False)  # 20.00 = 20 %
    code = Column(String(10), nullable=False)
    description = Column(String(500), nullable=True)
    is_default = Column(Boolean, default=False, nullable=False)

    __table_args__ = (
        UniqueConstraint("tenant_id", "code", name="uq_tax_rate_tenant_code"),
    )


# At most one default rate per tenant
Index(
    "uq_tax_rate_single_default",
    TaxRate.tenant_id,
    unique=True,
    postgresql_where=TaxRate.is_default.is_(True),
    sqlite_where=TaxRate.is_default.is_(True),
)
