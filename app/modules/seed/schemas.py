from typing import Optional
from app.common.schemas import CamelModel


class SeedCount(CamelModel):
    added: int = 0
    existing: int = 0


class SeedResults(CamelModel):
    users: SeedCount
    establishments: SeedCount
    registers: SeedCount
    sellers: SeedCount
    tax_rates: SeedCount
    variation_groups: SeedCount
    variations: SeedCount


class SeedResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    tenant_id: str
    results: SeedResults
