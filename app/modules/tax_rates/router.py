from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from uuid import UUID

from app.database.database import get_db
from app.common.schemas import MessageResponse
from app.modules.auth.dependencies import AuthDependencies, MANAGER_ROLES, ALL_ROLES
from app.modules.auth.schemas import AuthContext
from app.modules.tax_rates.service import TaxRateService
from app.modules.tax_rates.schemas import TaxRateCreate, TaxRateUpdate, TaxRateResponse, TaxRateList

tax_rates_router = APIRouter(prefix="/api/tax-rates", tags=["Tax rates"])


@tax_rates_router.get("", response_model=TaxRateList)
def list_tax_rates(
    include_archived: bool = Query(False, alias="includeArchived"),
    db: Session = Depends(get_db),
    auth_context: AuthContext = Depends(AuthDependencies.require_role(ALL_ROLES))
):
    """
    Taux de TVA du tenant, le taux par défaut en tête.
    """
    service = TaxRateService(db)
    return service.list_tax_rates(auth_context.tenant_id, include_archived)


@tax_rates_router.post("/create", response_model=TaxRateResponse, status_code=status.HTTP_201_CREATED)
def create_tax_rate(
    tax_rate: TaxRateCreate,
    db: Session = Depends(get_db),
    auth_context: AuthContext = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    """
    Créer un taux de TVA. ``isDefault=true`` remplace le taux par défaut actuel.
    """
    service = TaxRateService(db)
    created = service.create_tax_rate(tax_rate, auth_context)
    return {"message": "Taux de TVA créé avec succès", "tax_rate": created}


@tax_rates_router.patch("/{tax_rate_id}/update", response_model=TaxRateResponse)
def update_tax_rate(
    tax_rate_id: UUID,
    update: TaxRateUpdate,
    db: Session = Depends(get_db),
    auth_context: AuthContext = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    service = TaxRateService(db)
    updated = service.update_tax_rate(tax_rate_id, update, auth_context)
    return {"message": "Taux de TVA mis à jour avec succès", "tax_rate": updated}


@tax_rates_router.delete("/{tax_rate_id}/delete", response_model=MessageResponse)
def delete_tax_rate(
    tax_rate_id: UUID,
    db: Session = Depends(get_db),
    auth_context: AuthContext = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    """
    Archive le taux. Les taux de TVA ne sont jamais supprimés.
    """
    service = TaxRateService(db)
    return service.archive_tax_rate(tax_rate_id, auth_context)
