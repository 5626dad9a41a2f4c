from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from app.database.database import get_db
from app.modules.auth.dependencies import AuthDependencies, MANAGER_ROLES, ALL_ROLES
from app.modules.brands import service
from app.modules.brands.schemas import BrandCreate, BrandUpdate, BrandResponse, BrandList
from uuid import UUID

brand_router = APIRouter(prefix="/api/brands", tags=["Brands"])


@brand_router.post("/create", response_model=BrandResponse, status_code=status.HTTP_201_CREATED)
def create_brand(
    brand: BrandCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    brand_service = service.BrandService(db)
    created = brand_service.create_brand(brand, auth_context.tenant_id)
    return {"message": "Marque créée avec succès", "brand": created}


@brand_router.get("", response_model=BrandList)
def list_brands(
    include_archived: bool = Query(False, alias="includeArchived"),
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(ALL_ROLES))
):
    brand_service = service.BrandService(db)
    return brand_service.get_all_brands(auth_context.tenant_id, include_archived)


@brand_router.patch("/{brand_id}/update", response_model=BrandResponse)
def update_brand(
    brand_id: UUID,
    update: BrandUpdate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    brand_service = service.BrandService(db)
    updated = brand_service.update_brand(brand_id, update, auth_context.tenant_id)
    return {"message": "Marque mise à jour avec succès", "brand": updated}


@brand_router.delete("/{brand_id}/delete", response_model=BrandResponse)
def delete_brand(
    brand_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    brand_service = service.BrandService(db)
    archived = brand_service.archive_brand(brand_id, auth_context.tenant_id)
    return {"message": "Marque archivée avec succès", "brand": archived}
