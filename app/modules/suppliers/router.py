from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from uuid import UUID

from app.database.database import get_db
from app.modules.auth.dependencies import AuthDependencies, MANAGER_ROLES, ALL_ROLES
from app.modules.suppliers.service import SupplierService
from app.modules.suppliers.schemas import SupplierCreate, SupplierUpdate, SupplierResponse, SupplierList

suppliers_router = APIRouter(prefix="/api/suppliers", tags=["Suppliers"])


@suppliers_router.get("", response_model=SupplierList)
def list_suppliers(
    include_archived: bool = Query(False, alias="includeArchived"),
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(ALL_ROLES))
):
    return SupplierService(db).list_suppliers(auth_context.tenant_id, include_archived)


@suppliers_router.post("/create", response_model=SupplierResponse, status_code=status.HTTP_201_CREATED)
def create_supplier(
    supplier: SupplierCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    created = SupplierService(db).create_supplier(supplier, auth_context.tenant_id)
    return {"message": "Fournisseur créé avec succès", "supplier": created}


@suppliers_router.patch("/{supplier_id}/update", response_model=SupplierResponse)
def update_supplier(
    supplier_id: UUID,
    update: SupplierUpdate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    updated = SupplierService(db).update_supplier(supplier_id, update, auth_context.tenant_id)
    return {"message": "Fournisseur mis à jour avec succès", "supplier": updated}


@suppliers_router.delete("/{supplier_id}/delete", response_model=SupplierResponse)
def delete_supplier(
    supplier_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    archived = SupplierService(db).archive_supplier(supplier_id, auth_context.tenant_id)
    return {"message": "Fournisseur archivé avec succès", "supplier": archived}
