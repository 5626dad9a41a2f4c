from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from uuid import UUID

from app.database.database import get_db
from app.common.schemas import MessageResponse
from app.modules.auth.dependencies import AuthDependencies, MANAGER_ROLES, ALL_ROLES
from app.modules.sellers.service import SellerService
from app.modules.sellers.schemas import (
    SellerCreate, SellerUpdate, SellerResponse, SellerList, SellerEstablishments
)

sellers_router = APIRouter(prefix="/api/sellers", tags=["Sellers"])


@sellers_router.get("", response_model=SellerList)
def list_sellers(
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(ALL_ROLES))
):
    return SellerService(db).list_sellers(auth_context.tenant_id)


@sellers_router.post("/create", response_model=SellerResponse, status_code=status.HTTP_201_CREATED)
def create_seller(
    seller: SellerCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    created = SellerService(db).create_seller(seller, auth_context.tenant_id)
    return {"message": "Vendeur créé avec succès", "seller": created}


@sellers_router.patch("/{seller_id}/update", response_model=SellerResponse)
def update_seller(
    seller_id: UUID,
    update: SellerUpdate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    updated = SellerService(db).update_seller(seller_id, update, auth_context.tenant_id)
    return {"message": "Vendeur mis à jour avec succès", "seller": updated}


@sellers_router.delete("/{seller_id}/delete", response_model=MessageResponse)
def delete_seller(
    seller_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    return SellerService(db).deactivate_seller(seller_id, auth_context.tenant_id)


@sellers_router.get("/{seller_id}/establishments", response_model=SellerEstablishments)
def get_seller_establishments(
    seller_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(ALL_ROLES))
):
    return SellerService(db).get_seller_establishments(seller_id, auth_context.tenant_id)
