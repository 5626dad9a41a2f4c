from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from uuid import UUID

from app.database.database import get_db
from app.common.schemas import MessageResponse
from app.modules.auth.dependencies import AuthDependencies, MANAGER_ROLES, ALL_ROLES
from app.modules.establishments.service import EstablishmentService
from app.modules.establishments.schemas import (
    EstablishmentCreate, EstablishmentUpdate, EstablishmentResponse, EstablishmentList
)

establishments_router = APIRouter(prefix="/api/establishments", tags=["Establishments"])


@establishments_router.get("", response_model=EstablishmentList)
def list_establishments(
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(ALL_ROLES))
):
    return EstablishmentService(db).list_establishments(auth_context.tenant_id)


@establishments_router.post("/create", response_model=EstablishmentResponse, status_code=status.HTTP_201_CREATED)
def create_establishment(
    establishment: EstablishmentCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    created = EstablishmentService(db).create_establishment(establishment, auth_context.tenant_id)
    return {"message": "Établissement créé avec succès", "establishment": created}


@establishments_router.get("/{establishment_id}", response_model=EstablishmentResponse)
def get_establishment(
    establishment_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(ALL_ROLES))
):
    establishment = EstablishmentService(db).get_establishment(establishment_id, auth_context.tenant_id)
    return {"establishment": establishment}


@establishments_router.patch("/{establishment_id}/update", response_model=EstablishmentResponse)
def update_establishment(
    establishment_id: UUID,
    update: EstablishmentUpdate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    updated = EstablishmentService(db).update_establishment(establishment_id, update, auth_context.tenant_id)
    return {"message": "Établissement mis à jour avec succès", "establishment": updated}


@establishments_router.delete("/{establishment_id}/delete", response_model=MessageResponse)
def delete_establishment(
    establishment_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    return EstablishmentService(db).deactivate_establishment(establishment_id, auth_context.tenant_id)
