from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from uuid import UUID

from app.database.database import get_db
from app.common.schemas import MessageResponse
from app.modules.auth.dependencies import AuthDependencies, MANAGER_ROLES, ALL_ROLES
from app.modules.variations.service import VariationService
from app.modules.variations.schemas import (
    VariationGroupCreate, VariationGroupUpdate, VariationCreate, VariationUpdate,
    VariationCatalog, VariationGroupList, VariationGroupResponse, VariationResponse
)

variations_router = APIRouter(prefix="/api/variations", tags=["Variations"])


@variations_router.get("", response_model=VariationCatalog)
def get_variation_catalog(
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(ALL_ROLES))
):
    """
    Groupes actifs et leurs variations actives, triées par ``sortOrder``.
    """
    return {"groups": VariationService(db).get_catalog(auth_context.tenant_id)}


@variations_router.get("/groups", response_model=VariationGroupList)
def list_variation_groups(
    include_archived: bool = Query(False, alias="includeArchived"),
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(ALL_ROLES))
):
    return VariationService(db).list_groups(auth_context.tenant_id, include_archived)


@variations_router.post("/groups/create", response_model=VariationGroupResponse,
                        status_code=status.HTTP_201_CREATED)
def create_variation_group(
    group: VariationGroupCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    created = VariationService(db).create_group(group, auth_context.tenant_id)
    return {"message": "Groupe de variation créé avec succès", "group": created}


@variations_router.patch("/groups/{group_id}/update", response_model=VariationGroupResponse)
def update_variation_group(
    group_id: UUID,
    update: VariationGroupUpdate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    updated = VariationService(db).update_group(group_id, update, auth_context.tenant_id)
    return {"message": "Groupe de variation mis à jour avec succès", "group": updated}


@variations_router.delete("/groups/{group_id}/delete", response_model=MessageResponse)
def delete_variation_group(
    group_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    return VariationService(db).archive_group(group_id, auth_context.tenant_id)


@variations_router.post("/create", response_model=VariationResponse, status_code=status.HTTP_201_CREATED)
def create_variation(
    variation: VariationCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    created = VariationService(db).create_variation(variation, auth_context.tenant_id)
    return {"message": "Variation créée avec succès", "variation": created}


@variations_router.patch("/{variation_id}/update", response_model=VariationResponse)
def update_variation(
    variation_id: UUID,
    update: VariationUpdate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    updated = VariationService(db).update_variation(variation_id, update, auth_context.tenant_id)
    return {"message": "Variation mise à jour avec succès", "variation": updated}


@variations_router.delete("/{variation_id}/delete", response_model=VariationResponse)
def delete_variation(
    variation_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    archived = VariationService(db).archive_variation(variation_id, auth_context.tenant_id)
    return {"message": "Variation archivée avec succès", "variation": archived}
