from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from uuid import UUID

from app.database.database import get_db
from app.modules.auth.dependencies import AuthDependencies, MANAGER_ROLES, ALL_ROLES
from app.modules.categories.service import CategoryService
from app.modules.categories.schemas import (
    CategoryCreate, CategoryUpdate, CategoryTree, CategoryResponse
)

categories_router = APIRouter(prefix="/api/categories", tags=["Categories"])


@categories_router.get("", response_model=CategoryTree)
def list_categories(
    include_archived: bool = Query(False, alias="includeArchived"),
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(ALL_ROLES))
):
    """
    Arborescence des catégories (``children`` imbriqués).
    """
    return CategoryService(db).get_category_tree(auth_context.tenant_id, include_archived)


@categories_router.post("/create", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    category: CategoryCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    created = CategoryService(db).create_category(category, auth_context.tenant_id)
    return {"message": "Catégorie créée avec succès", "category": created}


@categories_router.get("/{category_id}", response_model=CategoryResponse)
def get_category(
    category_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(ALL_ROLES))
):
    return {"category": CategoryService(db).get_category(category_id, auth_context.tenant_id)}


@categories_router.patch("/{category_id}/update", response_model=CategoryResponse)
def update_category(
    category_id: UUID,
    update: CategoryUpdate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    updated = CategoryService(db).update_category(category_id, update, auth_context.tenant_id)
    return {"message": "Catégorie mise à jour avec succès", "category": updated}


@categories_router.delete("/{category_id}/delete", response_model=CategoryResponse)
def delete_category(
    category_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    archived = CategoryService(db).archive_category(category_id, auth_context.tenant_id)
    return {"message": "Catégorie supprimée avec succès", "category": archived}
