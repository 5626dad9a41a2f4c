from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from app.database.database import get_db
from app.modules.auth.dependencies import AuthDependencies, STAFF_ROLES, ALL_ROLES
from app.modules.movements.models import MovementType
from app.modules.movements.service import MovementService
from app.modules.movements.schemas import MovementCreate, MovementResponse, MovementList

movements_router = APIRouter(prefix="/api/movements", tags=["Movements"])


@movements_router.post("/create", response_model=MovementResponse, status_code=status.HTTP_201_CREATED)
def create_movement(
    movement: MovementCreate,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(STAFF_ROLES))
):
    """
    Numéro généré: REC|ADJ|PER|TRF-AAAA-00001, séquentiel par tenant, type et année.
    """
    created = MovementService(db).create_movement(movement, auth_context)
    return {"message": "Mouvement créé avec succès", "movement": created}


@movements_router.get("", response_model=MovementList)
def list_movements(
    movement_type: Optional[MovementType] = Query(None, alias="type"),
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(ALL_ROLES))
):
    return MovementService(db).list_movements(auth_context.tenant_id, movement_type)


@movements_router.get("/{movement_id}", response_model=MovementResponse)
def get_movement(
    movement_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(ALL_ROLES))
):
    return {"movement": MovementService(db).get_movement(movement_id, auth_context.tenant_id)}
