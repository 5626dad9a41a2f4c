from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from app.database.database import get_db
from app.common.schemas import MessageResponse
from app.modules.audit.service import client_ip
from app.modules.auth.dependencies import AuthDependencies, MANAGER_ROLES, ALL_ROLES
from app.modules.registers.service import RegisterService
from app.modules.registers.schemas import RegisterCreate, RegisterUpdate, RegisterResponse, RegisterList

registers_router = APIRouter(prefix="/api/registers", tags=["Registers"])


@registers_router.get("", response_model=RegisterList)
def list_registers(
    establishment_id: Optional[UUID] = Query(None, alias="establishmentId"),
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(ALL_ROLES))
):
    return RegisterService(db).list_registers(auth_context.tenant_id, establishment_id)


@registers_router.post("/create", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def create_register(
    register: RegisterCreate,
    request: Request,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    created = RegisterService(db).create_register(register, auth_context, client_ip(request))
    return {"message": "Caisse créée avec succès", "register": created}


@registers_router.patch("/{register_id}/update", response_model=RegisterResponse)
def update_register(
    register_id: UUID,
    update: RegisterUpdate,
    request: Request,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    updated = RegisterService(db).update_register(register_id, update, auth_context, client_ip(request))
    return {"message": "Caisse mise à jour avec succès", "register": updated}


@registers_router.delete("/{register_id}/delete", response_model=MessageResponse)
def delete_register(
    register_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(MANAGER_ROLES))
):
    return RegisterService(db).deactivate_register(register_id, auth_context, client_ip(request))
