from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from app.database.database import get_db
from app.common.schemas import MessageResponse
from app.modules.auth.dependencies import AuthDependencies, STAFF_ROLES, ALL_ROLES
from app.modules.clients.service import ClientService
from app.modules.clients.schemas import ClientPayload, ClientResponse, ClientList

clients_router = APIRouter(prefix="/api/clients", tags=["Clients"])


@clients_router.get("", response_model=ClientList)
def list_clients(
    search: Optional[str] = Query(None, max_length=255),
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(ALL_ROLES))
):
    """
    Recherche sur prénom, nom, nom complet, email et téléphone.
    """
    return ClientService(db).list_clients(auth_context.tenant_id, search)


@clients_router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
def create_client(
    client: ClientPayload,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(STAFF_ROLES))
):
    created = ClientService(db).create_client(client, auth_context.tenant_id)
    return {"message": "Client créé avec succès", "client": created}


@clients_router.get("/{client_id}", response_model=ClientResponse)
def get_client(
    client_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(ALL_ROLES))
):
    return {"client": ClientService(db).get_client(client_id, auth_context.tenant_id)}


@clients_router.put("/{client_id}", response_model=ClientResponse)
def update_client(
    client_id: UUID,
    client: ClientPayload,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(STAFF_ROLES))
):
    updated = ClientService(db).update_client(client_id, client, auth_context.tenant_id)
    return {"message": "Client mis à jour avec succès", "client": updated}


@clients_router.delete("/{client_id}", response_model=MessageResponse)
def delete_client(
    client_id: UUID,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(STAFF_ROLES))
):
    return ClientService(db).delete_client(client_id, auth_context.tenant_id)
