import logging
from datetime import datetime, timezone
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from uuid import UUID
from typing import Dict, Any, Optional

from app.database.database import tenant_query
from app.modules.clients.models import Client
from app.modules.clients.schemas import ClientPayload

logger = logging.getLogger(__name__)


class ClientService:
    """Service de gestion des clients"""

    def __init__(self, db: Session):
        self.db = db

    def list_clients(self, tenant_id: str, search: Optional[str] = None) -> Dict[str, Any]:
        """Clients du tenant, les plus récents d'abord, avec recherche optionnelle."""
        query = tenant_query(self.db, Client, tenant_id)

        if search and search.strip():
            pattern = f"%{search.strip()}%"
            full_name = func.coalesce(Client.first_name, "") + " " + func.coalesce(Client.last_name, "")
            query = query.filter(
                or_(
                    Client.first_name.ilike(pattern),
                    Client.last_name.ilike(pattern),
                    Client.email.ilike(pattern),
                    Client.phone.ilike(pattern),
                    full_name.ilike(pattern),
                )
            )

        clients = query.order_by(Client.created_at.desc()).all()
        return {"clients": clients, "count": len(clients)}

    def get_client(self, client_id: UUID, tenant_id: str) -> Client:
        client = tenant_query(self.db, Client, tenant_id).filter(Client.id == client_id).first()

        if not client:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Client introuvable"
            )
        return client

    def create_client(self, data: ClientPayload, tenant_id: str) -> Client:
        try:
            values = data.model_dump()
            metadata = values.pop("metadata")

            client = Client(
                tenant_id=tenant_id,
                metadata_=metadata,
                gdpr_consent_date=datetime.now(timezone.utc),
                **values
            )

            self.db.add(client)
            self.db.commit()
            self.db.refresh(client)
            logger.info(f"Client created: {client.id} tenant={tenant_id}")
            return client

        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Erreur d'intégrité en base de données"
            )
        except Exception:
            self.db.rollback()
            logger.exception("Error creating client")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de la création du client"
            )

    def update_client(self, client_id: UUID, data: ClientPayload, tenant_id: str) -> Client:
        """Remplace la fiche client. La date de consentement initiale est conservée."""
        try:
            client = self.get_client(client_id, tenant_id)

            values = data.model_dump()
            client.metadata_ = values.pop("metadata")
            for field, value in values.items():
                setattr(client, field, value)

            if not client.gdpr_consent_date:
                client.gdpr_consent_date = datetime.now(timezone.utc)

            self.db.commit()
            self.db.refresh(client)
            logger.info(f"Client updated: {client.id} tenant={tenant_id}")
            return client

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error updating client")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de la mise à jour du client"
            )

    def delete_client(self, client_id: UUID, tenant_id: str) -> Dict[str, str]:
        """Suppression définitive (droit à l'effacement)."""
        try:
            client = self.get_client(client_id, tenant_id)

            self.db.delete(client)
            self.db.commit()
            logger.info(f"Client deleted: {client_id} tenant={tenant_id}")
            return {"message": "Client supprimé avec succès"}

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error deleting client")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de la suppression du client"
            )
