import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from uuid import UUID
from typing import Dict, Any

from app.database.database import tenant_query
from app.modules.establishments.models import Establishment
from app.modules.establishments.schemas import EstablishmentCreate, EstablishmentUpdate

logger = logging.getLogger(__name__)


class EstablishmentService:
    """Service de gestion des établissements"""

    def __init__(self, db: Session):
        self.db = db

    def list_establishments(self, tenant_id: str) -> Dict[str, Any]:
        """Établissements actifs du tenant, triés par nom."""
        establishments = tenant_query(self.db, Establishment, tenant_id).filter(
            Establishment.is_active.is_(True)
        ).order_by(Establishment.name).all()

        return {"establishments": establishments, "count": len(establishments)}

    def get_establishment(self, establishment_id: UUID, tenant_id: str) -> Establishment:
        establishment = tenant_query(self.db, Establishment, tenant_id).filter(
            Establishment.id == establishment_id
        ).first()

        if not establishment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Établissement introuvable"
            )
        return establishment

    def create_establishment(self, data: EstablishmentCreate, tenant_id: str) -> Establishment:
        try:
            establishment = Establishment(tenant_id=tenant_id, **data.model_dump())

            self.db.add(establishment)
            self.db.commit()
            self.db.refresh(establishment)
            logger.info(f"Establishment created: {establishment.id} ({establishment.name}) tenant={tenant_id}")
            return establishment

        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Erreur d'intégrité en base de données"
            )
        except Exception:
            self.db.rollback()
            logger.exception("Error creating establishment")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de la création de l'établissement"
            )

    def update_establishment(self, establishment_id: UUID, data: EstablishmentUpdate,
                             tenant_id: str) -> Establishment:
        try:
            establishment = self.get_establishment(establishment_id, tenant_id)

            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(establishment, field, value)

            self.db.commit()
            self.db.refresh(establishment)
            logger.info(f"Establishment updated: {establishment.id} tenant={tenant_id}")
            return establishment

        except HTTPException:
            raise
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Erreur d'intégrité en base de données"
            )
        except Exception:
            self.db.rollback()
            logger.exception("Error updating establishment")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de la mise à jour de l'établissement"
            )

    def deactivate_establishment(self, establishment_id: UUID, tenant_id: str) -> Dict[str, str]:
        """Désactive l'établissement au lieu de le supprimer."""
        try:
            establishment = self.get_establishment(establishment_id, tenant_id)
            establishment.is_active = False

            self.db.commit()
            logger.info(f"Establishment deactivated: {establishment.id} tenant={tenant_id}")
            return {"message": "Établissement désactivé avec succès"}

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error deactivating establishment")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de la désactivation de l'établissement"
            )
