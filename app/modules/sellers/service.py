import logging
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from uuid import UUID
from typing import Dict, Any, List, Optional

from app.database.database import tenant_query
from app.modules.establishments.models import Establishment
from app.modules.sellers.models import Seller, SellerEstablishment
from app.modules.sellers.schemas import SellerCreate, SellerUpdate

logger = logging.getLogger(__name__)


class SellerService:
    """Service de gestion des vendeurs"""

    def __init__(self, db: Session):
        self.db = db

    def list_sellers(self, tenant_id: str) -> Dict[str, Any]:
        sellers = tenant_query(self.db, Seller, tenant_id).options(
            selectinload(Seller.establishment_links)
        ).filter(Seller.is_active.is_(True)).order_by(Seller.name).all()

        return {"sellers": sellers, "count": len(sellers)}

    def get_seller(self, seller_id: UUID, tenant_id: str) -> Seller:
        seller = tenant_query(self.db, Seller, tenant_id).filter(Seller.id == seller_id).first()

        if not seller:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Vendeur introuvable"
            )
        return seller

    def _check_code_available(self, code: Optional[str], tenant_id: str, seller_id: Optional[UUID] = None):
        if not code:
            return
        query = tenant_query(self.db, Seller, tenant_id).filter(Seller.code == code)
        if seller_id:
            query = query.filter(Seller.id != seller_id)
        if query.first():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Le code vendeur '{code}' est déjà utilisé"
            )

    def _set_establishments(self, seller: Seller, establishment_ids: List[UUID], tenant_id: str):
        """Remplace les associations du vendeur. Chaque établissement doit appartenir au tenant."""
        wanted = list(dict.fromkeys(establishment_ids))
        if wanted:
            found = {
                row.id for row in tenant_query(self.db, Establishment, tenant_id).filter(
                    Establishment.id.in_(wanted)
                ).all()
            }
            missing = [str(eid) for eid in wanted if eid not in found]
            if missing:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Établissement introuvable: {', '.join(missing)}"
                )

        seller.establishment_links = [
            SellerEstablishment(tenant_id=tenant_id, establishment_id=eid) for eid in wanted
        ]

    def create_seller(self, data: SellerCreate, tenant_id: str) -> Seller:
        try:
            self._check_code_available(data.code, tenant_id)

            seller = Seller(
                tenant_id=tenant_id,
                name=data.name,
                code=data.code,
                is_active=data.is_active,
            )
            if data.establishment_ids:
                self._set_establishments(seller, data.establishment_ids, tenant_id)

            self.db.add(seller)
            self.db.commit()
            self.db.refresh(seller)
            logger.info(f"Seller created: {seller.id} ({seller.name}) tenant={tenant_id}")
            return seller

        except HTTPException:
            self.db.rollback()
            raise
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Erreur d'intégrité lors de la création du vendeur"
            )
        except Exception:
            self.db.rollback()
            logger.exception("Error creating seller")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur interne du serveur"
            )

    def update_seller(self, seller_id: UUID, data: SellerUpdate, tenant_id: str) -> Seller:
        try:
            seller = self.get_seller(seller_id, tenant_id)
            update_dict = data.model_dump(exclude_unset=True)
            establishment_ids = update_dict.pop("establishment_ids", None)

            if update_dict.get("code") and update_dict["code"] != seller.code:
                self._check_code_available(update_dict["code"], tenant_id, seller.id)

            for field, value in update_dict.items():
                setattr(seller, field, value)

            if establishment_ids is not None:
                self._set_establishments(seller, establishment_ids, tenant_id)

            self.db.commit()
            self.db.refresh(seller)
            logger.info(f"Seller updated: {seller.id} tenant={tenant_id}")
            return seller

        except HTTPException:
            self.db.rollback()
            raise
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Erreur d'intégrité lors de la mise à jour du vendeur"
            )
        except Exception:
            self.db.rollback()
            logger.exception("Error updating seller")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur interne du serveur"
            )

    def deactivate_seller(self, seller_id: UUID, tenant_id: str) -> Dict[str, str]:
        try:
            seller = self.get_seller(seller_id, tenant_id)
            seller.is_active = False

            self.db.commit()
            logger.info(f"Seller deactivated: {seller.id} tenant={tenant_id}")
            return {"message": "Vendeur désactivé avec succès"}

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error deactivating seller")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur interne du serveur"
            )

    def get_seller_establishments(self, seller_id: UUID, tenant_id: str) -> Dict[str, Any]:
        seller = self.get_seller(seller_id, tenant_id)

        establishments = tenant_query(self.db, Establishment, tenant_id).join(
            SellerEstablishment, SellerEstablishment.establishment_id == Establishment.id
        ).filter(
            SellerEstablishment.seller_id == seller.id
        ).order_by(Establishment.name).all()

        return {
            "establishments": establishments,
            "establishment_ids": [establishment.id for establishment in establishments],
        }
