import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from uuid import UUID
from typing import Dict, Any

from app.database.database import tenant_query
from app.modules.brands.models import Brand
from app.modules.brands.schemas import BrandCreate, BrandUpdate

logger = logging.getLogger(__name__)


class BrandService:
    """Service de gestion des marques"""

    def __init__(self, db: Session):
        self.db = db

    def create_brand(self, brand_data: BrandCreate, tenant_id: str) -> Brand:
        """
        Créer une marque

        Args:
            brand_data: Données de la marque
            tenant_id: Tenant de l'appelant

        Returns:
            Brand: Marque créée

        Raises:
            HTTPException: Si la marque existe déjà ou en cas d'erreur BD
        """
        try:
            # Unicité du nom par tenant
            existing = tenant_query(self.db, Brand, tenant_id).filter(
                Brand.name == brand_data.name
            ).first()

            if existing:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Une marque nommée '{brand_data.name}' existe déjà"
                )

            brand = Brand(
                name=brand_data.name,
                description=brand_data.description,
                tenant_id=tenant_id
            )
            if brand_data.is_archived:
                brand.archive()

            self.db.add(brand)
            self.db.commit()
            self.db.refresh(brand)
            logger.info(f"Brand created: {brand.id} ({brand.name}) tenant={tenant_id}")
            return brand

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
            logger.exception("Error creating brand")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur interne du serveur"
            )

    def get_all_brands(self, tenant_id: str, include_archived: bool = False) -> Dict[str, Any]:
        """
        Lister les marques, triées par nom

        Args:
            tenant_id: Tenant de l'appelant
            include_archived: Inclure les marques archivées

        Returns:
            Dict avec brands et count
        """
        query = tenant_query(self.db, Brand, tenant_id)
        if not include_archived:
            query = query.filter(Brand.is_archived.is_(False))

        brands = query.order_by(Brand.name).all()
        return {"brands": brands, "count": len(brands)}

    def get_brand_by_id(self, brand_id: UUID, tenant_id: str) -> Brand:
        brand = tenant_query(self.db, Brand, tenant_id).filter(Brand.id == brand_id).first()

        if not brand:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Marque introuvable"
            )
        return brand

    def update_brand(self, brand_id: UUID, update_data: BrandUpdate, tenant_id: str) -> Brand:
        """
        Mettre à jour une marque. ``isArchived`` archive ou restaure.
        """
        try:
            brand = self.get_brand_by_id(brand_id, tenant_id)

            # Unicité du nom si modifié
            if update_data.name and update_data.name != brand.name:
                existing = tenant_query(self.db, Brand, tenant_id).filter(
                    Brand.name == update_data.name,
                    Brand.id != brand_id
                ).first()

                if existing:
                    raise HTTPException(
                        status_code=status.HTTP_409_CONFLICT,
                        detail=f"Une autre marque nommée '{update_data.name}' existe déjà"
                    )

            update_dict = update_data.model_dump(exclude_unset=True)
            is_archived = update_dict.pop("is_archived", None)
            for field, value in update_dict.items():
                setattr(brand, field, value)

            if is_archived is True and not brand.is_archived:
                brand.archive()
            elif is_archived is False:
                brand.restore()

            self.db.commit()
            self.db.refresh(brand)
            logger.info(f"Brand updated: {brand.id} tenant={tenant_id}")
            return brand

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
            logger.exception("Error updating brand")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de la mise à jour de la marque"
            )

    def archive_brand(self, brand_id: UUID, tenant_id: str) -> Brand:
        """
        Archiver une marque. La ligne est conservée.
        """
        try:
            brand = self.get_brand_by_id(brand_id, tenant_id)
            if not brand.is_archived:
                brand.archive()

            self.db.commit()
            self.db.refresh(brand)
            logger.info(f"Brand archived: {brand.id} tenant={tenant_id}")
            return brand

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error archiving brand")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de l'archivage de la marque"
            )
