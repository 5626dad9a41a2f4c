import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from uuid import UUID
from typing import Dict, Any, List

from app.database.database import tenant_query
from app.modules.variations.models import VariationGroup, Variation
from app.modules.variations.schemas import (
    VariationGroupCreate, VariationGroupUpdate, VariationCreate, VariationUpdate
)

logger = logging.getLogger(__name__)


def _apply_archive_flag(row, is_archived):
    if is_archived is True and not row.is_archived:
        row.archive()
    elif is_archived is False:
        row.restore()


class VariationService:
    """Service de gestion des groupes de variations et des variations"""

    def __init__(self, db: Session):
        self.db = db

    def get_catalog(self, tenant_id: str) -> List[Dict[str, Any]]:
        """Groupes non archivés avec leurs variations non archivées, triées par ordre."""
        groups = tenant_query(self.db, VariationGroup, tenant_id).filter(
            VariationGroup.is_archived.is_(False)
        ).order_by(VariationGroup.name).all()

        variations = tenant_query(self.db, Variation, tenant_id).filter(
            Variation.is_archived.is_(False)
        ).order_by(Variation.sort_order, Variation.name).all()

        by_group: Dict[UUID, list] = {}
        for variation in variations:
            by_group.setdefault(variation.group_id, []).append(variation)

        return [
            {"id": group.id, "name": group.name, "variations": by_group.get(group.id, [])}
            for group in groups
        ]

    # Groupes

    def list_groups(self, tenant_id: str, include_archived: bool = False) -> Dict[str, Any]:
        query = tenant_query(self.db, VariationGroup, tenant_id)
        if not include_archived:
            query = query.filter(VariationGroup.is_archived.is_(False))

        groups = query.order_by(VariationGroup.name).all()
        return {"groups": groups, "count": len(groups)}

    def get_group(self, group_id: UUID, tenant_id: str) -> VariationGroup:
        group = tenant_query(self.db, VariationGroup, tenant_id).filter(
            VariationGroup.id == group_id
        ).first()

        if not group:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Groupe de variation introuvable"
            )
        return group

    def create_group(self, data: VariationGroupCreate, tenant_id: str) -> VariationGroup:
        try:
            group = VariationGroup(tenant_id=tenant_id, name=data.name)
            if data.is_archived:
                group.archive()

            self.db.add(group)
            self.db.commit()
            self.db.refresh(group)
            logger.info(f"Variation group created: {group.id} ({group.name}) tenant={tenant_id}")
            return group

        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Erreur d'intégrité en base de données"
            )
        except Exception:
            self.db.rollback()
            logger.exception("Error creating variation group")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de la création du groupe"
            )

    def update_group(self, group_id: UUID, data: VariationGroupUpdate, tenant_id: str) -> VariationGroup:
        try:
            group = self.get_group(group_id, tenant_id)

            update_dict = data.model_dump(exclude_unset=True)
            is_archived = update_dict.pop("is_archived", None)
            if is_archived and not group.is_archived:
                self._ensure_group_empty(group, tenant_id)
            for field, value in update_dict.items():
                setattr(group, field, value)
            _apply_archive_flag(group, is_archived)

            self.db.commit()
            self.db.refresh(group)
            logger.info(f"Variation group updated: {group.id} tenant={tenant_id}")
            return group

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error updating variation group")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de la mise à jour du groupe"
            )

    def _ensure_group_empty(self, group: VariationGroup, tenant_id: str) -> None:
        active_count = tenant_query(self.db, Variation, tenant_id).filter(
            Variation.group_id == group.id,
            Variation.is_archived.is_(False)
        ).count()

        if active_count > 0:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Impossible de supprimer un groupe contenant {active_count} variation(s)"
            )

    def archive_group(self, group_id: UUID, tenant_id: str) -> Dict[str, str]:
        """Archive un groupe. Refusé tant qu'il contient des variations actives."""
        try:
            group = self.get_group(group_id, tenant_id)
            self._ensure_group_empty(group, tenant_id)

            if not group.is_archived:
                group.archive()

            self.db.commit()
            logger.info(f"Variation group archived: {group.name} tenant={tenant_id}")
            return {"message": "Groupe de variation supprimé avec succès"}

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error archiving variation group")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de la suppression du groupe"
            )

    # Variations

    def get_variation(self, variation_id: UUID, tenant_id: str) -> Variation:
        variation = tenant_query(self.db, Variation, tenant_id).filter(
            Variation.id == variation_id
        ).first()

        if not variation:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Variation introuvable"
            )
        return variation

    def create_variation(self, data: VariationCreate, tenant_id: str) -> Variation:
        try:
            group = self.get_group(data.group_id, tenant_id)

            variation = Variation(
                tenant_id=tenant_id,
                group_id=group.id,
                name=data.name,
                sort_order=data.sort_order,
            )
            if data.is_archived:
                variation.archive()

            self.db.add(variation)
            self.db.commit()
            self.db.refresh(variation)
            logger.info(f"Variation created: {variation.id} ({variation.name}) tenant={tenant_id}")
            return variation

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
            logger.exception("Error creating variation")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de la création de la variation"
            )

    def update_variation(self, variation_id: UUID, data: VariationUpdate, tenant_id: str) -> Variation:
        try:
            variation = self.get_variation(variation_id, tenant_id)
            update_dict = data.model_dump(exclude_unset=True)

            if "group_id" in update_dict:
                self.get_group(update_dict["group_id"], tenant_id)

            is_archived = update_dict.pop("is_archived", None)
            for field, value in update_dict.items():
                setattr(variation, field, value)
            _apply_archive_flag(variation, is_archived)

            self.db.commit()
            self.db.refresh(variation)
            logger.info(f"Variation updated: {variation.id} tenant={tenant_id}")
            return variation

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error updating variation")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de la mise à jour de la variation"
            )

    def archive_variation(self, variation_id: UUID, tenant_id: str) -> Variation:
        try:
            variation = self.get_variation(variation_id, tenant_id)
            if not variation.is_archived:
                variation.archive()

            self.db.commit()
            self.db.refresh(variation)
            logger.info(f"Variation archived: {variation.id} tenant={tenant_id}")
            return variation

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error archiving variation")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de l'archivage de la variation"
            )
