import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from uuid import UUID
from typing import Dict, Any

from app.database.database import tenant_query
from app.modules.suppliers.models import Supplier
from app.modules.suppliers.schemas import SupplierCreate, SupplierUpdate

logger = logging.getLogger(__name__)


class SupplierService:
    """Service de gestion des fournisseurs"""

    def __init__(self, db: Session):
        self.db = db

    def list_suppliers(self, tenant_id: str, include_archived: bool = False) -> Dict[str, Any]:
        query = tenant_query(self.db, Supplier, tenant_id)
        if not include_archived:
            query = query.filter(Supplier.is_archived.is_(False))

        suppliers = query.order_by(Supplier.name).all()
        return {"suppliers": suppliers, "count": len(suppliers)}

    def get_supplier(self, supplier_id: UUID, tenant_id: str) -> Supplier:
        supplier = tenant_query(self.db, Supplier, tenant_id).filter(Supplier.id == supplier_id).first()

        if not supplier:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Fournisseur introuvable"
            )
        return supplier

    def create_supplier(self, data: SupplierCreate, tenant_id: str) -> Supplier:
        try:
            values = data.model_dump()
            is_archived = values.pop("is_archived")

            supplier = Supplier(tenant_id=tenant_id, **values)
            if is_archived:
                supplier.archive()

            self.db.add(supplier)
            self.db.commit()
            self.db.refresh(supplier)
            logger.info(f"Supplier created: {supplier.id} ({supplier.name}) tenant={tenant_id}")
            return supplier

        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Erreur d'intégrité en base de données"
            )
        except Exception:
            self.db.rollback()
            logger.exception("Error creating supplier")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de la création du fournisseur"
            )

    def update_supplier(self, supplier_id: UUID, data: SupplierUpdate, tenant_id: str) -> Supplier:
        try:
            supplier = self.get_supplier(supplier_id, tenant_id)

            update_dict = data.model_dump(exclude_unset=True)
            is_archived = update_dict.pop("is_archived", None)
            for field, value in update_dict.items():
                setattr(supplier, field, value)

            if is_archived is True and not supplier.is_archived:
                supplier.archive()
            elif is_archived is False:
                supplier.restore()

            self.db.commit()
            self.db.refresh(supplier)
            logger.info(f"Supplier updated: {supplier.id} tenant={tenant_id}")
            return supplier

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error updating supplier")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de la mise à jour du fournisseur"
            )

    def archive_supplier(self, supplier_id: UUID, tenant_id: str) -> Supplier:
        try:
            supplier = self.get_supplier(supplier_id, tenant_id)
            if not supplier.is_archived:
                supplier.archive()

            self.db.commit()
            self.db.refresh(supplier)
            logger.info(f"Supplier archived: {supplier.id} tenant={tenant_id}")
            return supplier

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error archiving supplier")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de l'archivage du fournisseur"
            )
