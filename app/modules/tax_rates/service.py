import logging
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Dict, Any, Optional
from uuid import UUID

from app.database.database import tenant_query
from app.modules.audit.service import log_audit_event, AuditEventType
from app.modules.auth.schemas import AuthContext
from app.modules.tax_rates.models import TaxRate
from app.modules.tax_rates.schemas import TaxRateCreate, TaxRateUpdate

logger = logging.getLogger(__name__)


class TaxRateService:
    """
    Taux de TVA du tenant.

    Un seul taux par défaut par tenant: poser ``is_default`` retire le défaut
    des autres taux dans la même transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def list_tax_rates(self, tenant_id: str, include_archived: bool = False) -> Dict[str, Any]:
        """Taux du tenant, le taux par défaut en premier puis par taux croissant."""
        query = tenant_query(self.db, TaxRate, tenant_id)
        if not include_archived:
            query = query.filter(TaxRate.is_archived.is_(False))

        tax_rates = query.order_by(TaxRate.is_default.desc(), TaxRate.rate).all()
        return {"tax_rates": tax_rates, "count": len(tax_rates)}

    def get_tax_rate(self, tax_rate_id: UUID, tenant_id: str) -> TaxRate:
        tax_rate = tenant_query(self.db, TaxRate, tenant_id).filter(TaxRate.id == tax_rate_id).first()

        if not tax_rate:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Taux de TVA introuvable"
            )
        return tax_rate

    def _check_code_available(self, code: str, tenant_id: str, tax_rate_id: Optional[UUID] = None):
        query = tenant_query(self.db, TaxRate, tenant_id).filter(TaxRate.code == code)
        if tax_rate_id:
            query = query.filter(TaxRate.id != tax_rate_id)
        if query.first():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Un taux de TVA avec le code '{code}' existe déjà"
            )

    def _clear_defaults(self, tenant_id: str, keep_id: Optional[UUID] = None):
        query = tenant_query(self.db, TaxRate, tenant_id).filter(TaxRate.is_default.is_(True))
        if keep_id:
            query = query.filter(TaxRate.id != keep_id)
        query.update({TaxRate.is_default: False}, synchronize_session="fetch")
        # The previous default must be cleared before the new one is flushed
        self.db.flush()

    def create_tax_rate(self, data: TaxRateCreate, auth_context: AuthContext) -> TaxRate:
        tenant_id = auth_context.tenant_id
        try:
            self._check_code_available(data.code, tenant_id)

            if data.is_default:
                self._clear_defaults(tenant_id)

            tax_rate = TaxRate(tenant_id=tenant_id, **data.model_dump())
            self.db.add(tax_rate)
            self.db.flush()

            log_audit_event(
                self.db,
                tenant_id=tenant_id,
                entity_type="tax_rate",
                entity_id=tax_rate.id,
                action=AuditEventType.CONFIG_CHANGE,
                user_id=auth_context.user_id,
                user_name=auth_context.email,
                changes={"operation": "create", "code": tax_rate.code, "rate": str(tax_rate.rate),
                         "isDefault": tax_rate.is_default},
            )

            self.db.commit()
            self.db.refresh(tax_rate)
            logger.info(f"Tax rate created: {tax_rate.code} ({tax_rate.rate}%) tenant={tenant_id}")
            return tax_rate

        except HTTPException:
            self.db.rollback()
            raise
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Conflit: code TVA ou taux par défaut déjà existant"
            )
        except Exception:
            self.db.rollback()
            logger.exception("Error creating tax rate")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur interne du serveur"
            )

    def update_tax_rate(self, tax_rate_id: UUID, data: TaxRateUpdate, auth_context: AuthContext) -> TaxRate:
        tenant_id = auth_context.tenant_id
        try:
            tax_rate = self.get_tax_rate(tax_rate_id, tenant_id)
            update_dict = data.model_dump(exclude_unset=True)

            if "code" in update_dict and update_dict["code"] != tax_rate.code:
                self._check_code_available(update_dict["code"], tenant_id, tax_rate.id)

            if update_dict.get("is_default"):
                if tax_rate.is_archived:
                    raise HTTPException(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        detail="Un taux archivé ne peut pas être le taux par défaut"
                    )
                self._clear_defaults(tenant_id, keep_id=tax_rate.id)

            changes = {}
            for field, value in update_dict.items():
                if getattr(tax_rate, field) != value:
                    changes[field] = {"old": str(getattr(tax_rate, field)), "new": str(value)}
                setattr(tax_rate, field, value)

            log_audit_event(
                self.db,
                tenant_id=tenant_id,
                entity_type="tax_rate",
                entity_id=tax_rate.id,
                action=AuditEventType.CONFIG_CHANGE,
                user_id=auth_context.user_id,
                user_name=auth_context.email,
                changes={"operation": "update", **changes},
            )

            self.db.commit()
            self.db.refresh(tax_rate)
            logger.info(f"Tax rate updated: {tax_rate.id} tenant={tenant_id}")
            return tax_rate

        except HTTPException:
            self.db.rollback()
            raise
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Conflit: code TVA ou taux par défaut déjà existant"
            )
        except Exception:
            self.db.rollback()
            logger.exception("Error updating tax rate")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur interne du serveur"
            )

    def archive_tax_rate(self, tax_rate_id: UUID, auth_context: AuthContext) -> Dict[str, str]:
        """
        Archive un taux. Un taux archivé perd son statut de taux par défaut.
        """
        tenant_id = auth_context.tenant_id
        try:
            tax_rate = self.get_tax_rate(tax_rate_id, tenant_id)
            if not tax_rate.is_archived:
                tax_rate.archive()
            tax_rate.is_default = False

            log_audit_event(
                self.db,
                tenant_id=tenant_id,
                entity_type="tax_rate",
                entity_id=tax_rate.id,
                action=AuditEventType.CONFIG_CHANGE,
                user_id=auth_context.user_id,
                user_name=auth_context.email,
                changes={"operation": "archive", "code": tax_rate.code},
            )

            self.db.commit()
            logger.info(f"Tax rate archived: {tax_rate.id} tenant={tenant_id}")
            return {"message": "Taux de TVA archivé avec succès"}

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error archiving tax rate")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur interne du serveur"
            )
