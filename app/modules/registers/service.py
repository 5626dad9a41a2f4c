import logging
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from uuid import UUID
from typing import Dict, Any, Optional

from app.database.database import tenant_query
from app.modules.audit.service import log_audit_event, AuditEventType
from app.modules.auth.schemas import AuthContext
from app.modules.establishments.service import EstablishmentService
from app.modules.registers.models import Register
from app.modules.registers.schemas import RegisterCreate, RegisterUpdate

logger = logging.getLogger(__name__)


class RegisterService:
    """Service de gestion des caisses"""

    def __init__(self, db: Session):
        self.db = db

    def list_registers(self, tenant_id: str, establishment_id: Optional[UUID] = None) -> Dict[str, Any]:
        query = tenant_query(self.db, Register, tenant_id).options(
            joinedload(Register.establishment)
        ).filter(Register.is_active.is_(True))

        if establishment_id:
            query = query.filter(Register.establishment_id == establishment_id)

        registers = query.order_by(Register.name).all()
        return {"registers": registers, "count": len(registers)}

    def get_register(self, register_id: UUID, tenant_id: str) -> Register:
        register = tenant_query(self.db, Register, tenant_id).filter(
            Register.id == register_id
        ).first()

        if not register:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Caisse introuvable"
            )
        return register

    def create_register(self, data: RegisterCreate, auth_context: AuthContext,
                        ip_address: Optional[str] = None) -> Register:
        tenant_id = auth_context.tenant_id
        try:
            # L'établissement doit appartenir au tenant
            EstablishmentService(self.db).get_establishment(data.establishment_id, tenant_id)

            register = Register(
                tenant_id=tenant_id,
                establishment_id=data.establishment_id,
                name=data.name,
                is_active=data.is_active,
            )
            self.db.add(register)
            self.db.flush()

            log_audit_event(
                self.db,
                tenant_id=tenant_id,
                entity_type="register",
                entity_id=register.id,
                action=AuditEventType.REGISTER_CREATED,
                user_id=auth_context.user_id,
                user_name=auth_context.email,
                changes={"name": register.name, "establishmentId": str(register.establishment_id)},
                ip_address=ip_address,
            )

            self.db.commit()
            self.db.refresh(register)
            logger.info(f"Register created: {register.id} ({register.name}) tenant={tenant_id}")
            return register

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
            logger.exception("Error creating register")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de la création de la caisse"
            )

    def update_register(self, register_id: UUID, data: RegisterUpdate, auth_context: AuthContext,
                        ip_address: Optional[str] = None) -> Register:
        tenant_id = auth_context.tenant_id
        try:
            register = self.get_register(register_id, tenant_id)
            update_dict = data.model_dump(exclude_unset=True)

            if "establishment_id" in update_dict:
                EstablishmentService(self.db).get_establishment(update_dict["establishment_id"], tenant_id)

            changes = {}
            for field, value in update_dict.items():
                old_value = getattr(register, field)
                if old_value != value:
                    changes[field] = {"old": str(old_value), "new": str(value)}
                setattr(register, field, value)

            log_audit_event(
                self.db,
                tenant_id=tenant_id,
                entity_type="register",
                entity_id=register.id,
                action=AuditEventType.REGISTER_UPDATED,
                user_id=auth_context.user_id,
                user_name=auth_context.email,
                changes=changes,
                ip_address=ip_address,
            )

            self.db.commit()
            self.db.refresh(register)
            logger.info(f"Register updated: {register.id} tenant={tenant_id}")
            return register

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
            logger.exception("Error updating register")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de la mise à jour de la caisse"
            )

    def deactivate_register(self, register_id: UUID, auth_context: AuthContext,
                            ip_address: Optional[str] = None) -> Dict[str, str]:
        """Les caisses ne sont jamais supprimées: elles portent l'historique des clôtures."""
        tenant_id = auth_context.tenant_id
        try:
            register = self.get_register(register_id, tenant_id)
            register.is_active = False

            log_audit_event(
                self.db,
                tenant_id=tenant_id,
                entity_type="register",
                entity_id=register.id,
                action=AuditEventType.REGISTER_DELETED,
                user_id=auth_context.user_id,
                user_name=auth_context.email,
                changes={"isActive": False},
                ip_address=ip_address,
            )

            self.db.commit()
            logger.info(f"Register deactivated: {register.id} tenant={tenant_id}")
            return {"message": "Caisse désactivée avec succès"}

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error deactivating register")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de la désactivation de la caisse"
            )
