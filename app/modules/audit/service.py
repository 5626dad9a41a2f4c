import enum
import logging
from typing import Optional
from fastapi import Request
from sqlalchemy.orm import Session

from app.modules.audit.models import AuditLog

logger = logging.getLogger(__name__)


class AuditEventType(str, enum.Enum):
    CLOSURE_CREATE = "closure_create"
    REGISTER_CREATED = "register_created"
    REGISTER_UPDATED = "register_updated"
    REGISTER_DELETED = "register_deleted"
    CONFIG_CHANGE = "config_change"


def client_ip(request: Optional[Request]) -> Optional[str]:
    if request is None:
        return None
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()[:45]
    return request.client.host if request.client else None


def log_audit_event(
    db: Session,
    tenant_id: str,
    entity_type: str,
    entity_id,
    action: AuditEventType,
    user_id: Optional[str] = None,
    user_name: Optional[str] = None,
    changes: Optional[dict] = None,
    metadata: Optional[dict] = None,
    ip_address: Optional[str] = None,
) -> AuditLog:
    """
    Ajoute une entrée d'audit à la session courante.
    L'entrée est validée avec la transaction de l'appelant.
    """
    entry = AuditLog(
        tenant_id=tenant_id,
        user_id=user_id,
        user_name=user_name or "System",
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        action=action.value,
        changes=changes or {},
        metadata_=metadata or {},
        ip_address=ip_address,
    )
    db.add(entry)
    logger.info(f"[AUDIT] {action.value} {entity_type} {entity_id} (tenant {tenant_id})")
    return entry
