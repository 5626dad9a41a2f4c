import hashlib
import json
import logging
from datetime import date, datetime, timezone
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from uuid import UUID
from typing import Dict, Any, Optional

from app.common.validators import validate_iso_date
from app.database.database import tenant_query
from app.modules.audit.service import log_audit_event, AuditEventType
from app.modules.auth.schemas import AuthContext
from app.modules.closures.models import Closure
from app.modules.closures.schemas import ClosureCreate
from app.modules.registers.service import RegisterService

logger = logging.getLogger(__name__)

ALREADY_CLOSED = "Cette journée est déjà clôturée"


def parse_day(value: Optional[str], default_today: bool = False) -> Optional[str]:
    """Valide un paramètre de date YYYY-MM-DD (400 sinon)."""
    if value is None or not value.strip():
        return date.today().isoformat() if default_today else None
    value = value.strip()
    if not validate_iso_date(value):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Date invalide (format attendu: YYYY-MM-DD)"
        )
    return value


def compute_closure_hash(payload: Dict[str, Any]) -> str:
    """SHA-256 du JSON canonique (clés triées, sans espaces)."""
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class ClosureService:
    """Service de clôture journalière des caisses"""

    def __init__(self, db: Session):
        self.db = db

    def find_closure(self, tenant_id: str, closure_date: str,
                     register_id: Optional[UUID] = None) -> Optional[Closure]:
        query = tenant_query(self.db, Closure, tenant_id).filter(Closure.closure_date == closure_date)
        if register_id:
            query = query.filter(Closure.register_id == register_id)
        return query.order_by(Closure.created_at).first()

    def check_closure(self, tenant_id: str, closure_date: Optional[str] = None,
                      register_id: Optional[UUID] = None) -> Dict[str, Any]:
        """
        Indique si la journée est clôturée.
        Sans caisse précisée, n'importe quelle caisse du tenant compte.
        """
        closure_date = parse_day(closure_date, default_today=True)
        closure = self.find_closure(tenant_id, closure_date, register_id)
        return {"is_closed": closure is not None, "date": closure_date, "closure": closure}

    def list_closures(self, tenant_id: str, start_date: Optional[str] = None,
                      end_date: Optional[str] = None, register_id: Optional[UUID] = None) -> Dict[str, Any]:
        start_date = parse_day(start_date)
        end_date = parse_day(end_date)

        query = tenant_query(self.db, Closure, tenant_id)
        # Les dates ISO se comparent dans l'ordre lexicographique
        if start_date:
            query = query.filter(Closure.closure_date >= start_date)
        if end_date:
            query = query.filter(Closure.closure_date <= end_date)
        if register_id:
            query = query.filter(Closure.register_id == register_id)

        closures = query.order_by(Closure.closure_date.desc(), Closure.created_at.desc()).all()
        return {"closures": closures, "count": len(closures)}

    def close_day(self, data: ClosureCreate, auth_context: AuthContext,
                  ip_address: Optional[str] = None) -> Closure:
        tenant_id = auth_context.tenant_id
        try:
            register = RegisterService(self.db).get_register(data.register_id, tenant_id)

            if self.find_closure(tenant_id, data.date, register.id):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=ALREADY_CLOSED
                )

            payment_methods = {mode: f"{amount:.2f}" for mode, amount in data.payment_methods.items()}
            closed_at = datetime.now(timezone.utc)

            closure_hash = compute_closure_hash({
                "tenantId": tenant_id,
                "registerId": str(register.id),
                "date": data.date,
                "ticketCount": data.ticket_count,
                "cancelledCount": data.cancelled_count,
                "totalHT": f"{data.total_ht:.2f}",
                "totalTVA": f"{data.total_tva:.2f}",
                "totalTTC": f"{data.total_ttc:.2f}",
                "paymentMethods": payment_methods,
                "lastTicketHash": data.last_ticket_hash or "INITIAL",
                "timestamp": closed_at.isoformat(),
            })

            closure = Closure(
                tenant_id=tenant_id,
                register_id=register.id,
                establishment_id=register.establishment_id,
                closure_date=data.date,
                ticket_count=data.ticket_count,
                cancelled_count=data.cancelled_count,
                total_ht=data.total_ht,
                total_tva=data.total_tva,
                total_ttc=data.total_ttc,
                payment_methods={mode: float(amount) for mode, amount in data.payment_methods.items()},
                closure_hash=closure_hash,
                first_ticket_number=data.first_ticket_number,
                last_ticket_number=data.last_ticket_number,
                last_ticket_hash=data.last_ticket_hash,
                closed_by=auth_context.email or "System",
                closed_by_id=auth_context.user_id,
            )
            self.db.add(closure)
            self.db.flush()

            log_audit_event(
                self.db,
                tenant_id=tenant_id,
                entity_type="closure",
                entity_id=closure.id,
                action=AuditEventType.CLOSURE_CREATE,
                user_id=auth_context.user_id,
                user_name=auth_context.email,
                metadata={
                    "closureDate": data.date,
                    "registerId": str(register.id),
                    "closureHash": closure_hash,
                    "ticketCount": data.ticket_count,
                    "totalTTC": f"{data.total_ttc:.2f}",
                },
                ip_address=ip_address,
            )

            self.db.commit()
            self.db.refresh(closure)
            logger.info(
                f"Closure created: {closure.id} register={register.id} date={data.date} "
                f"hash={closure_hash[:16]}... tenant={tenant_id}"
            )
            return closure

        except HTTPException:
            raise
        except IntegrityError:
            # Clôture concurrente sur la même caisse et la même date
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=ALREADY_CLOSED
            )
        except Exception:
            self.db.rollback()
            logger.exception("Error closing day")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de la clôture de la journée"
            )
