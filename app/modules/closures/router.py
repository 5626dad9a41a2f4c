from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from app.database.database import get_db
from app.modules.audit.service import client_ip
from app.modules.auth.dependencies import AuthDependencies, STAFF_ROLES, ALL_ROLES
from app.modules.closures.service import ClosureService
from app.modules.closures.schemas import ClosureCreate, ClosureResponse, ClosureList, ClosureCheck

sales_router = APIRouter(prefix="/api/sales", tags=["Closures"])
closures_router = APIRouter(prefix="/api/closures", tags=["Closures"])


@sales_router.get("/check-closure", response_model=ClosureCheck)
def check_closure(
    date: Optional[str] = Query(None, description="YYYY-MM-DD, aujourd'hui par défaut"),
    register_id: Optional[UUID] = Query(None, alias="registerId"),
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(ALL_ROLES))
):
    return ClosureService(db).check_closure(auth_context.tenant_id, date, register_id)


@sales_router.post("/close-day", response_model=ClosureResponse, status_code=status.HTTP_201_CREATED)
def close_day(
    closure: ClosureCreate,
    request: Request,
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(STAFF_ROLES))
):
    """
    Clôture la journée d'une caisse à partir des totaux transmis par la caisse.
    Une journée clôturée ne peut plus l'être une seconde fois.
    """
    created = ClosureService(db).close_day(closure, auth_context, client_ip(request))
    return {"message": "Journée clôturée avec succès", "closure": created}


@sales_router.get("/closures", response_model=ClosureList)
@closures_router.get("", response_model=ClosureList)
def list_closures(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    register_id: Optional[UUID] = Query(None, alias="registerId"),
    db: Session = Depends(get_db),
    auth_context = Depends(AuthDependencies.require_role(ALL_ROLES))
):
    return ClosureService(db).list_closures(auth_context.tenant_id, start_date, end_date, register_id)
