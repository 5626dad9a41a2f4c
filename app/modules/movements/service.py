import logging
from datetime import datetime, timezone
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from uuid import UUID
from typing import Dict, Any, Optional

from app.database.database import tenant_query
from app.modules.auth.schemas import AuthContext
from app.modules.movements.models import Movement, MovementSequence, MovementType, MOVEMENT_PREFIXES
from app.modules.movements.schemas import MovementCreate

logger = logging.getLogger(__name__)


def format_movement_number(movement_type: MovementType, year: int, seq: int) -> str:
    return f"{MOVEMENT_PREFIXES[movement_type]}-{year}-{seq:05d}"


class MovementService:
    """Service des mouvements de stock (en-têtes numérotés)"""

    def __init__(self, db: Session):
        self.db = db

    def next_movement_number(self, tenant_id: str, movement_type: MovementType, year: int) -> str:
        """
        Réserve le prochain numéro pour (tenant, type, année).

        La ligne compteur est verrouillée (SELECT ... FOR UPDATE) jusqu'au
        commit de l'appelant. Aucun commit ici.
        """
        counter = tenant_query(self.db, MovementSequence, tenant_id).filter(
            MovementSequence.type == movement_type,
            MovementSequence.year == year
        ).with_for_update().first()

        if not counter:
            counter = MovementSequence(tenant_id=tenant_id, type=movement_type, year=year, last_value=0)
            self.db.add(counter)
            self.db.flush()

        counter.last_value += 1
        return format_movement_number(movement_type, year, counter.last_value)

    def create_movement(self, data: MovementCreate, auth_context: AuthContext) -> Movement:
        tenant_id = auth_context.tenant_id
        try:
            year = datetime.now(timezone.utc).year
            number = self.next_movement_number(tenant_id, data.type, year)

            movement = Movement(
                tenant_id=tenant_id,
                movement_number=number,
                type=data.type,
                comment=data.comment,
                user_id=auth_context.user_id,
                user_name=auth_context.email,
            )
            self.db.add(movement)
            self.db.commit()
            self.db.refresh(movement)
            logger.info(f"Movement created: {movement.movement_number} tenant={tenant_id}")
            return movement

        except IntegrityError:
            # Deux premières créations concurrentes du compteur
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Conflit de numérotation, veuillez réessayer"
            )
        except Exception:
            self.db.rollback()
            logger.exception("Error creating movement")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Erreur lors de la création du mouvement"
            )

    def list_movements(self, tenant_id: str, movement_type: Optional[MovementType] = None) -> Dict[str, Any]:
        query = tenant_query(self.db, Movement, tenant_id)
        if movement_type:
            query = query.filter(Movement.type == movement_type)

        movements = query.order_by(Movement.created_at.desc(), Movement.movement_number.desc()).all()
        return {"movements": movements, "count": len(movements)}

    def get_movement(self, movement_id: UUID, tenant_id: str) -> Movement:
        movement = tenant_query(self.db, Movement, tenant_id).filter(Movement.id == movement_id).first()

        if not movement:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Mouvement introuvable"
            )
        return movement
