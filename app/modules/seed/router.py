import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.database.database import get_db
from app.modules.seed.service import SeedService
from app.modules.seed.schemas import SeedResponse

logger = logging.getLogger(__name__)

seed_router = APIRouter(prefix="/api/database", tags=["Database"])


@seed_router.post("/seed", response_model=SeedResponse)
def seed_database(db: Session = Depends(get_db)):
    """
    Crée le tenant de démonstration (route publique, refusée en production).
    """
    if settings.is_production:
        logger.warning("Seed refused in production")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Le seed est désactivé en production"
        )

    service = SeedService(db)
    results = service.seed(settings.DEMO_TENANT_ID, settings.DEMO_EMAIL, settings.DEMO_PASSWORD)
    return {
        "message": "Base de données seedée avec succès",
        "tenant_id": service.tenant_id,
        "results": results,
    }
