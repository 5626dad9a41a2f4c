import logging
from datetime import datetime, timezone
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.modules.auth.models import User
from app.modules.auth.schemas import TokenResponse, UserOut
from app.modules.auth.utils import verify_password, create_access_token
from app.core.config import settings

logger = logging.getLogger(__name__)


class AuthService:
    """
    Service d'authentification: vérifie les identifiants et émet un token
    portant le tenant et le rôle de l'utilisateur.
    """

    def __init__(self, db: Session):
        self.db = db

    def login(self, email: str, password: str) -> TokenResponse:
        user = self.db.query(User).filter(User.email == email.strip().lower()).first()

        if not user or not verify_password(password, user.password):
            logger.warning(f"Failed login attempt for {email}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Email ou mot de passe incorrect"
            )

        if not user.is_active:
            logger.warning(f"Login refused for inactive user {user.id}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Compte désactivé"
            )

        user.last_login = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(user)

        token_data = {
            "sub": str(user.id),
            "email": user.email,
            "app_metadata": {"tenant_id": user.tenant_id, "role": user.role},
            "user_metadata": {"full_name": user.full_name},
        }
        access_token = create_access_token(token_data)
        logger.info(f"User {user.id} logged in on tenant {user.tenant_id}")

        return TokenResponse(
            access_token=access_token,
            token_type="bearer",
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            user=UserOut.model_validate(user),
        )
