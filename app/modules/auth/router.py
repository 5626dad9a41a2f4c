from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from app.database.database import get_db
from app.core.config import settings
from app.common.schemas import MessageResponse
from app.modules.auth.service import AuthService
from app.modules.auth.schemas import UserLogin, TokenResponse, SessionResponse
from app.modules.auth.utils import authenticate_request

auth_router = APIRouter(prefix="/api/auth", tags=["Auth"])
login_router = APIRouter(prefix="/api", tags=["Auth"])


def _login(credentials: UserLogin, response: Response, db: Session) -> TokenResponse:
    token = AuthService(db).login(credentials.email, credentials.password)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token.access_token,
        max_age=token.expires_in,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return token


@auth_router.post("/login", response_model=TokenResponse)
def login(credentials: UserLogin, response: Response, db: Session = Depends(get_db)):
    """
    Connexion par email et mot de passe. Retourne le token et pose le cookie de session.
    """
    return _login(credentials, response, db)


@login_router.post("/login", response_model=TokenResponse)
def legacy_login(credentials: UserLogin, response: Response, db: Session = Depends(get_db)):
    return _login(credentials, response, db)


@auth_router.get("/session", response_model=SessionResponse)
def get_session(request: Request):
    """
    Contexte d'authentification du token courant (utilisateur, tenant, rôle).
    """
    return SessionResponse(auth=authenticate_request(request))


@auth_router.post("/logout", response_model=MessageResponse)
def logout(response: Response):
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return MessageResponse(message="Déconnexion réussie")
