"""
Dépendances d'authentification pour FastAPI.

Le middleware ``AuthMiddleware`` dépose un ``AuthContext`` sur
``request.state.auth``; ces dépendances le lisent et appliquent les rôles.
"""
import logging
from fastapi import Depends, HTTPException, status, Request

from app.dependencies.tenantDependencies import TenantId
from app.modules.auth.schemas import AuthContext

logger = logging.getLogger(__name__)

MANAGER_ROLES = ["owner", "admin"]
STAFF_ROLES = ["owner", "admin", "seller"]
ALL_ROLES = ["owner", "admin", "seller", "accountant", "viewer"]


class AuthDependencies:
    """Dépendances d'authentification réutilisables."""

    @staticmethod
    def get_auth_context(request: Request) -> AuthContext:
        auth_context = getattr(request.state, "auth", None)
        if auth_context is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentification requise",
                headers={"WWW-Authenticate": "Bearer"},
            )
        return auth_context

    @staticmethod
    def require_role(allowed_roles: list[str]):
        """
        Dépendance exigeant un tenant résolu et l'un des rôles donnés.
        """
        def role_checker(
            tenant_id: TenantId,
            auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
        ):
            if auth_context.role not in allowed_roles:
                logger.warning(
                    f"Role '{auth_context.role}' refused for user {auth_context.user_id}, "
                    f"expected one of {allowed_roles}"
                )
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail=f"Rôle requis: {', '.join(allowed_roles)}"
                )

            return auth_context
        return role_checker
