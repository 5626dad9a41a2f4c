"""
Middleware for authentication and multi-tenancy
"""
from fastapi import Request, HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
import logging

from app.common.errors import error_response
from app.modules.auth.utils import authenticate_request

logger = logging.getLogger(__name__)


class AuthMiddleware(BaseHTTPMiddleware):
    """
    Middleware that resolves the caller's identity and tenant from the bearer
    token (or session cookie) and sets it on request.state.auth
    """

    API_PREFIX = "/api"

    # API paths that don't require an authenticated tenant
    PUBLIC_PATHS = [
        "/api/login",
        "/api/auth",
        "/api/database/seed",
    ]

    def is_public(self, request: Request) -> bool:
        path = request.url.path
        if not path.startswith(self.API_PREFIX):
            return True
        if request.method == "OPTIONS":
            return True
        return any(path.startswith(public) for public in self.PUBLIC_PATHS)

    async def dispatch(self, request: Request, call_next):
        if self.is_public(request):
            return await call_next(request)

        try:
            auth_context = authenticate_request(request)
        except HTTPException as exc:
            logger.warning(f"Auth refused on {request.method} {request.url.path}: {exc.detail}")
            return error_response(exc.status_code, exc.detail, headers=exc.headers)

        request.state.auth = auth_context
        logger.debug(f"Request to {request.url.path} with tenant_id: {auth_context.tenant_id}")

        response = await call_next(request)
        response.headers["X-Tenant-ID"] = auth_context.tenant_id or ""
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add security headers for production
    """

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response
