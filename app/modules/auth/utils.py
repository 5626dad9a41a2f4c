"""
Tokens, mots de passe et résolution du tenant.

Un token est cherché dans l'en-tête ``Authorization: Bearer``, puis dans les
cookies de session. Le tenant est dérivé des claims du token, premier trouvé:

1. ``app_metadata.tenant_id`` / ``app_metadata.tenantId``
2. ``user_metadata.tenant_id`` / ``user_metadata.tenantId``
3. ``tenants[0].id`` / ``tenant_id`` / ``slug`` (dans les métadonnées)
4. le ``sub`` du token (1 utilisateur = 1 tenant)

L'en-tête ``X-Tenant-ID`` permet de choisir un autre tenant, à condition qu'il
fasse partie des tenants autorisés par le token.
"""
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, List
from fastapi import HTTPException, Request, status
from passlib.context import CryptContext
import jwt

from app.core.config import settings
from app.modules.auth.schemas import AuthContext

logger = logging.getLogger(__name__)

SECRET_KEY = settings.APP_SECRET_STRING
ALGORITHM = settings.ALGORITHM
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES

TENANT_HEADER = "X-Tenant-ID"
DEFAULT_ROLE = "owner"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a hashed password against a plain password."""
    if not hashed:
        return False
    return pwd_context.verify(plain, hashed)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token with an expiration time.
    If expires_delta is not provided, it defaults to ACCESS_TOKEN_EXPIRE_MINUTES.
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire, "iat": now, "type": "access"})
    if settings.JWT_AUDIENCE:
        to_encode.setdefault("aud", settings.JWT_AUDIENCE)
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    """Décode et vérifie un token. Lève 401 si expiré ou invalide."""
    options = {"verify_aud": bool(settings.JWT_AUDIENCE)}
    try:
        return jwt.decode(
            token,
            SECRET_KEY,
            algorithms=[ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            options=options,
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expirée",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except jwt.InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session invalide",
            headers={"WWW-Authenticate": "Bearer"},
        )


def _session_cookie_names() -> List[str]:
    names = [settings.SESSION_COOKIE_NAME, "sb-access-token", "supabase-auth-token"]
    return list(dict.fromkeys(names))


def _unwrap_cookie(value: str) -> Optional[str]:
    # supabase-js stores the session as a JSON array: [access_token, refresh_token, ...]
    if value.startswith("["):
        try:
            parsed = json.loads(value)
        except ValueError:
            return None
        if isinstance(parsed, list) and parsed and isinstance(parsed[0], str):
            return parsed[0]
        return None
    return value


def get_token_from_request(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.lower().startswith("bearer "):
        token = auth_header.split(" ", 1)[1].strip()
        if token:
            return token

    for name in _session_cookie_names():
        value = request.cookies.get(name)
        if value:
            token = _unwrap_cookie(value)
            if token:
                return token
    return None


def _metadata_tenant(meta: dict) -> Optional[str]:
    tenant = meta.get("tenant_id") or meta.get("tenantId")
    return str(tenant) if tenant else None


def _listed_tenants(meta: dict) -> List[str]:
    tenants = []
    for entry in meta.get("tenants") or []:
        if isinstance(entry, dict):
            value = entry.get("id") or entry.get("tenant_id") or entry.get("slug")
        else:
            value = entry
        if value:
            tenants.append(str(value))
    return tenants


def resolve_tenants(claims: dict) -> List[str]:
    """
    Liste ordonnée des tenants autorisés par les claims.
    Le premier élément est le tenant par défaut.
    """
    app_meta = claims.get("app_metadata") or {}
    user_meta = claims.get("user_metadata") or {}

    tenants = []
    for meta in (app_meta, user_meta):
        tenant = _metadata_tenant(meta)
        if tenant:
            tenants.append(tenant)
    for meta in (app_meta, user_meta):
        tenants.extend(_listed_tenants(meta))

    if not tenants and claims.get("sub"):
        tenants.append(str(claims["sub"]))

    return list(dict.fromkeys(tenants))


def build_auth_context(claims: dict, requested_tenant: Optional[str] = None) -> AuthContext:
    user_id = claims.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session invalide",
            headers={"WWW-Authenticate": "Bearer"},
        )

    tenants = resolve_tenants(claims)
    tenant_id = tenants[0] if tenants else None

    if requested_tenant:
        if requested_tenant not in tenants:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Accès refusé à ce tenant"
            )
        tenant_id = requested_tenant

    role = (claims.get("app_metadata") or {}).get("role") or DEFAULT_ROLE

    return AuthContext(
        user_id=str(user_id),
        email=claims.get("email"),
        tenant_id=tenant_id,
        role=role,
        tenants=tenants,
    )


def authenticate_request(request: Request) -> AuthContext:
    """Résout l'identité et le tenant d'une requête, ou lève 401/403."""
    token = get_token_from_request(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token d'authentification manquant",
            headers={"WWW-Authenticate": "Bearer"},
        )

    claims = decode_token(token)
    requested_tenant = request.headers.get(TENANT_HEADER)
    return build_auth_context(claims, requested_tenant.strip() if requested_tenant else None)
