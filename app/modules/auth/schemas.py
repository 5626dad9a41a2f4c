from pydantic import EmailStr, Field, field_validator
from typing import Optional, List
from uuid import UUID
from datetime import datetime
from app.common.schemas import CamelModel


class UserLogin(CamelModel):
    email: EmailStr
    password: str = Field(..., max_length=255)

    @field_validator('password')
    @classmethod
    def password_required(cls, v):
        if not v:
            raise ValueError('Le mot de passe est requis')
        return v


class UserOut(CamelModel):
    id: UUID
    email: str
    full_name: Optional[str] = None
    tenant_id: str
    role: str
    is_active: bool
    last_login: Optional[datetime] = None


class TokenResponse(CamelModel):
    success: bool = True
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserOut


class AuthContext(CamelModel):
    """Identité résolue pour la requête courante."""
    user_id: str
    email: Optional[str] = None
    tenant_id: Optional[str] = None
    role: str = "owner"
    tenants: List[str] = []


class SessionResponse(CamelModel):
    success: bool = True
    auth: AuthContext
