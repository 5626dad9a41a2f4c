from typing import Annotated
from fastapi import Depends, Request
from app.database.database import TenantRequiredError


def get_tenant_id(request: Request) -> str:
    """Extract tenant_id from the auth context set by AuthMiddleware"""
    auth_context = getattr(request.state, "auth", None)
    if auth_context is None or not auth_context.tenant_id:
        raise TenantRequiredError()
    return auth_context.tenant_id


TenantId = Annotated[str, Depends(get_tenant_id)]
