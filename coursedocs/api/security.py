"""Authentication utilities for API routes."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from coursedocs.core.config import settings
from coursedocs.core.exceptions import UnauthorizedError
from coursedocs.core.security import verify_access_token
from coursedocs.models import User

_http_bearer = HTTPBearer(auto_error=False)


async def authenticate_user(
    request: Request,
    bearer_token: Optional[HTTPAuthorizationCredentials] = Depends(_http_bearer),
) -> User:
    if not bearer_token or not bearer_token.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")

    try:
        payload = verify_access_token(bearer_token.credentials)
    except UnauthorizedError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc
    subject = payload.get("sub")
    if subject is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    user = User(
        id=subject,
        email=payload.get("email"),
        name=payload.get("name", subject),
        role=payload.get("role", "user"),
        attributes={key: value for key, value in payload.items() if key not in {"sub", "exp", "iat", "email", "name", "role"}},
    )
    request.state.user = user
    return user


async def require_admin(user: User = Depends(authenticate_user)) -> User:
    if user.role.lower() in {role.lower() for role in settings.ADMIN_ROLES}:
        return user
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin privileges required")


__all__ = ["authenticate_user", "require_admin"]
