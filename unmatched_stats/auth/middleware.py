"""FastAPI authentication dependencies (the request gate)"""

import logging
from typing import Optional, Annotated
from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from unmatched_stats.auth.service import AuthService
from unmatched_stats.exceptions import AuthenticationError
from unmatched_stats.models.user import User

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme; a missing header is handled here, not by FastAPI
security = HTTPBearer(auto_error=False)


def unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> User:
    """
    Dependency to get the current authenticated user.
    Rejects the request with 401 before the handler runs.
    """
    if not credentials:
        raise unauthorized("Authentication required")

    try:
        return await auth_service.verify(credentials.credentials)
    except AuthenticationError as e:
        raise unauthorized(e.message)
    except Exception as e:
        logger.error(f"Error resolving current user: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )


async def require_user(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> Optional[User]:
    """
    Gate for data routes. With ``require_auth`` on it behaves like
    ``get_current_user``; with it off every request passes unscoped.
    """
    if not request.app.state.settings.require_auth:
        return None
    return await get_current_user(credentials, auth_service)


def owner_id_of(user: Optional[User]) -> Optional[str]:
    """Scope key for repository calls"""
    return user.id if user is not None else None
