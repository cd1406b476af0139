"""Authentication endpoints"""

import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Depends, status

from unmatched_stats.auth.middleware import get_auth_service, get_current_user
from unmatched_stats.auth.service import AuthService
from unmatched_stats.exceptions import StatsError
from unmatched_stats.models.user import User, UserCreate, UserPublic, LoginRequest, AuthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["authentication"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: UserCreate,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """Create a new user account and return a bearer token"""
    try:
        token, user = await auth_service.register(request)
        return AuthResponse(token=token, user=user)

    except StatsError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Register error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """Exchange username and password for a bearer token"""
    try:
        token, user = await auth_service.login(request.username, request.password)
        return AuthResponse(token=token, user=user)

    except StatsError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Login error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/me", response_model=UserPublic)
async def get_me(current_user: Annotated[User, Depends(get_current_user)]) -> UserPublic:
    """Get current user profile"""
    return current_user.public_view()
