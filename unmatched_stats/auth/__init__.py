# Authentication utilities

from .jwt_handler import JWTHandler, TokenError
from .service import AuthService
from .middleware import (
    security,
    get_auth_service,
    get_current_user,
    require_user,
    owner_id_of,
)

__all__ = [
    "JWTHandler",
    "TokenError",
    "AuthService",
    "security",
    "get_auth_service",
    "get_current_user",
    "require_user",
    "owner_id_of",
]
