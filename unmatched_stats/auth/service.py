"""Registration, login and token verification"""

import logging
from typing import Tuple

import bcrypt

from unmatched_stats.auth.jwt_handler import JWTHandler, TokenError
from unmatched_stats.models.user import User, UserCreate, UserPublic
from unmatched_stats.repositories.user_repository import UserRepository
from unmatched_stats.database.exceptions import DuplicateItemError
from unmatched_stats.exceptions import (
    AuthenticationError,
    ConflictError,
    InvalidCredentialsError,
)

logger = logging.getLogger(__name__)


class AuthService:
    """Credential checks and token issuance on top of the user repository"""

    def __init__(self, user_repository: UserRepository, jwt_handler: JWTHandler, bcrypt_rounds: int = 12):
        self.user_repository = user_repository
        self.jwt_handler = jwt_handler
        self.bcrypt_rounds = bcrypt_rounds

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt"""
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')

    @staticmethod
    def verify_password(password: str, hashed: str) -> bool:
        """Verify a password against its hash"""
        try:
            return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))
        except ValueError:
            # Malformed stored hash
            return False

    async def register(self, user_data: UserCreate) -> Tuple[str, UserPublic]:
        user = User(
            username=user_data.username,
            email=user_data.email,
            password_hash=self.hash_password(user_data.password),
        )
        try:
            created = await self.user_repository.create_user(user)
        except DuplicateItemError:
            raise ConflictError("User with this username or email already exists")

        logger.info(f"Registered user {created.id}")
        return self.jwt_handler.create_access_token(created.id), created.public_view()

    async def login(self, username: str, password: str) -> Tuple[str, UserPublic]:
        user = await self.user_repository.get_user_by_username(username)
        if not user or not self.verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        return self.jwt_handler.create_access_token(user.id), user.public_view()

    async def verify(self, token: str) -> User:
        """Resolve a bearer token to a stored user; one store lookup per call"""
        if not token:
            raise AuthenticationError("Authentication required")
        try:
            user_id = self.jwt_handler.get_user_id_from_token(token)
        except TokenError as e:
            logger.warning(f"JWT authentication failed: {e}")
            raise AuthenticationError("Invalid or expired token")

        user = await self.user_repository.get_user_by_id(user_id)
        if not user:
            raise AuthenticationError("Invalid or expired token")
        return user
