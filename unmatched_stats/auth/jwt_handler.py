"""JWT token generation and validation"""

import jwt
import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Any

from unmatched_stats.config import Settings

logger = logging.getLogger(__name__)


class TokenError(Exception):
    """Raised when a token cannot be decoded or has expired"""
    pass


class JWTHandler:
    """Signs and verifies bearer tokens that carry only the user id"""

    def __init__(self, settings: Settings):
        self.secret_key = settings.jwt_secret_key
        self.algorithm = settings.jwt_algorithm
        self.access_token_expiration = timedelta(days=settings.jwt_expiration_days)

    def create_access_token(self, user_id: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "iat": int(now.timestamp()),
            "exp": int((now + self.access_token_expiration).timestamp()),
        }
        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        logger.debug(f"Created access token for user: {user_id}")
        return token

    def verify_token(self, token: str) -> Dict[str, Any]:
        """Decode a token, checking signature and expiry"""
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise TokenError(f"Invalid token: {e}")

    def get_user_id_from_token(self, token: str) -> str:
        return self.verify_token(token)["sub"]
