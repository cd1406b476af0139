"""User repository for managing credentials in Cosmos DB"""

import logging
import uuid
from typing import Optional, List

from unmatched_stats.repositories.base import BaseRepository
from unmatched_stats.models.user import User
from unmatched_stats.database.connection import CosmosDBConnection
from unmatched_stats.database.exceptions import DuplicateItemError

logger = logging.getLogger(__name__)

# Namespace for the ids of username/email reservation documents
RESERVATION_NAMESPACE = uuid.UUID("0b6f7d1e-3c2a-5e8f-9a41-7d2c6b1e4f90")


def reservation_id(kind: str, value: str) -> str:
    """Deterministic document id claiming one username or email"""
    return str(uuid.uuid5(RESERVATION_NAMESPACE, f"{kind}:{value}"))


class UserRepository(BaseRepository):
    """
    Repository for user data operations.

    Usernames and emails are claimed by reservation documents whose id is
    derived from the value, so the store's own id uniqueness rejects a
    second claim even when two registrations race.
    """

    def __init__(self, connection: CosmosDBConnection):
        super().__init__(connection, connection.settings.cosmos_container_users)

    async def create_user(self, user: User) -> User:
        """Store a new user; username and email must both be unused"""
        if await self.get_user_by_username(user.username) or await self.get_user_by_email(user.email):
            raise DuplicateItemError("User with this username or email already exists")

        claimed: List[str] = []
        try:
            for kind, value in (("username", user.username), ("email", user.email)):
                item_id = reservation_id(kind, value)
                await self.create({"id": item_id, "reservation": kind, "userId": user.id})
                claimed.append(item_id)

            result = await self.create(user.to_document())
        except Exception:
            for item_id in claimed:
                await self.delete(item_id)
            raise

        return User(**result)

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        result = await self.get_by_id(user_id)
        if result and "reservation" not in result:
            return User(**result)
        return None

    async def get_user_by_username(self, username: str) -> Optional[User]:
        query = "SELECT * FROM c WHERE c.username = @username"
        parameters = [{"name": "@username", "value": username.strip()}]

        results = await self.query(query, parameters)
        if results:
            return User(**results[0])
        return None

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Get a user by email address"""
        query = "SELECT * FROM c WHERE c.email = @email"
        parameters = [{"name": "@email", "value": email.lower().strip()}]

        results = await self.query(query, parameters)
        if results:
            return User(**results[0])
        return None
