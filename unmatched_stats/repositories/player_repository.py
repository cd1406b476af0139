"""Player repository: CRUD and atomic stat increments"""

import logging
from typing import Optional, List

from unmatched_stats.repositories.base import BaseRepository, is_valid_id
from unmatched_stats.models.player import Player, PlayerCreate, PlayerUpdate
from unmatched_stats.database.connection import CosmosDBConnection
from unmatched_stats.database.exceptions import ItemNotFoundError
from unmatched_stats.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class PlayerRepository(BaseRepository):
    """Repository for player records, optionally scoped to an owning user"""

    def __init__(self, connection: CosmosDBConnection):
        super().__init__(connection, connection.settings.cosmos_container_players)

    async def list_players(self, owner_id: Optional[str] = None) -> List[Player]:
        if owner_id is None:
            results = await self.query("SELECT * FROM c")
        else:
            results = await self.query(
                "SELECT * FROM c WHERE c.ownerId = @ownerId",
                [{"name": "@ownerId", "value": owner_id}],
            )
        return [Player(**result) for result in results]

    async def find_player(self, player_id: str) -> Optional[Player]:
        """Unscoped lookup that returns None instead of raising"""
        result = await self.get_by_id(player_id)
        if result:
            return Player(**result)
        return None

    async def get_player(self, player_id: str, owner_id: Optional[str] = None) -> Player:
        player = await self.find_player(player_id)
        if player is None or (owner_id is not None and player.owner_id != owner_id):
            raise NotFoundError("Player not found")
        return player

    async def create_player(self, player_data: PlayerCreate, owner_id: Optional[str] = None) -> Player:
        player = Player(**player_data.model_dump(), owner_id=owner_id)
        result = await self.create(player.to_document())
        return Player(**result)

    async def update_player(
        self,
        player_id: str,
        player_update: PlayerUpdate,
        owner_id: Optional[str] = None,
    ) -> Player:
        """Merge the provided fields into an existing player"""
        existing = await self.get_player(player_id, owner_id)

        changes = player_update.model_dump(exclude_unset=True)
        if not changes:
            return existing

        merged = existing.model_copy(update=changes)
        if merged.wins > merged.games_played:
            raise ValidationError("Wins cannot exceed games played")

        # Patch only the sent fields so concurrent counter increments survive
        operations = [
            {"op": "set", "path": f"/{field}", "value": value}
            for field, value in player_update.model_dump(
                mode="json", by_alias=True, exclude_unset=True
            ).items()
        ]
        try:
            result = await self.patch(player_id, operations)
        except ItemNotFoundError:
            raise NotFoundError("Player not found")

        logger.info(f"Updated player {player_id}: {sorted(changes)}")
        return Player(**result)

    async def increment_stats(self, player_id: str, win_delta: int = 0, play_delta: int = 0) -> bool:
        """
        Atomically add the deltas to a player's counters.

        Returns False when the player does not exist; dangling game references
        are tolerated rather than reported.
        """
        operations = []
        if win_delta:
            operations.append({"op": "incr", "path": "/wins", "value": win_delta})
        if play_delta:
            operations.append({"op": "incr", "path": "/gamesPlayed", "value": play_delta})
        if not operations:
            return True
        if not is_valid_id(player_id):
            logger.warning(f"Cannot update stats of invalid player id {player_id!r}")
            return False

        try:
            await self.patch(player_id, operations)
        except ItemNotFoundError:
            logger.warning(f"Cannot update stats of missing player {player_id}")
            return False
        return True
