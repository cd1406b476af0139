"""Game repository: create/read with player references resolved at read time"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional, List, Dict

from unmatched_stats.repositories.base import BaseRepository
from unmatched_stats.repositories.player_repository import PlayerRepository
from unmatched_stats.models.game import Game, GameCreate, GameDetail, ResolvedGameEntry
from unmatched_stats.models.player import PlayerSummary
from unmatched_stats.database.connection import CosmosDBConnection
from unmatched_stats.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class GameRepository(BaseRepository):
    """Repository for game records"""

    def __init__(
        self,
        connection: CosmosDBConnection,
        player_repository: PlayerRepository,
        validate_references: bool = False,
    ):
        super().__init__(connection, connection.settings.cosmos_container_games)
        self.player_repository = player_repository
        self.validate_references = validate_references

    async def create_game(self, game_data: GameCreate, owner_id: Optional[str] = None) -> Game:
        """
        Persist a game as given.

        Unless ``validate_references`` is set, the winner is not checked
        against the participants and player ids are not checked for existence.
        """
        game = Game(
            date=game_data.date or datetime.now(timezone.utc),
            players=game_data.players,
            winner=game_data.winner,
            notes=game_data.notes,
            owner_id=owner_id,
        )

        if self.validate_references:
            await self._check_references(game)

        result = await self.create(game.to_document())
        return Game(**result)

    async def _check_references(self, game: Game) -> None:
        participants = game.participant_ids()
        if game.winner is not None and game.winner not in participants:
            raise ValidationError("Winner must be one of the game's players")

        found = await asyncio.gather(
            *(self.player_repository.exists(player_id) for player_id in participants)
        )
        missing = [player_id for player_id, ok in zip(participants, found) if not ok]
        if missing:
            raise ValidationError(f"Unknown player ids: {', '.join(missing)}")

    async def find_game(self, game_id: str) -> Optional[Game]:
        result = await self.get_by_id(game_id)
        if result:
            return Game(**result)
        return None

    async def get_game(self, game_id: str, owner_id: Optional[str] = None) -> GameDetail:
        game = await self.find_game(game_id)
        if game is None or (owner_id is not None and game.owner_id != owner_id):
            raise NotFoundError("Game not found")

        resolved = await self._resolve([game], owner_id)
        return resolved[0]

    async def list_games(self, owner_id: Optional[str] = None) -> List[GameDetail]:
        if owner_id is None:
            results = await self.query("SELECT * FROM c")
        else:
            results = await self.query(
                "SELECT * FROM c WHERE c.ownerId = @ownerId",
                [{"name": "@ownerId", "value": owner_id}],
            )
        return await self._resolve([Game(**result) for result in results], owner_id)

    async def _resolve(self, games: List[Game], owner_id: Optional[str] = None) -> List[GameDetail]:
        """
        Replace player references with summaries, fetching each player once.

        Players that do not exist, or belong to another owner when scoped,
        resolve to None.
        """
        player_ids = []
        for game in games:
            for player_id in game.participant_ids() + ([game.winner] if game.winner else []):
                if player_id not in player_ids:
                    player_ids.append(player_id)

        players = await asyncio.gather(
            *(self.player_repository.find_player(player_id) for player_id in player_ids)
        )
        summaries: Dict[str, PlayerSummary] = {
            player.id: player.summary()
            for player in players
            if player is not None and (owner_id is None or player.owner_id == owner_id)
        }

        return [
            GameDetail(
                id=game.id,
                date=game.date,
                players=[
                    ResolvedGameEntry(player=summaries.get(entry.player), character=entry.character)
                    for entry in game.players
                ],
                winner=summaries.get(game.winner) if game.winner else None,
                notes=game.notes,
                owner_id=game.owner_id,
            )
            for game in games
        ]
