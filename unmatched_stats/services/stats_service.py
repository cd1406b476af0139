"""Post-game player statistics updates"""

import asyncio
import logging

from unmatched_stats.models.game import Game
from unmatched_stats.repositories.player_repository import PlayerRepository
from unmatched_stats.exceptions import InternalError

logger = logging.getLogger(__name__)


class StatUpdater:
    """Applies win/play deltas to the players of a persisted game.

    The winner is credited first; the other participants are then updated
    concurrently. Each increment is an independent atomic write, there is no
    rollback, so a failure part way leaves earlier increments applied.
    """

    def __init__(self, player_repository: PlayerRepository):
        self.player_repository = player_repository

    async def apply_game(self, game: Game) -> None:
        if not game.winner:
            logger.debug(f"Game {game.id} has no winner; stats unchanged")
            return

        try:
            await self.player_repository.increment_stats(game.winner, win_delta=1, play_delta=1)
        except Exception as e:
            logger.error(f"Stat update for game {game.id} failed on winner {game.winner}: {e}")
            raise InternalError(f"Game {game.id} was saved but player stats could not be updated")

        others = [player_id for player_id in game.participant_ids() if player_id != game.winner]
        results = await asyncio.gather(
            *(self.player_repository.increment_stats(player_id, play_delta=1) for player_id in others),
            return_exceptions=True,
        )
        failed = [
            (player_id, result)
            for player_id, result in zip(others, results)
            if isinstance(result, Exception)
        ]
        if failed:
            for player_id, error in failed:
                logger.error(f"Stat update for game {game.id} failed on player {player_id}: {error}")
            raise InternalError(f"Game {game.id} was saved but player stats could not be updated")

        logger.info(f"Updated stats for game {game.id}: winner {game.winner}, {len(others)} other players")
