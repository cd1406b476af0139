"""Game API endpoints"""

import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, status

from unmatched_stats.api.dependencies import get_game_repository, get_stat_updater
from unmatched_stats.auth.middleware import require_user, owner_id_of
from unmatched_stats.exceptions import StatsError
from unmatched_stats.models.game import Game, GameCreate, GameDetail
from unmatched_stats.models.user import User
from unmatched_stats.repositories.game_repository import GameRepository
from unmatched_stats.services.stats_service import StatUpdater

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/games", tags=["games"])


@router.get("", response_model=List[GameDetail])
async def list_games(
    game_repo: Annotated[GameRepository, Depends(get_game_repository)],
    current_user: Annotated[Optional[User], Depends(require_user)],
) -> List[GameDetail]:
    """List games with their players resolved"""
    try:
        return await game_repo.list_games(owner_id_of(current_user))
    except Exception as e:
        logger.error(f"Error listing games: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error while listing games",
        )


@router.get("/{game_id}", response_model=GameDetail)
async def get_game(
    game_id: Annotated[str, Path(..., description="Game ID to retrieve")],
    game_repo: Annotated[GameRepository, Depends(get_game_repository)],
    current_user: Annotated[Optional[User], Depends(require_user)],
) -> GameDetail:
    try:
        return await game_repo.get_game(game_id, owner_id_of(current_user))

    except StatsError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Error retrieving game {game_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error while retrieving game",
        )


@router.post("", response_model=Game, status_code=status.HTTP_201_CREATED)
async def create_game(
    game_data: GameCreate,
    game_repo: Annotated[GameRepository, Depends(get_game_repository)],
    stat_updater: Annotated[StatUpdater, Depends(get_stat_updater)],
    current_user: Annotated[Optional[User], Depends(require_user)],
) -> Game:
    """
    Record a game, then credit the winner and the other participants.

    The game stays saved even when the stat update fails; that case is
    reported as a 500.
    """
    try:
        game = await game_repo.create_game(game_data, owner_id_of(current_user))
        logger.info(f"Recorded game {game.id} with {len(game.players)} players")

        await stat_updater.apply_game(game)
        return game

    except StatsError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Error recording game: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error while recording game",
        )
