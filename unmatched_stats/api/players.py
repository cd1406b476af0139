"""Player API endpoints"""

import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, status

from unmatched_stats.api.dependencies import get_player_repository
from unmatched_stats.auth.middleware import require_user, owner_id_of
from unmatched_stats.exceptions import StatsError
from unmatched_stats.models.player import Player, PlayerCreate, PlayerUpdate
from unmatched_stats.models.user import User
from unmatched_stats.repositories.player_repository import PlayerRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/players", tags=["players"])


@router.get("", response_model=List[Player])
async def list_players(
    player_repo: Annotated[PlayerRepository, Depends(get_player_repository)],
    current_user: Annotated[Optional[User], Depends(require_user)],
) -> List[Player]:
    """List players visible to the caller"""
    try:
        return await player_repo.list_players(owner_id_of(current_user))
    except Exception as e:
        logger.error(f"Error listing players: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error while listing players",
        )


@router.get("/{player_id}", response_model=Player)
async def get_player(
    player_id: Annotated[str, Path(..., description="Player ID to retrieve")],
    player_repo: Annotated[PlayerRepository, Depends(get_player_repository)],
    current_user: Annotated[Optional[User], Depends(require_user)],
) -> Player:
    try:
        return await player_repo.get_player(player_id, owner_id_of(current_user))

    except StatsError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Error retrieving player {player_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error while retrieving player",
        )


@router.post("", response_model=Player, status_code=status.HTTP_201_CREATED)
async def create_player(
    player_data: PlayerCreate,
    player_repo: Annotated[PlayerRepository, Depends(get_player_repository)],
    current_user: Annotated[Optional[User], Depends(require_user)],
) -> Player:
    """
    Create a player owned by the caller.

    Only ``name`` is required; avatar, counters and favorite character
    fall back to their defaults.
    """
    try:
        player = await player_repo.create_player(player_data, owner_id_of(current_user))
        logger.info(f"Created player {player.id}")
        return player

    except StatsError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Error creating player: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error while creating player",
        )


@router.put("/{player_id}", response_model=Player)
async def update_player(
    player_id: Annotated[str, Path(..., description="Player ID to update")],
    player_update: PlayerUpdate,
    player_repo: Annotated[PlayerRepository, Depends(get_player_repository)],
    current_user: Annotated[Optional[User], Depends(require_user)],
) -> Player:
    """Merge the provided fields into the player"""
    try:
        return await player_repo.update_player(player_id, player_update, owner_id_of(current_user))

    except StatsError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Error updating player {player_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error while updating player",
        )
