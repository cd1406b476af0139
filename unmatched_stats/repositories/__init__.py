# Data access repositories

from .base import BaseRepository, is_valid_id
from .user_repository import UserRepository
from .player_repository import PlayerRepository
from .game_repository import GameRepository

__all__ = [
    "BaseRepository",
    "is_valid_id",
    "UserRepository",
    "PlayerRepository",
    "GameRepository",
]
