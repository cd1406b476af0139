from .base import CamelModel
from .user import User, UserPublic, UserCreate, LoginRequest, AuthResponse
from .player import Player, PlayerSummary, PlayerCreate, PlayerUpdate, DEFAULT_AVATAR_URL
from .game import Game, GameEntry, GameCreate, GameDetail, ResolvedGameEntry

__all__ = [
    "CamelModel",
    "User",
    "UserPublic",
    "UserCreate",
    "LoginRequest",
    "AuthResponse",
    "Player",
    "PlayerSummary",
    "PlayerCreate",
    "PlayerUpdate",
    "DEFAULT_AVATAR_URL",
    "Game",
    "GameEntry",
    "GameCreate",
    "GameDetail",
    "ResolvedGameEntry",
]
