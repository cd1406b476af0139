"""Dependencies that hand route handlers the objects built by the app factory"""

from fastapi import Request

from unmatched_stats.repositories.player_repository import PlayerRepository
from unmatched_stats.repositories.game_repository import GameRepository
from unmatched_stats.services.stats_service import StatUpdater


def get_player_repository(request: Request) -> PlayerRepository:
    return request.app.state.player_repository


def get_game_repository(request: Request) -> GameRepository:
    return request.app.state.game_repository


def get_stat_updater(request: Request) -> StatUpdater:
    return request.app.state.stat_updater
