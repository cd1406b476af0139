from fastapi import APIRouter

from .auth import router as auth_router
from .players import router as players_router
from .games import router as games_router
from .health import router as health_router

api_router = APIRouter(prefix="/api")
api_router.include_router(auth_router)
api_router.include_router(players_router)
api_router.include_router(games_router)

__all__ = ["api_router", "health_router"]
