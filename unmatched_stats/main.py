import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from unmatched_stats.api import api_router, health_router
from unmatched_stats.auth.jwt_handler import JWTHandler
from unmatched_stats.auth.service import AuthService
from unmatched_stats.config import Settings, get_settings
from unmatched_stats.database.connection import CosmosDBConnection
from unmatched_stats.monitoring import RequestLoggingMiddleware, setup_logging
from unmatched_stats.repositories import UserRepository, PlayerRepository, GameRepository
from unmatched_stats.services import StatUpdater

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    cosmos_db = app.state.cosmos_db
    try:
        await cosmos_db.connect()
        logger.info(f"Cosmos DB connected: {app.state.settings.cosmos_database_name}")
    except Exception as e:
        # Repositories connect lazily, so the API can still come up
        logger.error(f"Cosmos DB connection failed at startup: {e}")
    yield
    await cosmos_db.disconnect()


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def register_error_handlers(app: FastAPI) -> None:
    """Render every error as ``{"error": message}``"""

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": _validation_message(exc)},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )


def create_app(settings: Optional[Settings] = None, cosmos_db: Optional[CosmosDBConnection] = None) -> FastAPI:
    """Build the application; settings are read once here and passed down"""
    settings = settings or get_settings()
    setup_logging(settings.log_level, enable_json=settings.log_format == "json")

    app = FastAPI(
        title="Unmatched Stats API",
        description="""
    Player, game and win tracking for tabletop game nights.

    ## Authentication

    Register or log in to get a bearer token, then send it on every request:
    ```
    Authorization: Bearer <your-jwt-token>
    ```
    """,
        version="1.0.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "authentication", "description": "Registration, login and the current user"},
            {"name": "players", "description": "Players and their cumulative stats"},
            {"name": "games", "description": "Recorded games"},
            {"name": "health", "description": "Health check endpoints"},
        ],
    )

    cosmos_db = cosmos_db or CosmosDBConnection(settings)
    user_repository = UserRepository(cosmos_db)
    player_repository = PlayerRepository(cosmos_db)

    app.state.settings = settings
    app.state.cosmos_db = cosmos_db
    app.state.auth_service = AuthService(user_repository, JWTHandler(settings), settings.bcrypt_rounds)
    app.state.player_repository = player_repository
    app.state.game_repository = GameRepository(
        cosmos_db,
        player_repository,
        validate_references=settings.validate_game_references,
    )
    app.state.stat_updater = StatUpdater(player_repository)

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "Origin", "X-Correlation-ID"],
        expose_headers=["X-Correlation-ID"],
    )

    register_error_handlers(app)

    app.include_router(api_router)
    app.include_router(health_router)

    @app.get("/")
    async def root():
        return {"message": "Unmatched Stats API is running"}

    logger.info(f"Application created (env={settings.app_env}, require_auth={settings.require_auth})")
    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.api_host, port=settings.port)
