"""
Settings for the stats API, read from the environment and an optional .env file.

``get_settings()`` builds them once per process; the app factory and the
management CLI pass the instance down explicitly.
"""

import os
from functools import lru_cache
from typing import List

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Well-known key of the local Cosmos DB emulator
EMULATOR_CONNECTION_STRING = (
    "AccountEndpoint=https://localhost:8081/;"
    "AccountKey=C2y6yDjf5/R+ob0N8A7Cgv30VRDJIWEHLM+4QDU5DE2nQ9nDuVTqobD4b8mGGyPMbIZnqyMsEcaGQy67XIw/Jw==;"
)

ENVIRONMENTS = ("development", "staging", "production", "test")
MIN_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Base settings; the per-environment classes below only change defaults."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    log_format: str = "json"

    # Server
    api_host: str = "0.0.0.0"
    port: int = 5000
    allowed_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    # Document store
    cosmos_connection_string: str = EMULATOR_CONNECTION_STRING
    cosmos_database_name: str = "unmatched-stats"
    cosmos_container_users: str = "users"
    cosmos_container_players: str = "players"
    cosmos_container_games: str = "games"

    # Tokens and password hashing
    jwt_secret_key: str = "dev-jwt-secret-key-change-me-in-production-please"
    jwt_algorithm: str = "HS256"
    jwt_expiration_days: int = 7
    bcrypt_rounds: int = 12

    # When off, data routes are public and unscoped
    require_auth: bool = True
    # When on, a game's winner must be a participant and every player id must exist
    validate_game_references: bool = False

    @field_validator("app_env")
    @classmethod
    def check_app_env(cls, v: str) -> str:
        if v not in ENVIRONMENTS:
            raise ValueError(f"app_env must be one of {', '.join(ENVIRONMENTS)}, got {v!r}")
        return v

    @field_validator("jwt_secret_key")
    @classmethod
    def check_secret_length(cls, v: str) -> str:
        if len(v) < MIN_SECRET_LENGTH:
            raise ValueError(f"jwt_secret_key needs at least {MIN_SECRET_LENGTH} characters")
        return v

    @field_validator("bcrypt_rounds")
    @classmethod
    def check_bcrypt_rounds(cls, v: int) -> int:
        # bcrypt accepts log2 cost factors 4..31
        if not 4 <= v <= 31:
            raise ValueError("bcrypt_rounds must be between 4 and 31")
        return v

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def cors_origins(self) -> List[str]:
        """ALLOWED_ORIGINS split on commas, blanks dropped."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


class DevelopmentSettings(Settings):
    debug: bool = True
    log_level: str = "DEBUG"
    log_format: str = "standard"
    bcrypt_rounds: int = 4


class ProductionSettings(Settings):
    app_env: str = "production"

    @field_validator("allowed_origins")
    @classmethod
    def reject_local_origins(cls, v: str) -> str:
        if "localhost" in v or "127.0.0.1" in v:
            raise ValueError("allowed_origins may not point at localhost in production")
        return v


class TestSettings(Settings):
    app_env: str = "test"
    log_format: str = "standard"
    bcrypt_rounds: int = 4
    cosmos_database_name: str = "unmatched-stats-test"


SETTINGS_BY_ENV = {
    "development": DevelopmentSettings,
    "staging": Settings,
    "production": ProductionSettings,
    "test": TestSettings,
}


@lru_cache()
def get_settings() -> Settings:
    """Settings class chosen by APP_ENV, built once per process."""
    # APP_ENV itself may come from .env
    load_dotenv()
    env = os.getenv("APP_ENV", "development").lower()
    return SETTINGS_BY_ENV.get(env, DevelopmentSettings)()
