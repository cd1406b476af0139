from pydantic import Field, field_validator, model_validator
from typing import Optional
import uuid

from unmatched_stats.models.base import CamelModel


DEFAULT_AVATAR_URL = "https://via.placeholder.com/150"


class Player(CamelModel):
    """A tracked participant with cumulative play/win statistics"""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique player identifier")
    name: str
    avatar_url: str = DEFAULT_AVATAR_URL
    games_played: int = Field(default=0, ge=0)
    wins: int = Field(default=0, ge=0)
    favorite_character: Optional[str] = None
    owner_id: Optional[str] = Field(default=None, description="Id of the user who created the player")

    def summary(self) -> "PlayerSummary":
        return PlayerSummary(
            id=self.id,
            name=self.name,
            avatar_url=self.avatar_url,
            games_played=self.games_played,
            wins=self.wins,
            favorite_character=self.favorite_character,
        )


class PlayerSummary(CamelModel):
    """Read-only player view embedded into resolved games"""

    id: str
    name: str
    avatar_url: str
    games_played: int
    wins: int
    favorite_character: Optional[str] = None


class PlayerCreate(CamelModel):
    """Fields accepted when creating a player"""

    name: str = Field(..., min_length=1, max_length=100)
    avatar_url: str = DEFAULT_AVATAR_URL
    games_played: int = Field(default=0, ge=0)
    wins: int = Field(default=0, ge=0)
    favorite_character: Optional[str] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Player name cannot be empty')
        return v.strip()

    @model_validator(mode='after')
    def validate_wins(self):
        """Ensure wins doesn't exceed games played"""
        if self.wins > self.games_played:
            raise ValueError('Wins cannot exceed games played')
        return self


class PlayerUpdate(CamelModel):
    """Partial update; only fields present in the request are applied"""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    avatar_url: Optional[str] = None
    games_played: Optional[int] = Field(None, ge=0)
    wins: Optional[int] = Field(None, ge=0)
    favorite_character: Optional[str] = None

    @field_validator('name', 'avatar_url', 'games_played', 'wins')
    @classmethod
    def reject_null(cls, v, info):
        # Only runs for values that were sent, so None here is an explicit null
        if v is None:
            raise ValueError(f'{info.field_name} cannot be null')
        if isinstance(v, str) and not v.strip():
            raise ValueError(f'{info.field_name} cannot be empty')
        return v
