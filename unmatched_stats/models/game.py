from pydantic import Field
from typing import List, Optional
from datetime import datetime, timezone
import uuid

from unmatched_stats.models.base import CamelModel
from unmatched_stats.models.player import PlayerSummary


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GameEntry(CamelModel):
    """One participant of a game and the character they played"""

    player: str = Field(..., min_length=1, description="Player id")
    character: str = Field(..., min_length=1)


class GameCreate(CamelModel):
    date: Optional[datetime] = None
    players: List[GameEntry] = Field(default_factory=list)
    winner: Optional[str] = Field(None, description="Player id of the winner")
    notes: Optional[str] = None


class Game(CamelModel):
    """Stored game record; immutable once created"""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    date: datetime = Field(default_factory=_utcnow)
    players: List[GameEntry] = Field(default_factory=list)
    winner: Optional[str] = None
    notes: Optional[str] = None
    owner_id: Optional[str] = None

    def participant_ids(self) -> List[str]:
        """Distinct player ids in entry order"""
        seen = []
        for entry in self.players:
            if entry.player not in seen:
                seen.append(entry.player)
        return seen


class ResolvedGameEntry(CamelModel):
    player: Optional[PlayerSummary] = None
    character: str


class GameDetail(CamelModel):
    """Game with player references replaced by player summaries"""

    id: str
    date: datetime
    players: List[ResolvedGameEntry]
    winner: Optional[PlayerSummary] = None
    notes: Optional[str] = None
    owner_id: Optional[str] = None
