from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from smash.models.match import Match
    from smash.models.team import Team
    from smash.models.tournament_group import TournamentGroup

STATUS_REGISTRATION = "REGISTRATION"
STATUS_GROUP_STAGE = "GROUP STAGE"


class Tournament(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    location: Optional[str] = None
    courts: Optional[str] = None  # Free-text court specification, e.g. "1-4" or "Court A, Court B"
    start_time: datetime
    match_duration_minutes: int = Field(default=30)
    buffer_minutes: int = Field(default=15)
    status: str = Field(default=STATUS_REGISTRATION)  # "REGISTRATION" | "GROUP STAGE"
    started_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    teams: List["Team"] = Relationship(back_populates="tournament")
    groups: List["TournamentGroup"] = Relationship(back_populates="tournament")
    matches: List["Match"] = Relationship(back_populates="tournament")
