from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Optional

from sqlalchemy import JSON, UniqueConstraint as SAUniqueConstraint
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from smash.models.tournament import Tournament


class Match(SQLModel, table=True):
    __table_args__ = (
        SAUniqueConstraint("tournament_id", "match_code", name="uq_match_tournament_code"),
        # No court hosts two matches in the same slot
        SAUniqueConstraint("tournament_id", "court", "time_slot", name="uq_match_court_slot"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    match_code: str  # "group-1-r1-m1"
    group_code: str
    group_name: str
    round_number: int  # 1-based within the group's round-robin
    sequence_in_round: int
    team1_id: int = Field(foreign_key="team.id")
    team2_id: int = Field(foreign_key="team.id")

    # Court assignment (immutable once committed)
    court: str
    start_time: datetime
    time_slot: int
    duration_minutes: int

    status: str = Field(default="GROUP STAGE")
    # Written later by score recording
    score_json: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    winner_team_id: Optional[int] = Field(default=None, foreign_key="team.id")
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    tournament: "Tournament" = Relationship(back_populates="matches")
