from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON, UniqueConstraint as SAUniqueConstraint
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from smash.models.tournament import Tournament


class TournamentGroup(SQLModel, table=True):
    __table_args__ = (SAUniqueConstraint("tournament_id", "group_code", name="uq_group_tournament_code"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    group_code: str  # "group-1", "group-2", ...
    name: str  # "Group A", "Group B", ...
    team_ids: List[int] = Field(default_factory=list, sa_column=Column(JSON))

    # Relationships
    tournament: "Tournament" = Relationship(back_populates="groups")
