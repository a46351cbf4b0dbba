from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from smash.models.tournament import Tournament


class Team(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    name: Optional[str] = None
    # Player references (user ids); a team is complete once both are set
    player1: Optional[str] = Field(default=None)
    player2: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    tournament: "Tournament" = Relationship(back_populates="teams")

    @property
    def is_complete(self) -> bool:
        return self.player1 is not None and self.player2 is not None
