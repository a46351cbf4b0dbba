"""
Plain records exchanged by the scheduling engine.

All records are immutable and serialize to plain dicts via ``to_dict()`` so
they can be handed to a persistence sink without behaviour attached.
"""

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple, Union


@dataclass(frozen=True)
class Team:
    id: str
    player1: Optional[str] = None
    player2: Optional[str] = None
    name: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.player1 is not None and self.player2 is not None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Group:
    id: str  # "group-1", "group-2", ...
    name: str  # "Group A", "Group B", ...
    teams: Tuple[Team, ...] = ()

    @property
    def size(self) -> int:
        return len(self.teams)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "teams": [t.to_dict() for t in self.teams],
        }


@dataclass(frozen=True)
class UnscheduledMatch:
    id: str
    group_id: str
    group_name: str
    round: int  # 1-based, scoped to the group's round-robin
    sequence_in_round: int
    team1: Team
    team2: Team

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ScheduledMatch(UnscheduledMatch):
    court: str
    start_time: datetime
    time_slot: int  # 1-based
    duration: int  # minutes

    @classmethod
    def from_match(
        cls, match: UnscheduledMatch, court: str, start_time: datetime, time_slot: int, duration: int
    ) -> "ScheduledMatch":
        """Copy every field of ``match`` and add the assignment."""
        values = {f.name: getattr(match, f.name) for f in fields(UnscheduledMatch)}
        return cls(court=court, start_time=start_time, time_slot=time_slot, duration=duration, **values)

    @property
    def end_time(self) -> datetime:
        return self.start_time + timedelta(minutes=self.duration)

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result["start_time"] = self.start_time.isoformat()
        return result


@dataclass(frozen=True)
class ScheduledGroup:
    """Round-robin outcome for a group that produced matches"""

    group_id: str
    matches: List[UnscheduledMatch] = field(default_factory=list)
    warnings: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def scheduled(self) -> bool:
        return True


@dataclass(frozen=True)
class SkippedGroup:
    """Round-robin outcome for a group that could not be scheduled"""

    group_id: str
    reason: str
    message: str

    @property
    def scheduled(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


GroupScheduleOutcome = Union[ScheduledGroup, SkippedGroup]
