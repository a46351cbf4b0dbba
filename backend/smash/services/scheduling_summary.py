"""
Scheduling Summary - count-only duration previews.

Pure functions of match and court counts. Nothing here builds or touches match
records; the organizer sees these numbers before any match exists.

Duration rule (shared with the court scheduler):
    total = slots * (duration + buffer) - buffer
No buffer is charged after the final slot.
"""
from dataclasses import asdict, dataclass
from math import ceil
from typing import Any, Dict, List, Optional, Sequence

from smash.services.errors import InvalidCourtSpecification
from smash.services.group_rules import (
    GroupSizingStrategy,
    SUPPORTED_GROUP_SIZES,
    rr_pairings_by_round,
    validate_group_sizes,
)


@dataclass
class SchedulingSummary:
    time_slots_needed: int
    total_duration_minutes: int
    total_duration_formatted: str
    matches_per_slot: int
    simultaneous: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CourtValidation:
    valid: bool
    message: str
    simultaneous: Optional[bool] = None
    time_slots_needed: Optional[int] = None
    duration: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class GroupStageEstimate:
    team_count: int
    court_count: int
    groups_count: int
    group_sizes: List[int]
    total_matches: int
    matches_per_round: List[int]
    time_slots_per_round: List[int]
    total_time_slots: int
    total_duration_minutes: int
    total_duration_formatted: str
    is_limited: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _time_slots(match_count: int, court_count: int) -> int:
    if match_count <= 0:
        return 0
    if court_count <= 0:
        raise InvalidCourtSpecification("At least one court is required")
    return ceil(match_count / court_count)


def duration_for_slots(time_slots: int, match_duration_minutes: int, buffer_minutes: int) -> int:
    """slots * (duration + buffer) - buffer; zero slots take zero minutes."""
    if time_slots <= 0:
        return 0
    return time_slots * (match_duration_minutes + buffer_minutes) - buffer_minutes


def format_duration(total_minutes: int) -> str:
    """255 -> "4h 15m"."""
    return f"{total_minutes // 60}h {total_minutes % 60}m"


def get_scheduling_summary(
    total_matches: int,
    available_courts: int,
    match_duration_minutes: int = 60,
    buffer_minutes: int = 15,
) -> SchedulingSummary:
    """Preview how many slots and minutes ``total_matches`` need on ``available_courts``."""
    time_slots_needed = _time_slots(total_matches, available_courts)
    total_duration_minutes = duration_for_slots(time_slots_needed, match_duration_minutes, buffer_minutes)

    return SchedulingSummary(
        time_slots_needed=time_slots_needed,
        total_duration_minutes=total_duration_minutes,
        total_duration_formatted=format_duration(total_duration_minutes),
        matches_per_slot=available_courts,
        simultaneous=available_courts >= total_matches,
    )


def calculate_round_duration(
    match_count: int,
    court_count: int,
    match_duration_minutes: int = 30,
    buffer_minutes: int = 15,
) -> int:
    """
    Minutes a single round occupies when matches must wait for courts.

    calculate_round_duration(4, 3, 30, 15) -> 75 (2 slots)
    calculate_round_duration(4, 4, 30, 15) -> 30 (1 slot)
    """
    return duration_for_slots(_time_slots(match_count, court_count), match_duration_minutes, buffer_minutes)


def validate_courts(courts: Sequence[str], team_count: int) -> CourtValidation:
    """
    Check a parsed court list against the first round of a roster.

    The first round has team_count // 2 matches.
    """
    match_count = team_count // 2

    if not courts:
        return CourtValidation(valid=False, message="At least one court is required")

    if len(courts) >= match_count:
        return CourtValidation(
            valid=True,
            message="All matches can be played simultaneously",
            simultaneous=True,
        )

    summary = get_scheduling_summary(match_count, len(courts))
    return CourtValidation(
        valid=True,
        message=(
            f"Matches will be played in {summary.time_slots_needed} time slots "
            f"over {summary.total_duration_formatted}"
        ),
        simultaneous=False,
        time_slots_needed=summary.time_slots_needed,
        duration=summary.total_duration_formatted,
    )


def estimate_group_stage(
    team_count: int,
    court_count: int,
    match_duration_minutes: int = 30,
    buffer_minutes: int = 15,
    strategy: GroupSizingStrategy = "HEURISTIC",
) -> GroupStageEstimate:
    """
    Count-only preview of the whole group stage.

    Every round is scheduled on its own slots, so the total is the sum of
    per-round slot counts. Groups of unsupported sizes contribute no matches.
    Raises InvalidTeamCount when the roster cannot be grouped.
    """
    sizes = validate_group_sizes(team_count, strategy)

    per_round: Dict[int, int] = {}
    for size in sizes:
        if size not in SUPPORTED_GROUP_SIZES:
            continue
        for round_index, _, _, _ in rr_pairings_by_round(size):
            per_round[round_index] = per_round.get(round_index, 0) + 1

    matches_per_round = [per_round[r] for r in sorted(per_round)]
    time_slots_per_round = [_time_slots(count, court_count) for count in matches_per_round]
    total_time_slots = sum(time_slots_per_round)
    total_duration_minutes = duration_for_slots(total_time_slots, match_duration_minutes, buffer_minutes)

    return GroupStageEstimate(
        team_count=team_count,
        court_count=court_count,
        groups_count=len(sizes),
        group_sizes=sizes,
        total_matches=sum(matches_per_round),
        matches_per_round=matches_per_round,
        time_slots_per_round=time_slots_per_round,
        total_time_slots=total_time_slots,
        total_duration_minutes=total_duration_minutes,
        total_duration_formatted=format_duration(total_duration_minutes),
        is_limited=any(slots > 1 for slots in time_slots_per_round),
    )
