"""
Court Scheduler: Deterministic match-to-court/time-slot assignment

Assigns an ordered list of unscheduled matches to a bounded set of courts.
Courts are handed out round-robin; a new time slot opens every time all
courts are in use.

Non-goals:
- Travel time or player rest optimisation
- Reordering matches (callers order them round-major)
- Any randomness
"""

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

from smash.services.errors import InvalidCourtSpecification
from smash.utils.schedule_types import ScheduledMatch, UnscheduledMatch

DEFAULT_MATCH_DURATION_MINUTES = 60
DEFAULT_BUFFER_MINUTES = 15


def validate_court_labels(courts: Optional[Sequence[str]]) -> None:
    """
    Courts handed to the scheduler must be non-empty and distinct.

    Labels are compared case-insensitively, so "1, Court 1" names one court twice.
    """
    if not courts:
        raise InvalidCourtSpecification("At least one court is required")

    seen = set()
    for court in courts:
        key = " ".join(court.split()).lower()
        if key in seen:
            raise InvalidCourtSpecification(f"{court} is listed more than once")
        seen.add(key)


def slot_offset_minutes(slot_index: int, match_duration_minutes: int, buffer_minutes: int) -> int:
    """Minutes from the schedule start to the start of 0-based ``slot_index``."""
    return slot_index * (match_duration_minutes + buffer_minutes)


def schedule_matches(
    matches: Optional[Sequence[UnscheduledMatch]],
    courts: Optional[Sequence[str]],
    start_time: datetime,
    match_duration_minutes: int = DEFAULT_MATCH_DURATION_MINUTES,
    buffer_minutes: int = DEFAULT_BUFFER_MINUTES,
    first_time_slot: int = 1,
) -> List[ScheduledMatch]:
    """
    Assign each match a court and a start time.

    For the i-th match (0-based, input order):
    - court = courts[i % len(courts)]
    - slot = i // len(courts)
    - start = start_time + slot * (match_duration_minutes + buffer_minutes)
    - time_slot = first_time_slot + slot (1-based)

    Args:
        matches: Matches in the order they should be played
        courts: Court labels in assignment order
        start_time: Start of the first slot
        match_duration_minutes: Duration recorded on every scheduled match
        buffer_minutes: Idle time between consecutive matches on a court
        first_time_slot: Slot number given to the first slot, for callers that
            schedule several rounds back to back

    Returns:
        Scheduled matches, one per input match, in input order

    Raises:
        InvalidCourtSpecification: matches are present but no courts are, or a
            court is listed twice
    """
    if not matches:
        return []

    validate_court_labels(courts)

    court_count = len(courts)
    scheduled: List[ScheduledMatch] = []

    for index, match in enumerate(matches):
        slot = index // court_count
        offset = slot_offset_minutes(slot, match_duration_minutes, buffer_minutes)
        scheduled.append(
            ScheduledMatch.from_match(
                match,
                court=courts[index % court_count],
                start_time=start_time + timedelta(minutes=offset),
                time_slot=first_time_slot + slot,
                duration=match_duration_minutes,
            )
        )

    return scheduled


def group_matches_by_time_slot(scheduled_matches: Sequence[ScheduledMatch]) -> Dict[int, List[ScheduledMatch]]:
    """Group scheduled matches by time slot, slots ascending, matches in input order."""
    grouped: Dict[int, List[ScheduledMatch]] = defaultdict(list)
    for match in scheduled_matches:
        grouped[match.time_slot or 1].append(match)
    return {slot: grouped[slot] for slot in sorted(grouped)}


def needs_scheduling(match_count: int, court_count: int) -> bool:
    """True when there are more matches than courts (more than one slot is needed)."""
    return match_count > court_count


def format_time_slot(start_time: Optional[datetime], duration: int = DEFAULT_MATCH_DURATION_MINUTES) -> str:
    """
    Display label for a match window: "10:00 AM - 11:00 AM".
    """
    if not start_time:
        return ""

    end_time = start_time + timedelta(minutes=duration)
    return f"{_format_clock(start_time)} - {_format_clock(end_time)}"


def _format_clock(value: datetime) -> str:
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"


# =============================================================================
# Conflict checks
# =============================================================================


def _team_key(team: Any) -> Any:
    return getattr(team, "id", team)


def find_schedule_conflicts(scheduled_matches: Sequence[ScheduledMatch]) -> List[Dict[str, Any]]:
    """
    Check a schedule for double bookings.

    Violations:
    - COURT_DOUBLE_BOOKED: two matches share (court, time_slot)
    - TEAM_DOUBLE_BOOKED: a team plays two matches whose
      [start, start + duration) windows overlap

    Returns an empty list for a valid schedule.
    """
    violations: List[Dict[str, Any]] = []

    seen_slots: Dict[Tuple[str, int], str] = {}
    for match in scheduled_matches:
        key = (match.court, match.time_slot)
        if key in seen_slots:
            violations.append(
                {
                    "code": "COURT_DOUBLE_BOOKED",
                    "message": f"{match.court} slot {match.time_slot} holds {seen_slots[key]} and {match.id}",
                    "match_ids": [seen_slots[key], match.id],
                }
            )
        else:
            seen_slots[key] = match.id

    by_team: Dict[Any, List[ScheduledMatch]] = defaultdict(list)
    for match in scheduled_matches:
        by_team[_team_key(match.team1)].append(match)
        by_team[_team_key(match.team2)].append(match)

    for team_id, team_matches in by_team.items():
        ordered = sorted(team_matches, key=lambda m: m.start_time)
        for earlier, later in zip(ordered, ordered[1:]):
            if later.start_time < earlier.end_time:
                violations.append(
                    {
                        "code": "TEAM_DOUBLE_BOOKED",
                        "message": f"Team {team_id} plays {earlier.id} and {later.id} at overlapping times",
                        "match_ids": [earlier.id, later.id],
                    }
                )

    return violations
