"""
Group Stage Orchestrator - build the full group-stage schedule in one call

Pipeline:
1. Generate round-robin fixtures per group (unsupported groups are skipped)
2. Group fixtures by round across all groups
3. Schedule each round on the shared courts, rounds back to back

Pure and deterministic: the only randomness (group shuffle) happens before this
step. Nothing is persisted here.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

from smash.services.scheduling_summary import duration_for_slots, format_duration
from smash.utils.court_scheduler import (
    DEFAULT_BUFFER_MINUTES,
    DEFAULT_MATCH_DURATION_MINUTES,
    schedule_matches,
    slot_offset_minutes,
    validate_court_labels,
)
from smash.utils.round_robin import generate_group_fixtures, matches_by_round
from smash.utils.schedule_types import Group, ScheduledMatch, SkippedGroup

logger = logging.getLogger(__name__)


class BuildWarning:
    """Warning raised during a group-stage build"""

    def __init__(self, code: str, message: str, group_id: Optional[str] = None, match_id: Optional[str] = None):
        self.code = code
        self.message = message
        self.group_id = group_id
        self.match_id = match_id

    def to_dict(self):
        return {"code": self.code, "message": self.message, "group_id": self.group_id, "match_id": self.match_id}


class GroupStageBuildResult:
    """Complete result of a group-stage build"""

    def __init__(self):
        self.matches: List[ScheduledMatch] = []
        self.skipped_groups: List[SkippedGroup] = []
        self.warnings: List[BuildWarning] = []
        self.rounds_count = 0
        self.time_slots_used = 0
        self.total_duration_minutes = 0

    @property
    def end_time(self) -> Optional[datetime]:
        if not self.matches:
            return None
        return max(m.end_time for m in self.matches)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "matches": [m.to_dict() for m in self.matches],
            "skipped_groups": [s.to_dict() for s in self.skipped_groups],
            "warnings": [w.to_dict() for w in self.warnings],
            "summary": {
                "matches_scheduled": len(self.matches),
                "rounds_count": self.rounds_count,
                "time_slots_used": self.time_slots_used,
                "total_duration_minutes": self.total_duration_minutes,
                "total_duration_formatted": format_duration(self.total_duration_minutes),
            },
        }


def build_group_stage(
    groups: Sequence[Group],
    courts: Sequence[str],
    start_time: datetime,
    match_duration_minutes: int = DEFAULT_MATCH_DURATION_MINUTES,
    buffer_minutes: int = DEFAULT_BUFFER_MINUTES,
) -> GroupStageBuildResult:
    """
    Generate and schedule every group's round-robin.

    Round R is scheduled with a single scheduler call holding all groups'
    round-R matches, so groups share courts within the same time window.
    Round R+1 starts in the slot after round R's last slot, and slot numbers
    continue across rounds so (court, time_slot) stays unique.

    Raises InvalidCourtSpecification if there are matches but no courts, or a
    court is listed twice.
    """
    result = GroupStageBuildResult()

    outcomes = generate_group_fixtures(groups)
    for outcome in outcomes:
        if not outcome.scheduled:
            result.skipped_groups.append(outcome)
            result.warnings.append(BuildWarning(outcome.reason, outcome.message, group_id=outcome.group_id))
            continue
        for warning in outcome.warnings:
            result.warnings.append(
                BuildWarning(
                    warning["code"], warning["message"], group_id=outcome.group_id, match_id=warning.get("match_id")
                )
            )

    rounds = matches_by_round(outcomes)
    if rounds:
        validate_court_labels(courts)

    slots_used = 0
    for round_number, round_matches in rounds.items():
        round_start = start_time + timedelta(
            minutes=slot_offset_minutes(slots_used, match_duration_minutes, buffer_minutes)
        )
        scheduled = schedule_matches(
            round_matches,
            courts,
            round_start,
            match_duration_minutes,
            buffer_minutes,
            first_time_slot=slots_used + 1,
        )
        result.matches.extend(scheduled)
        slots_used = max(m.time_slot for m in scheduled)
        logger.debug("Round %d: %d matches, slots through %d", round_number, len(scheduled), slots_used)

    result.rounds_count = len(rounds)
    result.time_slots_used = slots_used
    result.total_duration_minutes = duration_for_slots(slots_used, match_duration_minutes, buffer_minutes)

    logger.info(
        "Built group stage: %d groups, %d matches, %d skipped groups, %d slots (%d min)",
        len(groups),
        len(result.matches),
        len(result.skipped_groups),
        result.time_slots_used,
        result.total_duration_minutes,
    )
    return result
