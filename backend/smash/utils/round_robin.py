"""
Round Robin Match Generation

Builds the per-group round-robin fixtures and orders them for the scheduler:
1. Each match is tagged with its group and its 1-based round
2. Groups of a size other than 3 or 4 are skipped with an explicit outcome
3. Callers flatten round-major (every group's round 1, then round 2, ...)
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List

from smash.services.errors import INCOMPLETE_MATCH_DATA, UNSUPPORTED_GROUP_SIZE
from smash.services.group_rules import SUPPORTED_GROUP_SIZES, rr_pairings_by_round
from smash.utils.schedule_types import (
    Group,
    GroupScheduleOutcome,
    ScheduledGroup,
    SkippedGroup,
    UnscheduledMatch,
)

logger = logging.getLogger(__name__)


def generate_round_robin(group: Group) -> GroupScheduleOutcome:
    """
    Generate the round-robin fixtures for one group.

    - 3 teams: 3 rounds, 1 match each
    - 4 teams: 3 rounds, 2 matches each
    - any other size: SkippedGroup(reason="UnsupportedGroupSize"), logged

    A fixture involving a team that is missing a player is dropped and
    reported as an "IncompleteMatchData" warning on the outcome.
    """
    teams = list(group.teams)

    if len(teams) not in SUPPORTED_GROUP_SIZES:
        message = f"{group.name} has {len(teams)} teams; only groups of 3 or 4 can play a round-robin"
        logger.warning("Skipping %s: %s", group.id, message)
        return SkippedGroup(group_id=group.id, reason=UNSUPPORTED_GROUP_SIZE, message=message)

    matches: List[UnscheduledMatch] = []
    warnings = []
    for round_index, seq_in_round, idx_a, idx_b in rr_pairings_by_round(len(teams)):
        team1, team2 = teams[idx_a], teams[idx_b]
        match_id = f"{group.id}-r{round_index}-m{seq_in_round}"

        if team1 is None or team2 is None or not team1.is_complete or not team2.is_complete:
            message = f"Incomplete team data for match {match_id}, skipping"
            logger.warning(message)
            warnings.append({"code": INCOMPLETE_MATCH_DATA, "message": message, "match_id": match_id})
            continue

        matches.append(
            UnscheduledMatch(
                id=match_id,
                group_id=group.id,
                group_name=group.name,
                round=round_index,
                sequence_in_round=seq_in_round,
                team1=team1,
                team2=team2,
            )
        )

    return ScheduledGroup(group_id=group.id, matches=matches, warnings=warnings)


def generate_group_fixtures(groups: Iterable[Group]) -> List[GroupScheduleOutcome]:
    """Run generate_round_robin for every group, preserving group order."""
    return [generate_round_robin(group) for group in groups]


def matches_by_round(outcomes: Iterable[GroupScheduleOutcome]) -> Dict[int, List[UnscheduledMatch]]:
    """
    Group matches of all scheduled groups by round number.

    Within a round, matches keep group order, then sequence_in_round order.
    Keys are returned in ascending round order.
    """
    rounds: Dict[int, List[UnscheduledMatch]] = defaultdict(list)
    for outcome in outcomes:
        if not outcome.scheduled:
            continue
        for match in sorted(outcome.matches, key=lambda m: (m.round, m.sequence_in_round)):
            rounds[match.round].append(match)
    return {round_number: rounds[round_number] for round_number in sorted(rounds)}


def flatten_round_major(outcomes: Iterable[GroupScheduleOutcome]) -> List[UnscheduledMatch]:
    """
    Flatten matches round-major: round 1 of every group, then round 2, ...

    This is the order the match scheduler expects; group-major order would put
    one group's round 2 in the same time window as another group's round 1.
    """
    ordered: List[UnscheduledMatch] = []
    for round_matches in matches_by_round(outcomes).values():
        ordered.extend(round_matches)
    return ordered
