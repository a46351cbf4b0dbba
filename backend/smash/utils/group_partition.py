"""
Group Partitioner - Random Balanced Group Assignment

Splits a roster of complete teams into groups of 3 or 4 for the round-robin
group stage. The shuffle is the only source of randomness in the scheduling
engine; it draws from an injectable random source so callers can pin group
membership (tests) or get a fresh shuffle per call (production).
"""

import logging
import random
from typing import Iterable, List, Optional

from smash.services.group_rules import (
    GroupSizingStrategy,
    group_code,
    group_name,
    validate_group_sizes,
)
from smash.utils.schedule_types import Group, Team

logger = logging.getLogger(__name__)


def filter_complete_teams(teams: Iterable[Team]) -> List[Team]:
    """Keep only teams with both players registered, preserving order."""
    return [t for t in teams if t is not None and t.is_complete]


def partition_into_groups(
    teams: List[Team],
    rng: Optional[random.Random] = None,
    strategy: GroupSizingStrategy = "HEURISTIC",
) -> List[Group]:
    """
    Shuffle the roster and slice it into consecutive groups.

    Algorithm:
    1. Compute group sizes for len(teams) under ``strategy`` (fails with
       InvalidTeamCount if any group would have fewer than 3 teams)
    2. Shuffle a copy of the roster with ``rng`` (a fresh random.Random when omitted)
    3. Slice consecutive chunks; name them "Group A", "Group B", ... in order

    Precondition: every team is complete. The input list is never mutated, and
    nothing is remembered between calls, so calling again simply reshuffles.

    Args:
        teams: Complete teams registered for the tournament
        rng: Random source used for the shuffle
        strategy: "HEURISTIC" (>= 8 teams -> groups of 4, else 3) or "BRACKET_TABLE"

    Returns:
        Groups in creation order
    """
    sizes = validate_group_sizes(len(teams), strategy)

    if rng is None:
        rng = random.Random()

    shuffled = list(teams)
    rng.shuffle(shuffled)

    groups: List[Group] = []
    offset = 0
    for index, size in enumerate(sizes):
        groups.append(
            Group(
                id=group_code(index),
                name=group_name(index),
                teams=tuple(shuffled[offset : offset + size]),
            )
        )
        offset += size

    logger.info(
        "Partitioned %d teams into %d groups (strategy=%s, sizes=%s)",
        len(teams),
        len(groups),
        strategy,
        sizes,
    )
    return groups
