"""
Group Stage Rules (Single Source of Truth)

Group sizing strategies and the fixed round-robin pairing tables.
All other modules must import from here. Do NOT duplicate these rules elsewhere.
"""

from math import ceil
from typing import Dict, FrozenSet, List, Literal, Tuple

from smash.services.errors import InvalidTeamCount

# =============================================================================
# Group Sizing
# =============================================================================

GroupSizingStrategy = Literal["HEURISTIC", "BRACKET_TABLE"]

GROUP_SIZING_STRATEGIES: FrozenSet[str] = frozenset({"HEURISTIC", "BRACKET_TABLE"})

# Teams at or above this count play in groups of 4, below it in groups of 3
HEURISTIC_SIZE4_THRESHOLD = 8

MIN_GROUP_SIZE = 3

# Round-robin tables exist for these sizes only
SUPPORTED_GROUP_SIZES: FrozenSet[int] = frozenset({3, 4})

# Official bracket shapes: team_count -> (groups, teams_per_group, knockout entry round)
BRACKET_TABLE_CONFIG: Dict[int, Tuple[int, int, str]] = {
    4: (2, 2, "semi_finals"),
    8: (2, 4, "semi_finals"),
    12: (4, 3, "quarter_finals"),
    16: (4, 4, "round_of_16"),
    20: (4, 5, "round_of_16"),
    24: (4, 6, "round_of_16"),
}


def heuristic_group_size(team_count: int) -> int:
    """4 when team_count >= 8, otherwise 3."""
    return 4 if team_count >= HEURISTIC_SIZE4_THRESHOLD else 3


def group_config(team_count: int, strategy: GroupSizingStrategy = "HEURISTIC") -> Tuple[int, int]:
    """
    Return (groups_count, group_size) for a roster of ``team_count`` teams.

    Rules:
    - HEURISTIC: size from heuristic_group_size, groups = ceil(team_count / size)
    - BRACKET_TABLE: looked up in BRACKET_TABLE_CONFIG; other counts are rejected

    Raises InvalidTeamCount for an empty roster or a count with no bracket shape,
    ValueError for an unknown strategy.
    """
    if strategy not in GROUP_SIZING_STRATEGIES:
        raise ValueError(f"Unknown group sizing strategy: {strategy}")

    if team_count <= 0:
        raise InvalidTeamCount("At least 3 complete teams are required to form groups")

    if strategy == "BRACKET_TABLE":
        config = BRACKET_TABLE_CONFIG.get(team_count)
        if config is None:
            supported = ", ".join(str(n) for n in sorted(BRACKET_TABLE_CONFIG))
            raise InvalidTeamCount(f"{team_count} teams has no bracket shape (supported: {supported})")
        groups_count, group_size, _ = config
        return groups_count, group_size

    group_size = heuristic_group_size(team_count)
    return ceil(team_count / group_size), group_size


def group_sizes(team_count: int, strategy: GroupSizingStrategy = "HEURISTIC") -> List[int]:
    """
    Sizes of the consecutive chunks the roster is sliced into.
    The last group is short when team_count does not divide evenly.
    """
    groups_count, group_size = group_config(team_count, strategy)
    sizes = []
    remaining = team_count
    for _ in range(groups_count):
        sizes.append(min(group_size, remaining))
        remaining -= sizes[-1]
    return sizes


def validate_group_sizes(team_count: int, strategy: GroupSizingStrategy = "HEURISTIC") -> List[int]:
    """Return group_sizes, raising InvalidTeamCount if any group has fewer than 3 teams."""
    sizes = group_sizes(team_count, strategy)
    for index, size in enumerate(sizes):
        if size < MIN_GROUP_SIZE:
            raise InvalidTeamCount(
                f"{team_count} teams would leave {group_name(index)} with {size} team(s); "
                f"every group needs at least {MIN_GROUP_SIZE}"
            )
    return sizes


def group_name(index: int) -> str:
    """0 -> "Group A", 1 -> "Group B", ..."""
    return f"Group {chr(ord('A') + index)}"


def group_code(index: int) -> str:
    """0 -> "group-1", 1 -> "group-2", ..."""
    return f"group-{index + 1}"


# =============================================================================
# Round-Robin Rules
# =============================================================================

# (round_index, sequence_in_round, idx_a, idx_b); indices are 0-based group positions
_RR_PAIRINGS: Dict[int, List[Tuple[int, int, int, int]]] = {
    3: [
        (1, 1, 0, 1),
        (2, 1, 0, 2),
        (3, 1, 1, 2),
    ],
    4: [
        (1, 1, 0, 1),
        (1, 2, 2, 3),
        (2, 1, 0, 2),
        (2, 2, 1, 3),
        (3, 1, 0, 3),
        (3, 2, 1, 2),
    ],
}


def rr_pairings_by_round(group_size: int) -> List[Tuple[int, int, int, int]]:
    """
    Round-robin pairings for a group. Returns list of (round_index, sequence_in_round, idx_a, idx_b).

    - 3 teams: R1 (0,1); R2 (0,2); R3 (1,2)
    - 4 teams: R1 (0,1),(2,3); R2 (0,2),(1,3); R3 (0,3),(1,2)

    Raises ValueError for any other size.
    """
    if group_size not in _RR_PAIRINGS:
        raise ValueError(f"No round-robin table for a group of {group_size} teams")
    return list(_RR_PAIRINGS[group_size])


def rr_round_count(group_size: int) -> int:
    """Both supported sizes play 3 rounds."""
    return max(p[0] for p in rr_pairings_by_round(group_size))


def rr_matches_per_group(group_size: int) -> int:
    """C(n, 2) = n*(n-1)/2."""
    return (group_size * (group_size - 1)) // 2
