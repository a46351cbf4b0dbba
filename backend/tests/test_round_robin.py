"""
Tests for round-robin generation and round-major ordering.
"""

from itertools import combinations

import pytest

from smash.services.group_rules import rr_matches_per_group, rr_pairings_by_round, rr_round_count
from smash.utils.round_robin import (
    flatten_round_major,
    generate_group_fixtures,
    generate_round_robin,
    matches_by_round,
)
from smash.utils.schedule_types import Group, Team


def make_group(size, index=1, incomplete=()):
    teams = []
    for i in range(size):
        team_id = f"G{index}T{i}"
        player2 = None if i in incomplete else f"{team_id}-p2"
        teams.append(Team(id=team_id, player1=f"{team_id}-p1", player2=player2))
    return Group(id=f"group-{index}", name=f"Group {chr(64 + index)}", teams=tuple(teams))


def pair(match):
    return frozenset((match.team1.id, match.team2.id))


@pytest.mark.parametrize("size", [3, 4])
def test_every_pair_exactly_once(size):
    group = make_group(size)
    outcome = generate_round_robin(group)
    assert outcome.scheduled

    pairs = [pair(m) for m in outcome.matches]
    expected = {frozenset((a.id, b.id)) for a, b in combinations(group.teams, 2)}
    assert len(pairs) == len(expected) == rr_matches_per_group(size)
    assert set(pairs) == expected


@pytest.mark.parametrize("size", [3, 4])
def test_no_team_twice_in_a_round(size):
    outcome = generate_round_robin(make_group(size))
    for round_matches in matches_by_round([outcome]).values():
        seen = [t for m in round_matches for t in (m.team1.id, m.team2.id)]
        assert len(seen) == len(set(seen))


def test_three_team_fixture_order():
    group = make_group(3)
    outcome = generate_round_robin(group)
    t = [team.id for team in group.teams]
    assert [(m.round, m.team1.id, m.team2.id) for m in outcome.matches] == [
        (1, t[0], t[1]),
        (2, t[0], t[2]),
        (3, t[1], t[2]),
    ]


def test_four_team_fixture_order():
    group = make_group(4)
    outcome = generate_round_robin(group)
    t = [team.id for team in group.teams]
    assert [(m.round, m.sequence_in_round, m.team1.id, m.team2.id) for m in outcome.matches] == [
        (1, 1, t[0], t[1]),
        (1, 2, t[2], t[3]),
        (2, 1, t[0], t[2]),
        (2, 2, t[1], t[3]),
        (3, 1, t[0], t[3]),
        (3, 2, t[1], t[2]),
    ]


def test_three_teams_each_play_twice():
    outcome = generate_round_robin(make_group(3))
    counts = {}
    for m in outcome.matches:
        for tid in (m.team1.id, m.team2.id):
            counts[tid] = counts.get(tid, 0) + 1
    assert sorted(counts.values()) == [2, 2, 2]


def test_matches_are_tagged_with_group_and_round():
    group = make_group(4, index=2)
    outcome = generate_round_robin(group)
    assert {m.group_id for m in outcome.matches} == {"group-2"}
    assert {m.group_name for m in outcome.matches} == {"Group B"}
    assert outcome.matches[0].id == "group-2-r1-m1"
    assert rr_round_count(4) == rr_round_count(3) == 3


@pytest.mark.parametrize("size", [2, 5, 6])
def test_unsupported_group_size_is_skipped(size, caplog):
    outcome = generate_round_robin(make_group(size))
    assert not outcome.scheduled
    assert outcome.reason == "UnsupportedGroupSize"
    assert outcome.group_id == "group-1"
    assert "Skipping group-1" in caplog.text


def test_incomplete_team_matches_are_dropped(caplog):
    """Team 1 lacks a player: its three fixtures are dropped with warnings."""
    outcome = generate_round_robin(make_group(4, incomplete=(1,)))
    assert outcome.scheduled
    assert len(outcome.matches) == 3
    assert all("G1T1" not in (m.team1.id, m.team2.id) for m in outcome.matches)
    assert [w["code"] for w in outcome.warnings] == ["IncompleteMatchData"] * 3
    assert "Incomplete team data" in caplog.text


def test_rr_pairings_rejects_other_sizes():
    with pytest.raises(ValueError):
        rr_pairings_by_round(5)


def test_flatten_round_major_interleaves_groups():
    """Round 1 of every group comes before any round 2 match."""
    outcomes = generate_group_fixtures([make_group(4, 1), make_group(4, 2)])
    ordered = flatten_round_major(outcomes)

    assert [m.round for m in ordered] == [1, 1, 1, 1, 2, 2, 2, 2, 3, 3, 3, 3]
    assert [m.group_id for m in ordered[:4]] == ["group-1", "group-1", "group-2", "group-2"]


def test_flatten_round_major_skips_unscheduled_groups():
    outcomes = generate_group_fixtures([make_group(3, 1), make_group(5, 2), make_group(3, 3)])
    ordered = flatten_round_major(outcomes)
    assert len(ordered) == 6
    assert {m.group_id for m in ordered} == {"group-1", "group-3"}


def test_mixed_sizes_by_round():
    outcomes = generate_group_fixtures([make_group(4, 1), make_group(3, 2)])
    rounds = matches_by_round(outcomes)
    assert list(rounds) == [1, 2, 3]
    assert [len(v) for v in rounds.values()] == [3, 3, 3]
