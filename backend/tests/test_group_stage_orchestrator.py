"""
Tests for the group-stage build

Tests:
- 8 teams scenario: 2 groups, 12 matches, 6 slots, 255 minutes on 2 courts
- Rounds are synchronized across groups and never share a slot
- Skipped groups and dropped matches are reported, other groups still scheduled
- Missing courts fail before anything is built
- Rebuilding is repeatable
"""

import random
from datetime import datetime, timedelta

import pytest

from smash.services.errors import InvalidCourtSpecification
from smash.services.group_stage_orchestrator import build_group_stage
from smash.services.scheduling_summary import get_scheduling_summary
from smash.utils.court_scheduler import find_schedule_conflicts
from smash.utils.group_partition import partition_into_groups
from smash.utils.schedule_types import Group, Team

START = datetime(2025, 12, 15, 10, 0)
TWO_COURTS = ["Court 1", "Court 2"]


def make_teams(count):
    return [Team(id=f"T{i}", player1=f"T{i}-p1", player2=f"T{i}-p2") for i in range(1, count + 1)]


def test_eight_team_scenario():
    groups = partition_into_groups(make_teams(8), rng=random.Random(42))
    assert [g.size for g in groups] == [4, 4]

    result = build_group_stage(groups, TWO_COURTS, START, match_duration_minutes=30, buffer_minutes=15)

    assert len(result.matches) == 12
    assert result.rounds_count == 3
    assert result.time_slots_used == 6
    assert result.total_duration_minutes == 6 * 45 - 15 == 255
    assert result.end_time == START + timedelta(minutes=255)
    assert result.skipped_groups == []
    assert result.warnings == []

    # Same numbers as the count-only preview of the flattened list
    summary = get_scheduling_summary(12, 2, 30, 15)
    assert summary.time_slots_needed == result.time_slots_used
    assert summary.total_duration_minutes == result.total_duration_minutes

    # Each group: 3 rounds of 2 matches
    for group in groups:
        group_matches = [m for m in result.matches if m.group_id == group.id]
        assert len(group_matches) == 6
        assert sorted(m.round for m in group_matches) == [1, 1, 2, 2, 3, 3]


def test_rounds_are_round_major_and_do_not_share_slots():
    groups = partition_into_groups(make_teams(8), rng=random.Random(3))
    result = build_group_stage(groups, TWO_COURTS, START, 30, 15)

    assert [m.round for m in result.matches] == [1] * 4 + [2] * 4 + [3] * 4
    # Round 1 of both groups occupies slots 1-2, round 2 slots 3-4, round 3 slots 5-6
    assert [m.time_slot for m in result.matches] == [1, 1, 2, 2, 3, 3, 4, 4, 5, 5, 6, 6]
    assert [m.group_id for m in result.matches[:4]] == ["group-1", "group-1", "group-2", "group-2"]
    assert result.matches[4].start_time == START + timedelta(minutes=90)


def test_schedule_has_no_conflicts():
    groups = partition_into_groups(make_teams(20), rng=random.Random(9))
    result = build_group_stage(groups, ["Court 1", "Court 2", "Court 3"], START, 30, 15)
    assert len(result.matches) == 30
    assert find_schedule_conflicts(result.matches) == []


def test_one_slot_per_round_when_courts_suffice():
    groups = partition_into_groups(make_teams(8), rng=random.Random(1))
    result = build_group_stage(groups, ["Court 1", "Court 2", "Court 3", "Court 4"], START, 30, 15)
    assert result.time_slots_used == 3
    assert result.total_duration_minutes == 3 * 45 - 15


def test_unsupported_group_is_skipped_and_others_scheduled():
    teams = make_teams(9)
    groups = [
        Group(id="group-1", name="Group A", teams=tuple(teams[:4])),
        Group(id="group-2", name="Group B", teams=tuple(teams[4:9])),
    ]
    result = build_group_stage(groups, TWO_COURTS, START, 30, 15)

    assert len(result.matches) == 6
    assert {m.group_id for m in result.matches} == {"group-1"}
    assert [s.group_id for s in result.skipped_groups] == ["group-2"]
    assert result.skipped_groups[0].reason == "UnsupportedGroupSize"
    payload = result.to_dict()
    assert payload["skipped_groups"][0]["group_id"] == "group-2"
    assert payload["warnings"][0]["code"] == "UnsupportedGroupSize"


def test_incomplete_team_matches_reported():
    teams = make_teams(3) + [Team(id="T4", player1="solo")]
    groups = [Group(id="group-1", name="Group A", teams=tuple(teams))]
    result = build_group_stage(groups, TWO_COURTS, START, 30, 15)

    assert len(result.matches) == 3
    assert all("T4" not in (m.team1.id, m.team2.id) for m in result.matches)
    assert [w.code for w in result.warnings] == ["IncompleteMatchData"] * 3
    assert all(w.group_id == "group-1" for w in result.warnings)


def test_no_courts_raises():
    groups = partition_into_groups(make_teams(6), rng=random.Random(0))
    with pytest.raises(InvalidCourtSpecification):
        build_group_stage(groups, [], START)


def test_repeated_court_raises():
    groups = partition_into_groups(make_teams(6), rng=random.Random(0))
    with pytest.raises(InvalidCourtSpecification):
        build_group_stage(groups, ["Court 1", "Court 1"], START)


def test_no_groups_builds_nothing():
    result = build_group_stage([], [], START)
    assert result.matches == []
    assert result.total_duration_minutes == 0
    assert result.end_time is None


def test_rebuild_is_repeatable():
    groups = partition_into_groups(make_teams(12), rng=random.Random(5))
    first = build_group_stage(groups, TWO_COURTS, START, 30, 15)
    second = build_group_stage(groups, TWO_COURTS, START, 30, 15)
    assert first.matches == second.matches
    assert first.to_dict() == second.to_dict()
