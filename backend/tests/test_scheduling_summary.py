"""Scheduling summary: count-only previews agree with the scheduler's timing."""
from datetime import datetime
from math import ceil

import pytest

from smash.services.errors import InvalidCourtSpecification, InvalidTeamCount
from smash.services.scheduling_summary import (
    calculate_round_duration,
    estimate_group_stage,
    format_duration,
    get_scheduling_summary,
    validate_courts,
)
from smash.utils.court_scheduler import schedule_matches
from smash.utils.schedule_types import Team, UnscheduledMatch


def test_summary_basic():
    summary = get_scheduling_summary(12, 2, 30, 15)
    assert summary.time_slots_needed == 6
    assert summary.total_duration_minutes == 255
    assert summary.total_duration_formatted == "4h 15m"
    assert summary.matches_per_slot == 2
    assert summary.simultaneous is False


def test_summary_default_duration_and_buffer():
    summary = get_scheduling_summary(6, 3)
    assert summary.time_slots_needed == 2
    assert summary.total_duration_minutes == 2 * 75 - 15


def test_summary_simultaneous_means_one_slot():
    summary = get_scheduling_summary(3, 4)
    assert summary.simultaneous is True
    assert summary.time_slots_needed == 1
    assert summary.total_duration_minutes == 60


def test_summary_zero_matches():
    summary = get_scheduling_summary(0, 2)
    assert summary.time_slots_needed == 0
    assert summary.total_duration_minutes == 0


def test_summary_zero_matches_without_courts():
    summary = get_scheduling_summary(0, 0)
    assert summary.time_slots_needed == 0
    assert summary.total_duration_minutes == 0
    assert calculate_round_duration(0, 0) == 0


def test_summary_zero_courts_raises():
    with pytest.raises(InvalidCourtSpecification):
        get_scheduling_summary(4, 0)


@pytest.mark.parametrize("match_count", [1, 2, 3, 4, 5, 7, 12, 24])
@pytest.mark.parametrize("court_count", [1, 2, 3, 5])
@pytest.mark.parametrize("duration,buffer", [(60, 15), (30, 15), (45, 0), (20, 10)])
def test_summary_and_round_duration_agree(match_count, court_count, duration, buffer):
    summary = get_scheduling_summary(match_count, court_count, duration, buffer)
    expected = ceil(match_count / court_count) * (duration + buffer) - buffer
    assert summary.total_duration_minutes == expected
    assert calculate_round_duration(match_count, court_count, duration, buffer) == expected


@pytest.mark.parametrize("match_count,court_count", [(1, 1), (6, 3), (7, 3), (12, 2)])
def test_summary_matches_scheduler_span(match_count, court_count):
    """Last scheduled match ends exactly total_duration_minutes after the start."""
    start = datetime(2025, 12, 15, 10, 0)
    team = Team(id="t", player1="x", player2="y")
    matches = [
        UnscheduledMatch(
            id=f"m{i}", group_id="g", group_name="G", round=1, sequence_in_round=i, team1=team, team2=team
        )
        for i in range(match_count)
    ]
    scheduled = schedule_matches(matches, [f"Court {i}" for i in range(court_count)], start, 30, 15)
    span = (max(m.end_time for m in scheduled) - start).total_seconds() / 60

    summary = get_scheduling_summary(match_count, court_count, 30, 15)
    assert span == summary.total_duration_minutes
    assert max(m.time_slot for m in scheduled) == summary.time_slots_needed


def test_calculate_round_duration_examples():
    assert calculate_round_duration(4, 3, 30, 15) == 75
    assert calculate_round_duration(4, 4, 30, 15) == 30


def test_format_duration():
    assert format_duration(0) == "0h 0m"
    assert format_duration(255) == "4h 15m"
    assert format_duration(60) == "1h 0m"


def test_validate_courts():
    assert validate_courts([], 8).valid is False

    result = validate_courts(["Court 1", "Court 2", "Court 3", "Court 4"], 8)
    assert result.valid is True
    assert result.simultaneous is True

    result = validate_courts(["Court 1"], 8)
    assert result.simultaneous is False
    assert result.time_slots_needed == 4
    assert result.duration == "4h 45m"
    assert result.message == "Matches will be played in 4 time slots over 4h 45m"


def test_estimate_group_stage_eight_teams_two_courts():
    estimate = estimate_group_stage(8, 2, 30, 15)
    assert estimate.group_sizes == [4, 4]
    assert estimate.total_matches == 12
    assert estimate.matches_per_round == [4, 4, 4]
    assert estimate.time_slots_per_round == [2, 2, 2]
    assert estimate.total_time_slots == 6
    assert estimate.total_duration_minutes == 255
    assert estimate.is_limited is True


def test_estimate_group_stage_mixed_sizes():
    """11 teams -> [4, 4, 3]: 5 matches per round."""
    estimate = estimate_group_stage(11, 5, 30, 15)
    assert estimate.matches_per_round == [5, 5, 5]
    assert estimate.total_matches == 15
    assert estimate.total_time_slots == 3
    assert estimate.is_limited is False


def test_estimate_group_stage_rejects_bad_roster():
    with pytest.raises(InvalidTeamCount):
        estimate_group_stage(5, 2)


def test_estimate_bracket_table_unsupported_sizes_contribute_nothing():
    """20 teams in the bracket table -> groups of 5, which play no round-robin."""
    estimate = estimate_group_stage(20, 4, strategy="BRACKET_TABLE")
    assert estimate.group_sizes == [5, 5, 5, 5]
    assert estimate.total_matches == 0
    assert estimate.total_duration_minutes == 0
