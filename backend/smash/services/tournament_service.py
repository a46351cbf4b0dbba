"""
Tournament Service - group preview and tournament start

Bridges stored tournaments to the scheduling engine:
- preview_groups: random partition of the complete teams; nothing is stored,
  so every call is an independent reshuffle
- start_tournament: builds the group stage for the confirmed groups and writes
  groups and matches in one transaction; a started tournament is immutable
"""

import logging
import random
from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from smash.config import settings
from smash.models import Match, Team, Tournament, TournamentGroup
from smash.models.tournament import STATUS_GROUP_STAGE, STATUS_REGISTRATION
from smash.services.errors import GroupsMismatch, TournamentAlreadyStarted, TournamentNotFound
from smash.services.group_stage_orchestrator import GroupStageBuildResult, build_group_stage
from smash.utils import schedule_types
from smash.utils.courts import parse_courts
from smash.utils.group_partition import filter_complete_teams, partition_into_groups

logger = logging.getLogger(__name__)


class GroupSelection:
    """A group as confirmed by the organizer: code, display name, and team ids"""

    def __init__(self, group_code: str, name: str, team_ids: Sequence[int]):
        self.group_code = group_code
        self.name = name
        self.team_ids = list(team_ids)


def _to_record(team: Team) -> schedule_types.Team:
    return schedule_types.Team(id=str(team.id), player1=team.player1, player2=team.player2, name=team.name)


def get_tournament_or_raise(session: Session, tournament_id: int) -> Tournament:
    tournament = session.get(Tournament, tournament_id)
    if not tournament:
        raise TournamentNotFound(f"Tournament {tournament_id} not found")
    return tournament


def load_complete_teams(session: Session, tournament_id: int) -> List[schedule_types.Team]:
    """Complete teams of a tournament in id order, as engine records"""
    teams = session.exec(select(Team).where(Team.tournament_id == tournament_id).order_by(Team.id)).all()
    return filter_complete_teams(_to_record(t) for t in teams)


def preview_groups(
    session: Session,
    tournament_id: int,
    rng: Optional[random.Random] = None,
    strategy: Optional[str] = None,
) -> List[schedule_types.Group]:
    """
    Partition the tournament's complete teams into groups without storing anything.

    Raises TournamentNotFound, TournamentAlreadyStarted, InvalidTeamCount.
    """
    tournament = get_tournament_or_raise(session, tournament_id)
    if tournament.status != STATUS_REGISTRATION:
        raise TournamentAlreadyStarted(f"Tournament {tournament_id} has already started")

    teams = load_complete_teams(session, tournament_id)
    return partition_into_groups(teams, rng=rng, strategy=strategy or settings.group_sizing)


def _resolve_groups(
    session: Session, tournament_id: int, selections: Sequence[GroupSelection]
) -> List[schedule_types.Group]:
    """
    Turn confirmed selections into engine groups.

    Every complete team must be placed in exactly one group, group codes must
    be unique, and no other team may appear. Raises GroupsMismatch otherwise.
    """
    complete = {int(t.id): t for t in load_complete_teams(session, tournament_id)}
    if not selections:
        raise GroupsMismatch("At least one group is required")

    seen = set()
    codes = set()
    groups: List[schedule_types.Group] = []

    for selection in selections:
        if selection.group_code in codes:
            raise GroupsMismatch(f"Group code {selection.group_code} is used by more than one group")
        codes.add(selection.group_code)

        teams = []
        for team_id in selection.team_ids:
            if team_id in seen:
                raise GroupsMismatch(f"Team {team_id} appears in more than one group")
            if team_id not in complete:
                raise GroupsMismatch(f"Team {team_id} is not a complete team of tournament {tournament_id}")
            seen.add(team_id)
            teams.append(complete[team_id])
        groups.append(schedule_types.Group(id=selection.group_code, name=selection.name, teams=tuple(teams)))

    missing = sorted(set(complete) - seen)
    if missing:
        raise GroupsMismatch(f"Complete teams not placed in any group: {missing}")

    return groups


def start_tournament(
    session: Session, tournament_id: int, selections: Sequence[GroupSelection]
) -> GroupStageBuildResult:
    """
    Confirm the groups and commit the scheduled group stage.

    Steps:
    1. Validate tournament exists and is still in registration
    2. Resolve confirmed groups against the stored complete teams
    3. Build the schedule (pure; fails before any write)
    4. Write groups, matches and the new status in one transaction

    Raises TournamentNotFound, TournamentAlreadyStarted, GroupsMismatch,
    InvalidCourtSpecification.
    """
    tournament = get_tournament_or_raise(session, tournament_id)
    if tournament.status != STATUS_REGISTRATION:
        raise TournamentAlreadyStarted(f"Tournament {tournament_id} has already started")

    groups = _resolve_groups(session, tournament_id, selections)
    result = build_group_stage(
        groups,
        parse_courts(tournament.courts),
        tournament.start_time,
        tournament.match_duration_minutes,
        tournament.buffer_minutes,
    )

    try:
        for group in groups:
            session.add(
                TournamentGroup(
                    tournament_id=tournament_id,
                    group_code=group.id,
                    name=group.name,
                    team_ids=[int(t.id) for t in group.teams],
                )
            )
        for match in result.matches:
            session.add(
                Match(
                    tournament_id=tournament_id,
                    match_code=match.id,
                    group_code=match.group_id,
                    group_name=match.group_name,
                    round_number=match.round,
                    sequence_in_round=match.sequence_in_round,
                    team1_id=int(match.team1.id),
                    team2_id=int(match.team2.id),
                    court=match.court,
                    start_time=match.start_time,
                    time_slot=match.time_slot,
                    duration_minutes=match.duration,
                    status=STATUS_GROUP_STAGE,
                )
            )
        tournament.status = STATUS_GROUP_STAGE
        tournament.started_at = datetime.utcnow()
        session.add(tournament)
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Failed to persist group stage for tournament %s", tournament_id)
        raise

    logger.info(
        "Tournament %s started: %d groups, %d matches", tournament_id, len(groups), len(result.matches)
    )
    return result


def list_matches(session: Session, tournament_id: int) -> List[Match]:
    """Stored matches ordered by time slot, then court assignment order"""
    get_tournament_or_raise(session, tournament_id)
    return session.exec(
        select(Match).where(Match.tournament_id == tournament_id).order_by(Match.time_slot, Match.id)
    ).all()


def list_groups(session: Session, tournament_id: int) -> List[TournamentGroup]:
    get_tournament_or_raise(session, tournament_id)
    return session.exec(
        select(TournamentGroup).where(TournamentGroup.tournament_id == tournament_id).order_by(TournamentGroup.id)
    ).all()
