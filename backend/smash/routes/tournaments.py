"""
Tournament API Routes
Tournament and team registration, group preview, and tournament start.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlmodel import Session, select

from smash.config import settings
from smash.database import get_session
from smash.models.team import Team
from smash.models.tournament import STATUS_GROUP_STAGE, STATUS_REGISTRATION, Tournament
from smash.routes.scheduling import raise_scheduling_error
from smash.services.errors import (
    GroupsMismatch,
    SchedulingError,
    TournamentAlreadyStarted,
    TournamentNotFound,
)
from smash.services.scheduling_summary import estimate_group_stage
from smash.services.tournament_service import (
    GroupSelection,
    get_tournament_or_raise,
    list_groups,
    list_matches,
    load_complete_teams,
    preview_groups,
    start_tournament,
)
from smash.utils.courts import format_courts_list, parse_courts

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class TournamentCreate(BaseModel):
    name: str
    location: Optional[str] = None
    courts: Optional[str] = None
    start_time: datetime
    match_duration_minutes: int = Field(default_factory=lambda: settings.match_duration_minutes, ge=1)
    buffer_minutes: int = Field(default_factory=lambda: settings.buffer_minutes, ge=0)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("name is required")
        return v.strip()


class TournamentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    location: Optional[str] = None
    courts: Optional[str] = None
    start_time: datetime
    match_duration_minutes: int
    buffer_minutes: int
    status: str
    started_at: Optional[datetime] = None
    created_at: datetime


class TeamCreateRequest(BaseModel):
    name: Optional[str] = None
    player1: Optional[str] = None
    player2: Optional[str] = None


class TeamResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tournament_id: int
    name: Optional[str] = None
    player1: Optional[str] = None
    player2: Optional[str] = None
    is_complete: bool


class GroupPayload(BaseModel):
    group_code: str
    name: str
    team_ids: List[int]


class StartTournamentRequest(BaseModel):
    groups: List[GroupPayload]


class GroupResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    group_code: str
    name: str
    team_ids: List[int]


class MatchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    match_code: str
    group_code: str
    group_name: str
    round_number: int
    sequence_in_round: int
    team1_id: int
    team2_id: int
    court: str
    start_time: datetime
    time_slot: int
    duration_minutes: int
    status: str


# ============================================================================
# Helpers
# ============================================================================


def _get_tournament(session: Session, tournament_id: int) -> Tournament:
    try:
        return get_tournament_or_raise(session, tournament_id)
    except TournamentNotFound:
        raise HTTPException(status_code=404, detail="Tournament not found")


# ============================================================================
# Tournament & Team Endpoints
# ============================================================================


@router.post("/tournaments", response_model=TournamentResponse, status_code=201)
def create_tournament(tournament_data: TournamentCreate, session: Session = Depends(get_session)):
    """Create a tournament in registration status"""
    tournament = Tournament(**tournament_data.model_dump())
    session.add(tournament)
    session.commit()
    session.refresh(tournament)
    return tournament


@router.get("/tournaments/{tournament_id}", response_model=TournamentResponse)
def get_tournament(tournament_id: int, session: Session = Depends(get_session)):
    """Get a tournament by ID"""
    return _get_tournament(session, tournament_id)


@router.get("/tournaments/{tournament_id}/teams", response_model=List[TeamResponse])
def get_teams(tournament_id: int, session: Session = Depends(get_session)):
    """All registered teams (complete or not) in id order"""
    _get_tournament(session, tournament_id)
    return session.exec(select(Team).where(Team.tournament_id == tournament_id).order_by(Team.id)).all()


@router.post("/tournaments/{tournament_id}/teams", response_model=TeamResponse, status_code=201)
def create_team(tournament_id: int, request: TeamCreateRequest, session: Session = Depends(get_session)):
    """Register a team; player2 may be filled in later"""
    tournament = _get_tournament(session, tournament_id)
    if tournament.status != STATUS_REGISTRATION:
        raise HTTPException(status_code=409, detail="Tournament has already started")

    team = Team(tournament_id=tournament_id, name=request.name, player1=request.player1, player2=request.player2)
    session.add(team)
    session.commit()
    session.refresh(team)
    return team


# ============================================================================
# Group Stage Endpoints
# ============================================================================


@router.get("/tournaments/{tournament_id}/schedule-preview")
def get_schedule_preview(tournament_id: int, session: Session = Depends(get_session)) -> Dict[str, Any]:
    """
    Count-only preview for the start-tournament sheet: groups, matches,
    slots per round and total duration for the registered complete teams.
    """
    tournament = _get_tournament(session, tournament_id)
    courts = parse_courts(tournament.courts)
    team_count = len(load_complete_teams(session, tournament_id))

    try:
        estimate = estimate_group_stage(
            team_count,
            len(courts),
            tournament.match_duration_minutes,
            tournament.buffer_minutes,
            settings.group_sizing,
        )
    except SchedulingError as e:
        raise_scheduling_error(e)

    payload = estimate.to_dict()
    payload["courts"] = courts
    payload["courts_list"] = format_courts_list(courts)
    payload["match_duration_minutes"] = tournament.match_duration_minutes
    return payload


@router.post("/tournaments/{tournament_id}/groups/preview")
def post_groups_preview(tournament_id: int, session: Session = Depends(get_session)) -> Dict[str, Any]:
    """
    Shuffle the complete teams into groups. Nothing is stored; call again to
    reshuffle, then confirm a preview with POST /start.
    """
    try:
        groups = preview_groups(session, tournament_id)
    except TournamentNotFound:
        raise HTTPException(status_code=404, detail="Tournament not found")
    except TournamentAlreadyStarted as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SchedulingError as e:
        raise_scheduling_error(e)

    return {
        "tournament_id": tournament_id,
        "groups": [
            {
                "group_code": g.id,
                "name": g.name,
                "team_ids": [int(t.id) for t in g.teams],
                "teams": [t.to_dict() for t in g.teams],
            }
            for g in groups
        ],
    }


@router.post("/tournaments/{tournament_id}/start")
def post_start_tournament(
    tournament_id: int, request: StartTournamentRequest, session: Session = Depends(get_session)
) -> Dict[str, Any]:
    """
    Confirm groups, schedule the group stage and store it.

    Returns the build result including skipped groups and warnings.
    """
    selections = [GroupSelection(g.group_code, g.name, g.team_ids) for g in request.groups]
    try:
        result = start_tournament(session, tournament_id, selections)
    except TournamentNotFound:
        raise HTTPException(status_code=404, detail="Tournament not found")
    except TournamentAlreadyStarted as e:
        raise HTTPException(status_code=409, detail=str(e))
    except GroupsMismatch as e:
        raise HTTPException(status_code=400, detail={"code": "GroupsMismatch", "message": str(e)})
    except SchedulingError as e:
        raise_scheduling_error(e)

    payload = result.to_dict()
    payload["tournament_id"] = tournament_id
    payload["status"] = STATUS_GROUP_STAGE
    return payload


@router.get("/tournaments/{tournament_id}/groups", response_model=List[GroupResponse])
def get_groups(tournament_id: int, session: Session = Depends(get_session)):
    try:
        return list_groups(session, tournament_id)
    except TournamentNotFound:
        raise HTTPException(status_code=404, detail="Tournament not found")


@router.get("/tournaments/{tournament_id}/matches", response_model=List[MatchResponse])
def get_matches(tournament_id: int, session: Session = Depends(get_session)):
    """Stored group-stage matches ordered by time slot"""
    try:
        return list_matches(session, tournament_id)
    except TournamentNotFound:
        raise HTTPException(status_code=404, detail="Tournament not found")
