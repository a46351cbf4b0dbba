"""
Scheduling preview endpoints - court parsing and duration estimates.

Count-only: nothing here reads or writes matches.
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from smash.config import settings
from smash.services.errors import SchedulingError
from smash.services.scheduling_summary import (
    calculate_round_duration,
    get_scheduling_summary,
    validate_courts,
)
from smash.utils.courts import format_courts_list, parse_courts

router = APIRouter()


class ParsedCourtsResponse(BaseModel):
    courts: List[str]
    courts_list: str
    court_count: int


class SchedulingSummaryResponse(BaseModel):
    time_slots_needed: int
    total_duration_minutes: int
    total_duration_formatted: str
    matches_per_slot: int
    simultaneous: bool
    round_duration_minutes: int


class CourtValidationResponse(BaseModel):
    valid: bool
    message: str
    simultaneous: Optional[bool] = None
    time_slots_needed: Optional[int] = None
    duration: Optional[str] = None


def raise_scheduling_error(exc: SchedulingError):
    raise HTTPException(status_code=400, detail=exc.to_dict())


@router.get("/courts/parse", response_model=ParsedCourtsResponse)
def parse_courts_endpoint(input: str = Query("", description='Court specification, e.g. "1-4" or "1, Stadium A"')):
    """Normalize a court specification the way the scheduler will see it"""
    courts = parse_courts(input)
    return ParsedCourtsResponse(courts=courts, courts_list=format_courts_list(courts), court_count=len(courts))


@router.get("/courts/validate", response_model=CourtValidationResponse)
def validate_courts_endpoint(
    input: str = Query(""),
    team_count: int = Query(..., ge=0),
):
    """Inline validation message for the courts form"""
    return validate_courts(parse_courts(input), team_count).to_dict()


@router.get("/schedule/summary", response_model=SchedulingSummaryResponse)
def get_summary(
    total_matches: int = Query(..., ge=0),
    available_courts: int = Query(..., ge=0),
    match_duration_minutes: int = Query(settings.match_duration_minutes, ge=1),
    buffer_minutes: int = Query(settings.buffer_minutes, ge=0),
):
    """
    Preview slots and total duration for a match count on a number of courts.

    The organizer's duration is passed explicitly; the default comes from
    SMASH_MATCH_DURATION_MINUTES.
    """
    try:
        summary = get_scheduling_summary(total_matches, available_courts, match_duration_minutes, buffer_minutes)
        round_duration = calculate_round_duration(
            total_matches, available_courts, match_duration_minutes, buffer_minutes
        )
    except SchedulingError as e:
        raise_scheduling_error(e)

    return SchedulingSummaryResponse(**summary.to_dict(), round_duration_minutes=round_duration)
