"""
Scheduling engine errors.

Raised errors carry a stable ``code`` so routes can surface them as inline
validation messages. Conditions that only skip part of the work (a group of an
unsupported size, a match with incomplete team data) are never raised; they are
reported through the warning codes below.
"""

from typing import Optional

# Warning codes (reported, never raised)
UNSUPPORTED_GROUP_SIZE = "UnsupportedGroupSize"
INCOMPLETE_MATCH_DATA = "IncompleteMatchData"


class SchedulingError(Exception):
    """Base exception for scheduling engine failures"""

    code = "SchedulingError"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_dict(self):
        return {"code": self.code, "message": self.message}


class InvalidCourtSpecification(SchedulingError):
    """No courts are available while there are matches to schedule"""

    code = "InvalidCourtSpecification"


# The scheduler boundary name for the same condition
NoCourtsAvailable = InvalidCourtSpecification


class InvalidTeamCount(SchedulingError):
    """The roster cannot be split into groups of at least 3 teams"""

    code = "InvalidTeamCount"


class TournamentError(Exception):
    """Base exception for tournament workflow errors"""

    pass


class TournamentNotFound(TournamentError):
    pass


class TournamentAlreadyStarted(TournamentError):
    """Groups and matches are immutable once the tournament has started"""

    pass


class GroupsMismatch(TournamentError):
    """Confirmed groups do not match the tournament's complete teams"""

    pass
