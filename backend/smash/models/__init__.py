from smash.models.match import Match
from smash.models.team import Team
from smash.models.tournament import Tournament
from smash.models.tournament_group import TournamentGroup

__all__ = [
    "Tournament",
    "Team",
    "TournamentGroup",
    "Match",
]
