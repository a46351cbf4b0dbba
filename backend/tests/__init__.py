# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test database creation
from smash.models.match import Match  # noqa: F401
from smash.models.team import Team  # noqa: F401
from smash.models.tournament import Tournament  # noqa: F401
from smash.models.tournament_group import TournamentGroup  # noqa: F401
