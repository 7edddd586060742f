from .registration_models import (
    RegistrationStatus, ACTIVE_STATUSES, FestRegistration, EventRegistration,
    SoloRegistrant, TeamRegistrant,
)
from .team_models import Team, TeamMembership
