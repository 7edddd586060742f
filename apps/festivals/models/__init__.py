from .festival_models import Festival, FestivalTicket, FestivalSponsor
from .event_models import Event, EventReward, EventTicket, EventSponsor, EventJudge
from .permission_models import FestivalUserRole
