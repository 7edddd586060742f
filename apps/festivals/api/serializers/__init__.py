from .festival_serializers import *
from .event_serializers import *
