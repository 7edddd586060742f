from .user_models import FestUser, PERSONAL_INFO_FIELDS
from .user_manager import FestUserManager
