"""
Festival Permission Utilities

Authorization for festival-scoped operations is computed once per operation
as an ``AuthorizationContext`` and handed to the services, instead of being
looked up again at each check. A context combines:

1. The user's global role (superadmin, admin, participant, ...)
2. The user's effective role for one festival, if any (FestivalUserRole)

Capabilities come from ROLE_PERMISSIONS; the festival role adds to what the
global role already grants.
"""

from dataclasses import dataclass
from typing import Optional

from apps.festivals.models import FestivalUserRole


ROLE_PERMISSIONS = {
    'superadmin': {
        'can_create_festivals': True,
        'can_manage_festivals': True,
        'can_create_events': True,
        'can_modify_events': True,
        'can_manage_events': True,
        'can_assign_event_roles': True,
        'can_publish_results': True,
        'can_view_event_details': True,
        'can_view_participants': True,
        'can_manage_users': True,
        'can_access_all_festivals': True,
    },
    'admin': {
        'can_create_festivals': True,
        'can_manage_festivals': True,
        'can_create_events': True,
        'can_modify_events': True,
        'can_manage_events': True,
        'can_assign_event_roles': True,
        'can_publish_results': True,
        'can_view_event_details': True,
        'can_view_participants': True,
        'can_manage_users': False,
        'can_access_all_festivals': False,
    },
    'festival_head': {
        'can_create_festivals': False,
        'can_manage_festivals': True,
        'can_create_events': True,
        'can_modify_events': True,
        'can_manage_events': True,
        'can_assign_event_roles': True,
        'can_publish_results': True,
        'can_view_event_details': True,
        'can_view_participants': True,
        'can_manage_users': False,
        'can_access_all_festivals': False,
    },
    'event_manager': {
        'can_create_festivals': False,
        'can_manage_festivals': False,
        'can_create_events': True,
        'can_modify_events': True,
        'can_manage_events': True,
        'can_assign_event_roles': True,
        'can_publish_results': True,
        'can_view_event_details': True,
        'can_view_participants': True,
        'can_manage_users': False,
        'can_access_all_festivals': False,
    },
    'event_coordinator': {
        'can_create_festivals': False,
        'can_manage_festivals': False,
        'can_create_events': False,
        'can_modify_events': False,
        'can_manage_events': False,
        'can_assign_event_roles': False,
        'can_publish_results': False,
        'can_view_event_details': True,
        'can_view_participants': True,
        'can_manage_users': False,
        'can_access_all_festivals': False,
    },
    'event_volunteer': {
        'can_create_festivals': False,
        'can_manage_festivals': False,
        'can_create_events': False,
        'can_modify_events': False,
        'can_manage_events': False,
        'can_assign_event_roles': False,
        'can_publish_results': False,
        'can_view_event_details': False,
        'can_view_participants': True,
        'can_manage_users': False,
        'can_access_all_festivals': False,
    },
    'participant': {
        'can_create_festivals': False,
        'can_manage_festivals': False,
        'can_create_events': False,
        'can_modify_events': False,
        'can_manage_events': False,
        'can_assign_event_roles': False,
        'can_publish_results': False,
        'can_view_event_details': False,
        'can_view_participants': False,
        'can_manage_users': False,
        'can_access_all_festivals': False,
    },
}

# global roles that administer every festival
PLATFORM_ADMIN_ROLES = ('superadmin', 'admin')
# festival roles that administer their own festival
FESTIVAL_ADMIN_ROLES = (
    FestivalUserRole.FestivalRole.ADMIN,
    FestivalUserRole.FestivalRole.FESTIVAL_HEAD,
)


def role_has_capability(role, capability):
    """
    Check a single role against the permission matrix.

    Args:
        role: global or festival role value
        capability: key of ROLE_PERMISSIONS, e.g. 'can_create_events'

    Returns:
        bool: True if the role grants the capability
    """
    if role == 'superadmin':
        return True
    return ROLE_PERMISSIONS.get(role, {}).get(capability, False)


@dataclass(frozen=True)
class AuthorizationContext:
    user: object
    global_role: str
    festival_role: Optional[str] = None
    festival_id: Optional[object] = None

    @classmethod
    def for_festival(cls, user, festival):
        """
        Build the context of ``user`` for one festival (instance or id).
        """
        festival_id = getattr(festival, 'pk', festival)
        festival_role = None
        if festival_id is not None:
            festival_role = (
                FestivalUserRole.objects.effective()
                .filter(user=user, festival_id=festival_id)
                .values_list('role', flat=True)
                .first()
            )
        return cls(user=user, global_role=user.role, festival_role=festival_role, festival_id=festival_id)

    @classmethod
    def global_only(cls, user):
        return cls(user=user, global_role=user.role)

    @property
    def is_superadmin(self):
        return self.global_role == 'superadmin'

    @property
    def is_administrator(self):
        '''
        Platform admins, or admins/heads of this festival
        '''
        return self.global_role in PLATFORM_ADMIN_ROLES or self.festival_role in FESTIVAL_ADMIN_ROLES

    @property
    def effective_role(self):
        if self.is_superadmin:
            return 'superadmin'
        return self.festival_role or self.global_role

    def can(self, capability):
        return (
            role_has_capability(self.global_role, capability)
            or (self.festival_role is not None and role_has_capability(self.festival_role, capability))
        )

    def permissions(self):
        """
        Returns:
            dict: every capability flag for this context
        """
        flags = {capability: self.can(capability) for capability in ROLE_PERMISSIONS['participant']}
        flags['is_administrator'] = self.is_administrator
        flags['effective_role'] = self.effective_role
        return flags
