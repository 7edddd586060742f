from rest_framework import permissions

from core.festival_permissions import role_has_capability


class IsPlatformAdmin(permissions.BasePermission):
    """
    Allow access only to users whose global role is superadmin or admin.
    """

    def has_permission(self, request, view):
        return bool(
            request.user and request.user.is_authenticated
            and getattr(request.user, 'is_platform_admin', False)
        )


class IsSuperAdmin(permissions.BasePermission):
    """
    Allow access only to superadmins (user management).
    """

    def has_permission(self, request, view):
        return bool(
            request.user and request.user.is_authenticated
            and role_has_capability(request.user.role, 'can_manage_users')
        )


class CanCreateFestivals(permissions.BasePermission):
    """
    Festival creation is a global capability; festival roles never grant it.
    """

    def has_permission(self, request, view):
        return bool(
            request.user and request.user.is_authenticated
            and role_has_capability(request.user.role, 'can_create_festivals')
        )
