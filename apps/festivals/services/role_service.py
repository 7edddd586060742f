"""
Festival role management: assign, remove and list per-festival roles.
"""
import logging

from django.contrib.auth import get_user_model
from django.db import transaction, IntegrityError
from django.utils import timezone

from apps.festivals.models import Festival, FestivalUserRole
from core.exceptions import ForbiddenError, ValidationFailed, ConflictError
from core.festival_permissions import AuthorizationContext
from core.lookups import get_or_not_found

logger = logging.getLogger(__name__)


def _get_festival(festival_id):
    return get_or_not_found(Festival, "Festival not found", pk=festival_id)


def _require_festival_manager(actor, festival):
    context = AuthorizationContext.for_festival(actor, festival)
    if not context.is_administrator:
        logger.warning(f"{actor.email} tried to manage roles of festival {festival.pk} without permission")
        raise ForbiddenError("Only festival admins and heads can manage festival roles")
    return context


class FestivalRoleService:
    """Assigns and revokes per-festival roles"""

    def assign_role(self, actor, festival_id, user_id, role, expires_at=None):
        """
        Give ``user_id`` ``role`` on the festival, replacing any previous role.

        Returns:
            FestivalUserRole: the upserted assignment
        """
        festival = _get_festival(festival_id)
        _require_festival_manager(actor, festival)

        if role not in FestivalUserRole.FestivalRole.values:
            raise ValidationFailed(f"Invalid festival role: {role}")
        if expires_at is not None and expires_at <= timezone.now():
            raise ValidationFailed("Role expiry must be in the future")

        user = get_or_not_found(get_user_model(), "User not found", pk=user_id)

        try:
            with transaction.atomic():
                assignment, created = FestivalUserRole.objects.update_or_create(
                    user=user,
                    festival=festival,
                    defaults={
                        "role": role,
                        "assigned_by": actor,
                        "is_active": True,
                        "assigned_at": timezone.now(),
                        "expires_at": expires_at,
                    },
                )
        except IntegrityError:
            raise ConflictError("The role assignment changed concurrently, please retry")

        logger.info(
            f"{'Assigned' if created else 'Updated'} festival role {role} for {user.email} "
            f"on {festival.name} by {actor.email}"
        )
        return assignment

    def remove_role(self, actor, festival_id, user_id):
        festival = _get_festival(festival_id)
        _require_festival_manager(actor, festival)

        assignment = get_or_not_found(
            FestivalUserRole.objects.filter(festival=festival),
            "User has no role in this festival",
            user_id=user_id,
        )
        assignment.is_active = False
        assignment.save(update_fields=["is_active"])
        logger.info(f"Festival role of user {user_id} on {festival.name} deactivated by {actor.email}")

    def list_roles(self, actor, festival_id):
        festival = _get_festival(festival_id)
        _require_festival_manager(actor, festival)
        return (
            FestivalUserRole.objects.effective()
            .filter(festival=festival)
            .select_related("user", "assigned_by")
            .order_by("role", "assigned_at")
        )

    def my_role(self, user, festival_id):
        """
        Returns:
            dict: role name and capability flags of ``user`` in the festival
        """
        festival = _get_festival(festival_id)
        context = AuthorizationContext.for_festival(user, festival)
        return {
            "festival_id": festival.pk,
            "role": context.effective_role,
            "festival_role": context.festival_role,
            "global_role": context.global_role,
            "permissions": context.permissions(),
        }
