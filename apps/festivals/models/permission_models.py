from django.db import models
from django.conf import settings
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
import uuid


class FestivalUserRoleQuerySet(models.QuerySet):

    def effective(self, at=None):
        '''
        Active assignments that have not expired yet
        '''
        at = at or timezone.now()
        return self.filter(is_active=True).filter(
            models.Q(expires_at__isnull=True) | models.Q(expires_at__gt=at)
        )


class FestivalUserRole(models.Model):
    """
    Per-festival role assignment.

    A user holds at most one row per festival; assigning a new role updates
    (and reactivates) the existing row instead of adding another one.
    Removing a role only deactivates it so the assignment history is kept.
    """

    class FestivalRole(models.TextChoices):
        ADMIN = "admin", _("Admin")
        FESTIVAL_HEAD = "festival_head", _("Festival Head")
        EVENT_MANAGER = "event_manager", _("Event Manager")
        EVENT_COORDINATOR = "event_coordinator", _("Event Coordinator")
        EVENT_VOLUNTEER = "event_volunteer", _("Event Volunteer")

    id = models.UUIDField(verbose_name=_("role assignment id"), default=uuid.uuid4, editable=False, primary_key=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="festival_roles",
        verbose_name=_("user")
    )
    festival = models.ForeignKey(
        "festivals.Festival",
        on_delete=models.CASCADE,
        related_name="user_roles",
        verbose_name=_("festival")
    )
    role = models.CharField(_("festival role"), max_length=20, choices=FestivalRole.choices)
    assigned_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_festival_roles",
        verbose_name=_("assigned by")
    )
    is_active = models.BooleanField(_("active"), default=True)
    assigned_at = models.DateTimeField(_("assigned at"), default=timezone.now)
    expires_at = models.DateTimeField(_("expires at"), blank=True, null=True)

    objects = FestivalUserRoleQuerySet.as_manager()

    class Meta:
        verbose_name = _("festival user role")
        verbose_name_plural = _("festival user roles")
        ordering = ["festival", "role"]
        constraints = [
            models.UniqueConstraint(fields=["user", "festival"], name="unique_festival_role_per_user"),
        ]

    def __str__(self):
        return f"{self.user} - {self.get_role_display()} @ {self.festival}"

    @property
    def is_effective(self):
        return self.is_active and (self.expires_at is None or self.expires_at > timezone.now())
