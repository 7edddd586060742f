from django.db import models
from django.conf import settings
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from django.core.validators import MinValueValidator

import uuid


class Team(models.Model):
    '''
    A team entered into one team event. Membership lives in TeamMembership;
    registrations pointing at the team are back references only.

    Status follows membership: ``full`` exactly when the team has max_size
    members, ``active`` otherwise, until it is explicitly ``disbanded``.
    '''
    class TeamStatus(models.TextChoices):
        ACTIVE = "active", _("Active")
        FULL = "full", _("Full")
        DISBANDED = "disbanded", _("Disbanded")

    id = models.UUIDField(verbose_name=_("team id"), default=uuid.uuid4, editable=False, primary_key=True)
    team_name = models.CharField(max_length=100, verbose_name=_("team name"))
    event = models.ForeignKey(
        "festivals.Event",
        on_delete=models.CASCADE,
        related_name="teams",
        verbose_name=_("event")
    )
    leader = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="led_teams",
        verbose_name=_("team leader")
    )
    members = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through="TeamMembership",
        related_name="teams",
        verbose_name=_("members")
    )
    max_size = models.PositiveIntegerField(validators=[MinValueValidator(1)], verbose_name=_("maximum size"))
    team_code = models.CharField(max_length=16, unique=True, verbose_name=_("team code"))
    status = models.CharField(max_length=10, choices=TeamStatus.choices, default=TeamStatus.ACTIVE, verbose_name=_("status"))
    description = models.TextField(blank=True, null=True, verbose_name=_("description"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    class Meta:
        verbose_name = _("team")
        verbose_name_plural = _("teams")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(condition=models.Q(max_size__gte=1), name="team_max_size_positive"),
        ]

    def __str__(self):
        return f"{self.team_name} [{self.team_code}]"

    @property
    def festival(self):
        return self.event.festival

    @property
    def current_size(self):
        return self.memberships.count()

    @property
    def available_slots(self):
        return max(self.max_size - self.current_size, 0)

    @property
    def is_disbanded(self):
        return self.status == self.TeamStatus.DISBANDED

    def is_member(self, user):
        return self.memberships.filter(user=user).exists()

    def sync_status(self):
        '''
        Recompute active/full from the member count. Disbanded is terminal.

        Returns:
            bool: True if the status changed
        '''
        if self.is_disbanded:
            return False
        status = self.TeamStatus.FULL if self.current_size >= self.max_size else self.TeamStatus.ACTIVE
        if status == self.status:
            return False
        self.status = status
        self.save(update_fields=["status", "updated_at"])
        return True


class TeamMembership(models.Model):
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="memberships", verbose_name=_("team"))
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="team_memberships",
        verbose_name=_("user")
    )
    joined_at = models.DateTimeField(default=timezone.now, verbose_name=_("joined at"))

    class Meta:
        verbose_name = _("team membership")
        verbose_name_plural = _("team memberships")
        ordering = ["joined_at"]
        constraints = [
            models.UniqueConstraint(fields=["team", "user"], name="unique_team_member"),
        ]

    def __str__(self):
        return f"{self.user} in {self.team}"
