from dataclasses import dataclass

from django.db import models
from django.conf import settings
from django.utils.translation import gettext_lazy as _

import uuid


class RegistrationStatus(models.TextChoices):
    PENDING = "pending", _("Pending")
    CONFIRMED = "confirmed", _("Confirmed")
    CANCELLED = "cancelled", _("Cancelled")


# pending and confirmed registrations hold a seat; cancelled ones don't
ACTIVE_STATUSES = (RegistrationStatus.PENDING, RegistrationStatus.CONFIRMED)


class RegistrationQuerySet(models.QuerySet):

    def active(self):
        return self.filter(status__in=ACTIVE_STATUSES)


class FestRegistration(models.Model):
    '''
    A user's registration to a festival. At most one per (user, festival); it
    is deleted, not cancelled, when the user unregisters from the festival.
    '''
    KIND = "fest"
    TICKET_PREFIX = "FEST"

    id = models.UUIDField(verbose_name=_("fest registration id"), default=uuid.uuid4, editable=False, primary_key=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="fest_registrations",
        verbose_name=_("user")
    )
    festival = models.ForeignKey(
        "festivals.Festival",
        on_delete=models.CASCADE,
        related_name="registrations",
        verbose_name=_("festival")
    )
    status = models.CharField(max_length=10, choices=RegistrationStatus.choices, default=RegistrationStatus.CONFIRMED, verbose_name=_("status"))
    ticket = models.CharField(max_length=64, unique=True, verbose_name=_("ticket code"))
    qr_code = models.TextField(blank=True, verbose_name=_("ticket QR code"), help_text=_("PNG data URL of the ticket code"))
    registered_at = models.DateTimeField(auto_now_add=True, verbose_name=_("registered at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    objects = RegistrationQuerySet.as_manager()

    class Meta:
        verbose_name = _("fest registration")
        verbose_name_plural = _("fest registrations")
        ordering = ["-registered_at"]
        constraints = [
            models.UniqueConstraint(fields=["user", "festival"], name="unique_fest_registration_per_user"),
        ]

    def __str__(self):
        return f"{self.ticket} - {self.user} @ {self.festival}"

    @property
    def reference(self):
        return f"{self.KIND}:{self.pk}"

    @property
    def starts_at(self):
        return self.festival.start_date


@dataclass(frozen=True)
class SoloRegistrant:
    user: object


@dataclass(frozen=True)
class TeamRegistrant:
    team: object
    member: object
    role: str


class EventRegistration(models.Model):
    '''
    A seat in one event, held either by a single user (solo) or by one member
    of a team (team). The ``user`` column always names the ticket holder so a
    single partial unique index keeps one active registration per (user, event)
    whichever path created it.
    '''
    KIND = "event"
    SOLO_TICKET_PREFIX = "EVENT"
    TEAM_TICKET_PREFIX = "TEAM"

    class RegistrationType(models.TextChoices):
        SOLO = "solo", _("Solo")
        TEAM = "team", _("Team")

    class TeamRole(models.TextChoices):
        LEADER = "leader", _("Leader")
        MEMBER = "member", _("Member")

    id = models.UUIDField(verbose_name=_("event registration id"), default=uuid.uuid4, editable=False, primary_key=True)
    event = models.ForeignKey(
        "festivals.Event",
        on_delete=models.CASCADE,
        related_name="registrations",
        verbose_name=_("event")
    )
    fest_registration = models.ForeignKey(
        FestRegistration,
        on_delete=models.RESTRICT,
        related_name="event_registrations",
        verbose_name=_("authorising fest registration")
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="event_registrations",
        verbose_name=_("ticket holder")
    )
    registration_type = models.CharField(max_length=4, choices=RegistrationType.choices, default=RegistrationType.SOLO, verbose_name=_("registration type"))
    team = models.ForeignKey(
        "registrations.Team",
        on_delete=models.CASCADE,
        related_name="registrations",
        blank=True,
        null=True,
        verbose_name=_("team")
    )
    team_role = models.CharField(max_length=6, choices=TeamRole.choices, blank=True, null=True, verbose_name=_("team role"))

    status = models.CharField(max_length=10, choices=RegistrationStatus.choices, default=RegistrationStatus.CONFIRMED, verbose_name=_("status"))
    ticket = models.CharField(max_length=64, unique=True, verbose_name=_("ticket code"))
    qr_code = models.TextField(blank=True, verbose_name=_("ticket QR code"), help_text=_("PNG data URL of the ticket code"))
    payment_method = models.CharField(max_length=20, default="card", verbose_name=_("payment method"))
    registered_at = models.DateTimeField(auto_now_add=True, verbose_name=_("registered at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    objects = RegistrationQuerySet.as_manager()

    class Meta:
        verbose_name = _("event registration")
        verbose_name_plural = _("event registrations")
        ordering = ["-registered_at"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(registration_type="solo", team__isnull=True, team_role__isnull=True) |
                    models.Q(registration_type="team", team__isnull=False, team_role__isnull=False)
                ),
                name="event_registration_registrant_shape",
            ),
            models.UniqueConstraint(
                fields=["user", "event"],
                condition=models.Q(status__in=["pending", "confirmed"]),
                name="unique_active_event_registration",
            ),
        ]

    def __str__(self):
        return f"{self.ticket} - {self.user} @ {self.event}"

    @property
    def reference(self):
        return f"{self.KIND}:{self.pk}"

    @property
    def starts_at(self):
        return self.event.start_date

    @property
    def is_active(self):
        return self.status in ACTIVE_STATUSES

    @property
    def registrant(self):
        '''
        Who holds this seat: SoloRegistrant(user) or TeamRegistrant(team, member, role)
        '''
        if self.registration_type == self.RegistrationType.TEAM:
            return TeamRegistrant(team=self.team, member=self.user, role=self.team_role)
        return SoloRegistrant(user=self.user)
