from django.db import models
from django.conf import settings
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from django.core.validators import MinValueValidator

import uuid

from core.exceptions import ValidationFailed


class Event(models.Model):
    '''
    A single competition/activity under a festival. Solo events are capped by
    ``capacity``; team events register whole teams of up to ``team_size`` members.
    '''
    class EventType(models.TextChoices):
        COMPETITION = "competition", _("Competition")
        WORKSHOP = "workshop", _("Workshop")
        TALK = "talk", _("Talk")
        PERFORMANCE = "performance", _("Performance")
        HACKATHON = "hackathon", _("Hackathon")
        OTHER = "other", _("Other")

    class Visibility(models.TextChoices):
        PUBLIC = "public", _("Public")
        PRIVATE = "private", _("Private")

    class Mode(models.TextChoices):
        ONLINE = "online", _("Online")
        OFFLINE = "offline", _("Offline")
        HYBRID = "hybrid", _("Hybrid")

    class EventStatus(models.TextChoices):
        DRAFT = "draft", _("Draft")
        PUBLISHED = "published", _("Published")
        ARCHIVED = "archived", _("Archived")

    # an event cannot be published while any of these is empty
    PUBLISH_REQUIRED_FIELDS = ("name", "event_type", "visibility", "mode", "location", "venue")

    id = models.UUIDField(verbose_name=_("event id"), default=uuid.uuid4, editable=False, primary_key=True)
    festival = models.ForeignKey(
        "festivals.Festival",
        on_delete=models.CASCADE,
        related_name="events",
        verbose_name=_("festival")
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_events",
        verbose_name=_("created by")
    )

    name = models.CharField(max_length=200, verbose_name=_("event name"))
    event_type = models.CharField(max_length=20, choices=EventType.choices, blank=True, null=True, verbose_name=_("event type"))
    visibility = models.CharField(max_length=10, choices=Visibility.choices, blank=True, null=True, verbose_name=_("visibility"))
    mode = models.CharField(max_length=10, choices=Mode.choices, blank=True, null=True, verbose_name=_("event mode"))
    location = models.CharField(max_length=200, blank=True, null=True, verbose_name=_("location"))
    venue = models.CharField(max_length=200, blank=True, null=True, verbose_name=_("venue"))

    start_date = models.DateTimeField(blank=True, null=True, verbose_name=_("start date"))
    end_date = models.DateTimeField(blank=True, null=True, verbose_name=_("end date"))

    rulebook_link = models.URLField(blank=True, null=True, verbose_name=_("rulebook link"))
    description = models.TextField(blank=True, null=True, verbose_name=_("description"))
    image_urls = models.JSONField(default=list, blank=True, verbose_name=_("image urls"))

    # participation rules
    is_team_event = models.BooleanField(default=False, verbose_name=_("team event"))
    team_size = models.PositiveIntegerField(
        blank=True, null=True,
        validators=[MinValueValidator(1)],
        verbose_name=_("team size"),
        help_text=_("Maximum members per team, required for team events")
    )
    capacity = models.PositiveIntegerField(
        blank=True, null=True,
        verbose_name=_("capacity"),
        help_text=_("Maximum active solo registrations, leave empty for unlimited")
    )

    # lifecycle
    status = models.CharField(max_length=10, choices=EventStatus.choices, default=EventStatus.DRAFT, verbose_name=_("status"))
    published_at = models.DateTimeField(blank=True, null=True, verbose_name=_("published at"))
    published_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="published_events",
        verbose_name=_("published by")
    )
    draft_version = models.PositiveIntegerField(default=1, verbose_name=_("draft version"))
    last_saved_as_draft = models.DateTimeField(blank=True, null=True, verbose_name=_("last saved as draft"))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    class Meta:
        verbose_name = _("event")
        verbose_name_plural = _("events")
        ordering = ["start_date", "name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(is_team_event=False) | models.Q(team_size__isnull=False, team_size__gte=1),
                name="event_team_size_required_for_team_events",
            ),
            models.CheckConstraint(
                condition=models.Q(end_date__isnull=True) | models.Q(start_date__isnull=True) | models.Q(end_date__gte=models.F("start_date")),
                name="event_end_after_start",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.festival})"

    @property
    def is_published(self):
        return self.status == self.EventStatus.PUBLISHED

    def missing_publish_fields(self):
        return [field for field in self.PUBLISH_REQUIRED_FIELDS if not getattr(self, field)]

    def publish(self, user):
        """
        Move a draft event to published.

        Raises:
            ValidationFailed: event is not a draft or required fields are missing
        """
        if self.status != self.EventStatus.DRAFT:
            raise ValidationFailed(_("Only draft events can be published. Current status: %(status)s") % {
                "status": self.get_status_display()
            })

        missing = self.missing_publish_fields()
        if missing:
            raise ValidationFailed({"missing_fields": missing})

        self.status = self.EventStatus.PUBLISHED
        self.published_at = timezone.now()
        self.published_by = user
        self.save(update_fields=["status", "published_at", "published_by", "updated_at"])

    def unpublish(self):
        """
        Move a published event back to draft.
        """
        if self.status != self.EventStatus.PUBLISHED:
            raise ValidationFailed(_("Only published events can be unpublished."))

        self.status = self.EventStatus.DRAFT
        self.published_at = None
        self.published_by = None
        self.last_saved_as_draft = timezone.now()
        self.save(update_fields=["status", "published_at", "published_by", "last_saved_as_draft", "updated_at"])

    def save_as_draft(self):
        if self.status != self.EventStatus.DRAFT:
            raise ValidationFailed(_("Only draft events can be saved as a draft."))

        self.draft_version = models.F("draft_version") + 1
        self.last_saved_as_draft = timezone.now()
        self.save(update_fields=["draft_version", "last_saved_as_draft", "updated_at"])
        self.refresh_from_db(fields=["draft_version"])

    def archive(self):
        if self.status != self.EventStatus.DRAFT:
            raise ValidationFailed(_("Only draft events can be archived."))

        self.status = self.EventStatus.ARCHIVED
        self.save(update_fields=["status", "updated_at"])


class EventReward(models.Model):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="rewards", verbose_name=_("event"))
    rank = models.PositiveIntegerField(verbose_name=_("rank"))
    cash = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True, verbose_name=_("cash prize"))
    coupon = models.CharField(max_length=200, blank=True, null=True, verbose_name=_("coupon"))
    goodies = models.CharField(max_length=200, blank=True, null=True, verbose_name=_("goodies"))
    description = models.TextField(blank=True, null=True, verbose_name=_("description"))

    class Meta:
        verbose_name = _("event reward")
        verbose_name_plural = _("event rewards")
        ordering = ["rank"]

    def __str__(self):
        return f"{self.event.name} #{self.rank}"


class EventTicket(models.Model):
    class FeeType(models.TextChoices):
        FREE = "free", _("Free")
        PAID = "paid", _("Paid")

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="tickets", verbose_name=_("event"))
    name = models.CharField(max_length=100, verbose_name=_("ticket name"))
    fee_type = models.CharField(max_length=4, choices=FeeType.choices, default=FeeType.FREE, verbose_name=_("fee type"))
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)], verbose_name=_("price"))
    available_from = models.DateTimeField(blank=True, null=True, verbose_name=_("available from"))
    available_till = models.DateTimeField(blank=True, null=True, verbose_name=_("available till"))
    max_quantity = models.PositiveIntegerField(blank=True, null=True, verbose_name=_("maximum quantity"))
    current_quantity = models.PositiveIntegerField(default=0, verbose_name=_("current quantity"))
    description = models.TextField(blank=True, null=True, verbose_name=_("description"))

    class Meta:
        verbose_name = _("event ticket")
        verbose_name_plural = _("event tickets")

    def __str__(self):
        return f"{self.event.name}: {self.name}"


class EventSponsor(models.Model):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="sponsors", verbose_name=_("event"))
    name = models.CharField(max_length=200, verbose_name=_("sponsor name"))
    logo = models.URLField(blank=True, null=True, verbose_name=_("logo url"))
    website = models.URLField(blank=True, null=True, verbose_name=_("website"))

    class Meta:
        verbose_name = _("event sponsor")
        verbose_name_plural = _("event sponsors")

    def __str__(self):
        return self.name


class EventJudge(models.Model):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="judges", verbose_name=_("event"))
    name = models.CharField(max_length=200, verbose_name=_("judge name"))
    photo = models.URLField(blank=True, null=True, verbose_name=_("photo url"))
    bio = models.TextField(blank=True, null=True, verbose_name=_("bio"))
    mobile = models.CharField(max_length=20, blank=True, null=True, verbose_name=_("mobile"))
    email = models.EmailField(blank=True, null=True, verbose_name=_("email"))

    class Meta:
        verbose_name = _("event judge")
        verbose_name_plural = _("event judges")

    def __str__(self):
        return self.name
