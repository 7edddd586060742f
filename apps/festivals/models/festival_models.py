from django.db import models
from django.conf import settings
from django.utils.translation import gettext_lazy as _
from django.core.validators import MinValueValidator

import uuid


class Festival(models.Model):
    '''
    Top level event series (a college fest, a cultural week, ...) that owns events
    '''
    class FestivalType(models.TextChoices):
        CULTURAL = "cultural", _("Cultural")
        TECHNICAL = "technical", _("Technical")
        SPORTS = "sports", _("Sports")
        MANAGEMENT = "management", _("Management")
        OTHER = "other", _("Other")

    class Visibility(models.TextChoices):
        PUBLIC = "public", _("Public")
        PRIVATE = "private", _("Private")

    class Mode(models.TextChoices):
        ONLINE = "online", _("Online")
        OFFLINE = "offline", _("Offline")
        HYBRID = "hybrid", _("Hybrid")

    id = models.UUIDField(verbose_name=_("festival id"), default=uuid.uuid4, editable=False, primary_key=True)
    name = models.CharField(max_length=200, verbose_name=_("festival name"))
    festival_type = models.CharField(max_length=20, choices=FestivalType.choices, default=FestivalType.OTHER, verbose_name=_("festival type"))
    visibility = models.CharField(max_length=10, choices=Visibility.choices, default=Visibility.PUBLIC, verbose_name=_("visibility"))

    # location
    state = models.CharField(max_length=100, verbose_name=_("state"))
    city = models.CharField(max_length=100, verbose_name=_("city"))
    venue = models.CharField(max_length=200, verbose_name=_("venue"))
    college = models.CharField(max_length=200, blank=True, null=True, verbose_name=_("college"))

    start_date = models.DateTimeField(verbose_name=_("start date"))
    end_date = models.DateTimeField(verbose_name=_("end date"))
    mode = models.CharField(max_length=10, choices=Mode.choices, default=Mode.OFFLINE, verbose_name=_("festival mode"))

    about = models.TextField(blank=True, null=True, verbose_name=_("about"))
    contact = models.CharField(max_length=20, blank=True, null=True, verbose_name=_("contact number"))
    email = models.EmailField(blank=True, null=True, verbose_name=_("contact email"))

    is_registration_open = models.BooleanField(default=True, verbose_name=_("registration open"))

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_festivals",
        verbose_name=_("created by")
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    class Meta:
        verbose_name = _("festival")
        verbose_name_plural = _("festivals")
        ordering = ["-start_date"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gte=models.F("start_date")),
                name="festival_end_after_start",
            ),
        ]

    def __str__(self):
        return self.name


class FestivalTicket(models.Model):
    '''
    Ticket tier offered at festival level (owned child of the festival)
    '''
    festival = models.ForeignKey(Festival, on_delete=models.CASCADE, related_name="tickets", verbose_name=_("festival"))
    name = models.CharField(max_length=100, verbose_name=_("ticket name"))
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)], verbose_name=_("price"))
    description = models.TextField(blank=True, null=True, verbose_name=_("description"))

    class Meta:
        verbose_name = _("festival ticket")
        verbose_name_plural = _("festival tickets")

    def __str__(self):
        return f"{self.festival}: {self.name}"


class FestivalSponsor(models.Model):
    festival = models.ForeignKey(Festival, on_delete=models.CASCADE, related_name="sponsors", verbose_name=_("festival"))
    name = models.CharField(max_length=200, verbose_name=_("sponsor name"))
    logo = models.URLField(blank=True, null=True, verbose_name=_("logo url"))
    website = models.URLField(blank=True, null=True, verbose_name=_("website"))

    class Meta:
        verbose_name = _("festival sponsor")
        verbose_name_plural = _("festival sponsors")

    def __str__(self):
        return self.name
