from django.db import models
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.utils.translation import gettext_lazy as _
from django.core.validators import EmailValidator, RegexValidator

import uuid

from .user_manager import FestUserManager

phone_validator = RegexValidator(
    regex=r"^\+?[0-9]{10,15}$",
    message=_("Phone number must contain 10 to 15 digits, optionally prefixed with +.")
)


class FestUser(AbstractBaseUser, PermissionsMixin):
    '''
    Main AUTH class; every participant, organiser and administrator has an account
    '''
    class GlobalRole(models.TextChoices):
        SUPERADMIN = "superadmin", _("Super Admin")
        ADMIN = "admin", _("Admin")
        PARTICIPANT = "participant", _("Participant")
        FESTIVAL_HEAD = "festival_head", _("Festival Head")
        EVENT_MANAGER = "event_manager", _("Event Manager")
        EVENT_COORDINATOR = "event_coordinator", _("Event Coordinator")
        EVENT_VOLUNTEER = "event_volunteer", _("Event Volunteer")

    class GenderType(models.TextChoices):
        MALE = "Male", _("Male")
        FEMALE = "Female", _("Female")
        OTHER = "Other", _("Other")

    # auth information
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, verbose_name=_("email address"), validators=[EmailValidator()])
    first_name = models.CharField(max_length=50, verbose_name=_("first name"))
    last_name = models.CharField(max_length=50, blank=True, verbose_name=_("last name"))
    role = models.CharField(
        max_length=20,
        choices=GlobalRole.choices,
        default=GlobalRole.PARTICIPANT,
        verbose_name=_("global role")
    )

    # personal information, copied in by the registration flows
    phone = models.CharField(max_length=16, blank=True, null=True, validators=[phone_validator], verbose_name=_("phone number"))
    date_of_birth = models.DateField(blank=True, null=True, verbose_name=_("date of birth"), help_text=_("Format: YYYY-MM-DD"))
    gender = models.CharField(max_length=6, choices=GenderType.choices, blank=True, null=True, verbose_name=_("gender"))
    city = models.CharField(max_length=100, blank=True, null=True, verbose_name=_("city"))
    state = models.CharField(max_length=100, blank=True, null=True, verbose_name=_("state"))
    institute_name = models.CharField(max_length=200, blank=True, null=True, verbose_name=_("institute name"))

    # auth checks
    is_active = models.BooleanField(default=True, verbose_name=_("active"))
    is_staff = models.BooleanField(default=False, verbose_name=_("staff status"))

    date_joined = models.DateTimeField(auto_now_add=True, verbose_name=_("date joined"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    objects = FestUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["first_name"]

    class Meta:
        verbose_name = _("fest user")
        verbose_name_plural = _("fest users")
        ordering = ["first_name", "last_name"]

    def save(self, *args, **kwargs):
        self.email = self.__class__.objects.normalize_email(self.email).lower()
        self.first_name = self.first_name.strip()
        self.last_name = (self.last_name or "").strip()
        super().save(*args, **kwargs)

    def get_full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def get_short_name(self):
        return self.first_name

    @property
    def is_superadmin(self):
        return self.role == FestUser.GlobalRole.SUPERADMIN

    @property
    def is_platform_admin(self):
        '''
        superadmins and admins can administer every festival
        '''
        return self.role in (FestUser.GlobalRole.SUPERADMIN, FestUser.GlobalRole.ADMIN)

    def apply_personal_info(self, personal_info):
        '''
        Copy validated personal details onto the profile so later flows don't ask again.
        '''
        for field in PERSONAL_INFO_FIELDS:
            if field in personal_info:
                setattr(self, field, personal_info[field])
        self.save(update_fields=[*PERSONAL_INFO_FIELDS, "updated_at"])

    def __str__(self):
        return f"{self.get_full_name()} <{self.email}>"


PERSONAL_INFO_FIELDS = ("phone", "date_of_birth", "gender", "city", "state", "institute_name")
