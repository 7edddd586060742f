"""
Builders shared by the app test suites.
"""
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.utils import timezone

from apps.festivals.models import Festival, Event, FestivalUserRole

PERSONAL_INFO = {
    "phone": "9876543210",
    "date_of_birth": "2001-04-12",
    "gender": "Female",
    "city": "Pune",
    "state": "Maharashtra",
    "institute_name": "College of Engineering Pune",
}


def make_user(email, role="participant", **extra):
    extra.setdefault("first_name", email.split("@")[0].title())
    return get_user_model().objects.create_user(email=email, password="s3cret-pass!", role=role, **extra)


def make_festival(created_by=None, starts_in=timedelta(days=10), **extra):
    start = timezone.now() + starts_in
    defaults = {
        "name": "Techfest",
        "festival_type": Festival.FestivalType.TECHNICAL,
        "state": "Maharashtra",
        "city": "Pune",
        "venue": "Main Campus",
        "start_date": start,
        "end_date": start + timedelta(days=2),
        "created_by": created_by,
    }
    defaults.update(extra)
    return Festival.objects.create(**defaults)


def make_event(festival, published=True, starts_in=timedelta(days=10), **extra):
    start = timezone.now() + starts_in
    defaults = {
        "festival": festival,
        "name": "Code Sprint",
        "event_type": Event.EventType.COMPETITION,
        "visibility": Event.Visibility.PUBLIC,
        "mode": Event.Mode.OFFLINE,
        "location": "Block A",
        "venue": "Lab 3",
        "start_date": start,
        "end_date": start + timedelta(hours=6),
        "status": Event.EventStatus.PUBLISHED if published else Event.EventStatus.DRAFT,
    }
    defaults.update(extra)
    return Event.objects.create(**defaults)


def make_team_event(festival, team_size=3, **extra):
    extra.setdefault("name", "Robo Wars")
    return make_event(festival, is_team_event=True, team_size=team_size, **extra)


def grant_festival_role(user, festival, role, **extra):
    return FestivalUserRole.objects.create(user=user, festival=festival, role=role, **extra)
