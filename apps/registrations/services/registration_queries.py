"""
Read-only registration queries: a user's own registrations, counts and stats
for organiser dashboards, and candidate listings for administrators.
"""
from datetime import timedelta

from django.db.models import Count, Q
from django.utils import timezone

from apps.engagement.services.recently_viewed_service import RecentlyViewedService
from apps.engagement.services.wishlist_service import WishlistService
from apps.festivals.models import Festival, Event
from apps.registrations.models import (
    FestRegistration, EventRegistration, RegistrationStatus, ACTIVE_STATUSES, Team, TeamMembership,
)
from core.exceptions import ForbiddenError, ValidationFailed
from core.festival_permissions import AuthorizationContext
from core.lookups import get_or_not_found

TOP_INSTITUTES = 10
RECENT_WINDOW_DAYS = 30
RECOMMENDED_LIMIT = 5


def _status_counts(queryset):
    counts = queryset.aggregate(
        total_active=Count("id", filter=Q(status__in=ACTIVE_STATUSES)),
        confirmed=Count("id", filter=Q(status=RegistrationStatus.CONFIRMED)),
        pending=Count("id", filter=Q(status=RegistrationStatus.PENDING)),
        cancelled=Count("id", filter=Q(status=RegistrationStatus.CANCELLED)),
    )
    return counts


def my_registrations(user):
    return {
        "fest_registrations": FestRegistration.objects.filter(user=user).select_related("festival"),
        "event_registrations": EventRegistration.objects.filter(user=user).select_related("event__festival", "team"),
    }


def fest_registration_status(user, festival_id):
    festival = get_or_not_found(Festival, "Festival not found", pk=festival_id)
    registration = FestRegistration.objects.filter(user=user, festival=festival).first()
    return {
        "festival_id": festival.pk,
        "is_registered": registration is not None,
        "registration": registration,
    }


def registered_festivals(user):
    return Festival.objects.filter(
        registrations__user=user,
        registrations__status__in=ACTIVE_STATUSES,
    ).distinct().order_by("start_date")


def recommended_festivals(user, limit=RECOMMENDED_LIMIT):
    """
    Upcoming public festivals that are open for registration and that the
    user has not registered for. Festivals of the types the user already
    attends come first, the rest is filled up by start date.
    """
    candidates = Festival.objects.filter(
        visibility=Festival.Visibility.PUBLIC,
        is_registration_open=True,
        start_date__gte=timezone.now(),
    ).exclude(registrations__user=user).order_by("start_date")

    preferred_types = set(registered_festivals(user).values_list("festival_type", flat=True))
    recommended = list(candidates.filter(festival_type__in=preferred_types)[:limit])
    if len(recommended) < limit:
        recommended += list(
            candidates.exclude(pk__in=[festival.pk for festival in recommended])[:limit - len(recommended)]
        )
    return recommended


def my_fests(user, recommended_limit=RECOMMENDED_LIMIT):
    """
    Personal dashboard: the festivals the user is registered for grouped by
    timing, activity counts and recommendations.

    Returns:
        dict: ``upcoming``, ``ongoing`` and ``past`` festival lists, a ``stats``
        dict and the ``recommended`` festivals
    """
    now = timezone.now()
    festivals = list(registered_festivals(user))
    upcoming = [festival for festival in festivals if festival.start_date > now]
    past = [festival for festival in festivals if festival.end_date < now]
    ongoing = [festival for festival in festivals if festival.start_date <= now <= festival.end_date]

    stats = {
        "total_registered": len(festivals),
        "upcoming_count": len(upcoming),
        "ongoing_count": len(ongoing),
        "past_count": len(past),
        "event_registrations": EventRegistration.objects.filter(user=user).active().count(),
        "teams": TeamMembership.objects.filter(user=user).exclude(team__status=Team.TeamStatus.DISBANDED).count(),
        "wishlist_count": WishlistService().count(user),
        "festival_types": sorted({festival.festival_type for festival in festivals}),
        "recently_viewed": RecentlyViewedService().stats(user),
    }

    return {
        "upcoming": upcoming,
        "ongoing": ongoing,
        "past": past,
        "stats": stats,
        "recommended": recommended_festivals(user, limit=recommended_limit),
    }


def registration_counts_for_festival(festival):
    return _status_counts(FestRegistration.objects.filter(festival=festival))


def registration_counts_for_event(event):
    queryset = EventRegistration.objects.filter(event=event)
    counts = _status_counts(queryset)
    active = queryset.filter(status__in=ACTIVE_STATUSES)
    counts["solo"] = active.filter(registration_type=EventRegistration.RegistrationType.SOLO).count()
    counts["team"] = active.filter(registration_type=EventRegistration.RegistrationType.TEAM).count()
    counts["capacity"] = event.capacity
    counts["teams"] = dict(
        Team.objects.filter(event=event).values_list("status").annotate(count=Count("id")).order_by()
    )
    return counts


def festival_registration_stats(festival):
    """
    Dashboard numbers for one festival.

    Returns:
        dict: status counts, registrations in the last 30 days, gender
        distribution and the top 10 institutes by registrations
    """
    registrations = FestRegistration.objects.filter(festival=festival)
    since = timezone.now() - timedelta(days=RECENT_WINDOW_DAYS)

    gender_distribution = {
        (row["user__gender"] or "Unspecified"): row["count"]
        for row in registrations.values("user__gender").annotate(count=Count("id")).order_by()
    }
    top_institutes = [
        {"institute_name": row["user__institute_name"], "count": row["count"]}
        for row in registrations.exclude(user__institute_name__isnull=True)
        .exclude(user__institute_name="")
        .values("user__institute_name")
        .annotate(count=Count("id"))
        .order_by("-count", "user__institute_name")[:TOP_INSTITUTES]
    ]

    return {
        **_status_counts(registrations),
        "recent_registrations": registrations.filter(registered_at__gte=since).count(),
        "gender_distribution": gender_distribution,
        "top_institutes": top_institutes,
        "event_count": festival.events.count(),
    }


def _require_administrator(user, festival):
    context = AuthorizationContext.for_festival(user, festival)
    if not context.is_administrator:
        raise ForbiddenError("Only festival administrators can view candidates")
    return context


def _search(queryset, search):
    if not search:
        return queryset
    return queryset.filter(
        Q(user__first_name__icontains=search) |
        Q(user__last_name__icontains=search) |
        Q(user__email__icontains=search) |
        Q(user__institute_name__icontains=search) |
        Q(ticket__icontains=search)
    )


def _status_filter(queryset, status):
    if not status:
        return queryset
    if status not in RegistrationStatus.values:
        raise ValidationFailed({"status": [f"Invalid status: {status}"]})
    return queryset.filter(status=status)


def festival_candidates(user, festival_id, status=None, search=None):
    festival = get_or_not_found(Festival, "Festival not found", pk=festival_id)
    _require_administrator(user, festival)

    queryset = FestRegistration.objects.filter(festival=festival).select_related("user")
    queryset = _status_filter(queryset, status)
    return _search(queryset, search).order_by("-registered_at")


def event_candidates(user, event_id, status=None, registration_type=None, search=None):
    event = get_or_not_found(Event.objects.select_related("festival"), "Event not found", pk=event_id)
    _require_administrator(user, event.festival)

    queryset = EventRegistration.objects.filter(event=event).select_related("user", "team")
    queryset = _status_filter(queryset, status)
    if registration_type:
        if registration_type not in EventRegistration.RegistrationType.values:
            raise ValidationFailed({"registration_type": [f"Invalid registration type: {registration_type}"]})
        queryset = queryset.filter(registration_type=registration_type)
    return _search(queryset, search).order_by("-registered_at")
