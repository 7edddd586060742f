"""
Registration Service
Moves users between unregistered, fest-registered and event-registered states.

Invariants kept here:
- one FestRegistration per (user, festival), backed by a unique constraint
- one active EventRegistration per (user, event), backed by a partial unique index
- active solo registrations never exceed the event capacity (checked under a
  row lock on the event)
- unregistering from a festival removes every dependent registration and team
  membership in one transaction
"""
import logging
import math
from dataclasses import dataclass

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.festivals.models import Festival, Event
from apps.registrations.models import (
    FestRegistration, EventRegistration, RegistrationStatus, Team, TeamMembership,
)
from apps.registrations.services.atomic import translate_store_errors, validate_personal_info, parse_uuid
from apps.registrations.services.ticketing import issue_ticket
from core.exceptions import ValidationFailed, ConflictError, ForbiddenError, NotFoundError
from core.festival_permissions import AuthorizationContext
from core.lookups import get_or_not_found

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class UnregisterSummary:
    festival_id: object
    festival_name: str
    deleted_fest_registration: bool
    deleted_event_registrations: int
    updated_teams: int
    deleted_teams: int


def is_in_live_team(user, event):
    '''
    True if the user belongs to an active or full team of the event
    '''
    return TeamMembership.objects.filter(
        user=user,
        team__event=event,
        team__status__in=[Team.TeamStatus.ACTIVE, Team.TeamStatus.FULL],
    ).exists()


def days_until(start, now=None):
    now = now or timezone.now()
    return math.ceil((start - now).total_seconds() / SECONDS_PER_DAY)


class RegistrationService:
    """Fest and solo event registration, cancellation and unregistration"""

    def register_for_fest(self, user, festival_id, personal_info):
        """
        Register ``user`` for a festival and copy their personal info onto the profile.

        Returns:
            FestRegistration: confirmed registration with ticket and QR

        Raises:
            ValidationFailed: incomplete personal info or registration closed
            NotFoundError: festival missing
            ConflictError: already registered
        """
        info = validate_personal_info(personal_info)
        festival = get_or_not_found(Festival, "Festival not found", pk=festival_id)

        if not festival.is_registration_open:
            raise ValidationFailed("Registration is closed for this festival")

        if FestRegistration.objects.filter(user=user, festival=festival).exists():
            logger.warning(f"Duplicate fest registration attempt by {user.email} for {festival.name}")
            raise ConflictError("You are already registered for this festival")

        ticket, qr_code = issue_ticket(FestRegistration.TICKET_PREFIX)

        with translate_store_errors("register_for_fest", conflict="You are already registered for this festival"), transaction.atomic():
            user.apply_personal_info(info)
            registration = FestRegistration.objects.create(
                user=user,
                festival=festival,
                status=RegistrationStatus.CONFIRMED,
                ticket=ticket,
                qr_code=qr_code,
            )

        logger.info(f"🎟️ Fest registration {registration.ticket} created for {user.email} at {festival.name}")
        return registration

    def register_for_event(self, user, event_id, personal_info, payment_method=None):
        """
        Solo registration for a published, non-team event.

        The capacity check and the insert run in one transaction holding a
        lock on the event row, so concurrent registrations cannot overfill it.

        Raises:
            NotFoundError: event missing
            ValidationFailed: not published, team event, missing fest registration, bad input
            ConflictError: event full, already registered, already in a team
        """
        info = validate_personal_info(personal_info)
        event = get_or_not_found(Event.objects.select_related("festival"), "Event not found", pk=event_id)

        if not event.is_published:
            raise ValidationFailed("Event is not open for registration")
        if event.is_team_event:
            raise ValidationFailed("This is a team event, create or join a team instead")
        if is_in_live_team(user, event):
            raise ConflictError("You are already part of a team for this event")

        ticket, qr_code = issue_ticket(EventRegistration.SOLO_TICKET_PREFIX)

        with translate_store_errors("register_for_event", conflict="You are already registered for this event"), transaction.atomic():
            locked_event = Event.objects.select_for_update().get(pk=event.pk)

            if locked_event.capacity is not None:
                taken = EventRegistration.objects.active().filter(event=locked_event).count()
                if taken >= locked_event.capacity:
                    logger.warning(f"Event {event.name} is full ({taken}/{locked_event.capacity})")
                    raise ConflictError("Event is full")

            fest_registration = self._authorising_fest_registration(user, event.festival)

            if EventRegistration.objects.active().filter(user=user, event=locked_event).exists():
                raise ConflictError("You are already registered for this event")

            user.apply_personal_info(info)
            registration = EventRegistration.objects.create(
                event=locked_event,
                fest_registration=fest_registration,
                user=user,
                registration_type=EventRegistration.RegistrationType.SOLO,
                status=RegistrationStatus.CONFIRMED,
                ticket=ticket,
                qr_code=qr_code,
                payment_method=payment_method or "card",
            )

        logger.info(f"🎟️ Solo registration {registration.ticket} created for {user.email} at {event.name}")
        return registration

    def _authorising_fest_registration(self, user, festival):
        registration = FestRegistration.objects.filter(user=user, festival=festival).first()
        if registration is not None:
            return registration

        if settings.FESTHUB_REQUIRE_FEST_REGISTRATION:
            raise ValidationFailed("Register for the fest first")

        ticket, qr_code = issue_ticket(FestRegistration.TICKET_PREFIX)
        registration = FestRegistration.objects.create(
            user=user,
            festival=festival,
            status=RegistrationStatus.CONFIRMED,
            ticket=ticket,
            qr_code=qr_code,
        )
        logger.info(f"Fest registration {registration.ticket} created implicitly for {user.email}")
        return registration

    def resolve_registration(self, reference):
        """
        Find a registration from ``fest:<id>``, ``event:<id>`` or a bare id.

        A bare id is looked up in fest registrations first, then event registrations.
        """
        reference = str(reference)
        kind, separator, raw_id = reference.partition(":")
        if not separator:
            kind, raw_id = None, reference

        registration_id = parse_uuid(raw_id)
        if registration_id is None:
            raise NotFoundError("Registration not found")

        fest_lookup = FestRegistration.objects.select_related("festival", "user")
        event_lookup = EventRegistration.objects.select_related("event__festival", "user", "team")

        if kind == FestRegistration.KIND:
            return get_or_not_found(fest_lookup, "Registration not found", pk=registration_id)
        if kind == EventRegistration.KIND:
            return get_or_not_found(event_lookup, "Registration not found", pk=registration_id)
        if kind is not None:
            raise ValidationFailed(f"Unknown registration kind: {kind}")

        registration = fest_lookup.filter(pk=registration_id).first() or event_lookup.filter(pk=registration_id).first()
        if registration is None:
            raise NotFoundError("Registration not found")
        return registration

    def cancel_registration(self, actor, reference):
        """
        Delete a single fest or event registration. No cascading: a fest
        registration that still backs active event registrations is refused.
        Its cancelled event registrations are history only and go with it.

        Raises:
            NotFoundError: unknown reference
            ForbiddenError: actor is neither the owner nor an administrator
            ValidationFailed: inside the cancellation cutoff, or a team ticket
            ConflictError: fest registration still has active event registrations
        """
        registration = self.resolve_registration(reference)
        is_fest = isinstance(registration, FestRegistration)
        festival = registration.festival if is_fest else registration.event.festival

        context = AuthorizationContext.for_festival(actor, festival)
        if registration.user_id != actor.pk and not context.is_administrator:
            raise ForbiddenError("You can only cancel your own registrations")

        starts_at = registration.starts_at
        if starts_at is not None and days_until(starts_at) <= settings.FESTHUB_CANCELLATION_CUTOFF_DAYS:
            cutoff = settings.FESTHUB_CANCELLATION_CUTOFF_DAYS
            raise ValidationFailed(
                f"Registrations cannot be cancelled within {cutoff} day{'s' if cutoff != 1 else ''} of the start"
            )

        if not is_fest and registration.registration_type == EventRegistration.RegistrationType.TEAM:
            raise ValidationFailed("Team tickets are released by leaving or disbanding the team")

        with translate_store_errors("cancel_registration"), transaction.atomic():
            if is_fest:
                if registration.event_registrations.active().exists():
                    raise ConflictError(
                        "This fest registration still has active event registrations, unregister from the festival instead"
                    )
                registration.event_registrations.all().delete()
            registration.delete()

        logger.info(f"Registration {registration.ticket} cancelled by {actor.email}")
        return registration

    def unregister_for_fest(self, user, festival_id):
        """
        Remove the user from a festival completely, in one transaction:

        1. delete every event registration the user holds under the festival
        2. delete the fest registration
        3. leave every team of the festival's events; empty teams are deleted,
           a departing leader hands over to the longest-standing member

        Returns:
            UnregisterSummary
        """
        festival = get_or_not_found(Festival, "Festival not found", pk=festival_id)

        with translate_store_errors("unregister_for_fest"), transaction.atomic():
            fest_registration = get_or_not_found(
                FestRegistration.objects.select_for_update().filter(festival=festival),
                "You are not registered for this festival",
                user=user,
            )
            teams = list(
                Team.objects.select_for_update().filter(
                    pk__in=TeamMembership.objects.filter(user=user, team__event__festival=festival).values("team_id")
                )
            )

            _, deleted = EventRegistration.objects.filter(user=user, event__festival=festival).delete()
            deleted_event_registrations = deleted.get(EventRegistration._meta.label, 0)

            fest_registration.delete()

            updated_teams = deleted_teams = 0
            for team in teams:
                if drop_member(team, user):
                    updated_teams += 1
                else:
                    deleted_teams += 1

        summary = UnregisterSummary(
            festival_id=festival.pk,
            festival_name=festival.name,
            deleted_fest_registration=True,
            deleted_event_registrations=deleted_event_registrations,
            updated_teams=updated_teams,
            deleted_teams=deleted_teams,
        )
        logger.info(f"{user.email} unregistered from {festival.name}: {summary}")
        return summary

    def unregister_for_event(self, user, event_id):
        """
        Cancel the user's active registration for one event.

        For a team ticket the user also leaves the team. A leader can only do
        this when alone in the team, which disbands it.

        Returns:
            dict: the cancelled registration and whether a team was changed
        """
        event = get_or_not_found(Event, "Event not found", pk=event_id)

        with translate_store_errors("unregister_for_event"), transaction.atomic():
            registration = (
                EventRegistration.objects.select_for_update()
                .active()
                .filter(user=user, event=event)
                .first()
            )
            if registration is None:
                raise NotFoundError("You are not registered for this event")

            team_updated = False
            if registration.registration_type == EventRegistration.RegistrationType.TEAM:
                team = Team.objects.select_for_update().get(pk=registration.team_id)
                if team.leader_id == user.pk:
                    if team.current_size > 1:
                        raise ValidationFailed("Transfer leadership or disband the team before unregistering")
                    team.status = Team.TeamStatus.DISBANDED
                    team.save(update_fields=["status", "updated_at"])
                else:
                    TeamMembership.objects.filter(team=team, user=user).delete()
                    team.sync_status()
                team_updated = True

            registration.status = RegistrationStatus.CANCELLED
            registration.save(update_fields=["status", "updated_at"])

        logger.info(f"{user.email} unregistered from event {event.name} ({registration.ticket})")
        return {"registration": registration, "team_updated": team_updated}


def drop_member(team, user):
    """
    Remove ``user`` from a locked team during a festival cascade.

    Returns:
        bool: True if the team was kept, False if it became empty and was deleted
    """
    TeamMembership.objects.filter(team=team, user=user).delete()

    remaining = team.memberships.select_related("user").order_by("joined_at")
    successor = remaining.first()
    if successor is None:
        team.delete()
        return False

    if team.leader_id == user.pk:
        team.leader = successor.user
        team.save(update_fields=["leader", "updated_at"])
        EventRegistration.objects.active().filter(team=team, user=successor.user).update(
            team_role=EventRegistration.TeamRole.LEADER
        )
    team.sync_status()
    return True
