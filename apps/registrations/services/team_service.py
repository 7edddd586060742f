"""
Team Service
Team creation, join-by-code, membership changes, leadership transfer and disband.

Every mutation locks the team row and changes membership, team status and
the members' event registrations in the same transaction, so:
- the leader is always a member
- a team never holds more than max_size members
- status is ``full`` exactly when members == max_size (until disbanded)
"""
import logging
from dataclasses import dataclass

from django.conf import settings
from django.db import transaction
from django.db.models import Count, F

from apps.festivals.models import Event
from apps.registrations.models import (
    EventRegistration, FestRegistration, RegistrationStatus, Team, TeamMembership,
)
from apps.registrations.services.atomic import translate_store_errors, parse_uuid
from apps.registrations.services.registration_service import is_in_live_team
from apps.registrations.services.ticketing import issue_ticket, new_team_code
from core.exceptions import ValidationFailed, ConflictError, ForbiddenError, InternalError
from core.lookups import get_or_not_found

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DisbandSummary:
    team: Team
    cancelled_registrations: int


class TeamService:
    """Team lifecycle and membership"""

    def _allocate_team_code(self):
        for _attempt in range(settings.FESTHUB_TEAM_CODE_ATTEMPTS):
            code = new_team_code()
            if not Team.objects.filter(team_code=code).exists():
                return code
        logger.error("Could not allocate a free team code")
        raise InternalError("Could not allocate a team code, please retry")

    def _lock_team(self, team_id):
        return get_or_not_found(
            Team.objects.select_for_update(of=("self",)).select_related("event__festival"),
            "Team not found",
            pk=team_id,
        )

    def _require_leader(self, team, actor, action):
        if team.leader_id != actor.pk:
            logger.warning(f"{actor.email} tried to {action} team {team.team_code} without being its leader")
            raise ForbiddenError(f"Only the team leader can {action}")

    def _require_not_disbanded(self, team):
        if team.is_disbanded:
            raise ValidationFailed("Team has been disbanded")

    def _check_can_take_team_seat(self, user, event):
        '''
        Shared preconditions of create and join.

        Returns:
            FestRegistration: the user's registration for the event's festival
        '''
        fest_registration = FestRegistration.objects.filter(user=user, festival_id=event.festival_id).first()
        if fest_registration is None:
            raise ForbiddenError("Register for the fest first")
        if EventRegistration.objects.active().filter(user=user, event=event).exists():
            raise ConflictError("You are already registered for this event")
        return fest_registration

    def create_team(self, user, event_id, team_name, description=None):
        """
        Create a team led by ``user`` and register the leader for the event.

        Returns:
            Team: new team, status active (or full when max_size is 1)

        Raises:
            NotFoundError: event missing
            ValidationFailed: not a team event, empty name
            ForbiddenError: no fest registration
            ConflictError: already in a team or registered for the event
        """
        team_name = (team_name or "").strip()
        if not team_name:
            raise ValidationFailed({"team_name": ["Team name is required"]})

        event = get_or_not_found(Event.objects.select_related("festival"), "Event not found", pk=event_id)
        if not event.is_team_event:
            raise ValidationFailed("This event does not allow team registration")

        if is_in_live_team(user, event):
            raise ConflictError("You are already part of a team for this event")
        fest_registration = self._check_can_take_team_seat(user, event)

        ticket, qr_code = issue_ticket(EventRegistration.TEAM_TICKET_PREFIX)

        with translate_store_errors("create_team", conflict="You are already registered for this event"), transaction.atomic():
            team = Team.objects.create(
                team_name=team_name,
                event=event,
                leader=user,
                max_size=event.team_size or settings.FESTHUB_DEFAULT_TEAM_SIZE,
                team_code=self._allocate_team_code(),
                status=Team.TeamStatus.ACTIVE,
                description=description,
            )
            TeamMembership.objects.create(team=team, user=user)
            team.sync_status()
            EventRegistration.objects.create(
                event=event,
                fest_registration=fest_registration,
                user=user,
                registration_type=EventRegistration.RegistrationType.TEAM,
                team=team,
                team_role=EventRegistration.TeamRole.LEADER,
                status=RegistrationStatus.CONFIRMED,
                ticket=ticket,
                qr_code=qr_code,
            )

        logger.info(f"👥 Team {team.team_name} [{team.team_code}] created by {user.email} for {event.name}")
        return team

    def join_team(self, user, team_code):
        """
        Join a team by its (case-insensitive) code.

        Raises:
            NotFoundError: unknown code
            ValidationFailed: team disbanded
            ConflictError: team full, already a member, in another team, already registered
            ForbiddenError: no fest registration
        """
        code = (team_code or "").strip().upper()
        if not code:
            raise ValidationFailed({"team_code": ["Team code is required"]})

        ticket, qr_code = issue_ticket(EventRegistration.TEAM_TICKET_PREFIX)

        with translate_store_errors("join_team", conflict="You are already registered for this event"), transaction.atomic():
            team = get_or_not_found(
                Team.objects.select_for_update(of=("self",)).select_related("event__festival"),
                "Team not found",
                team_code=code,
            )
            event = team.event

            self._require_not_disbanded(team)
            if team.status == Team.TeamStatus.FULL or team.current_size >= team.max_size:
                raise ConflictError("Team is full")
            if team.is_member(user):
                raise ConflictError("You are already a member of this team")
            if is_in_live_team(user, event):
                raise ConflictError("You are already part of another team for this event")
            fest_registration = self._check_can_take_team_seat(user, event)

            TeamMembership.objects.create(team=team, user=user)
            team.sync_status()
            EventRegistration.objects.create(
                event=event,
                fest_registration=fest_registration,
                user=user,
                registration_type=EventRegistration.RegistrationType.TEAM,
                team=team,
                team_role=EventRegistration.TeamRole.MEMBER,
                status=RegistrationStatus.CONFIRMED,
                ticket=ticket,
                qr_code=qr_code,
            )

        logger.info(f"👥 {user.email} joined team {team.team_code} ({team.current_size}/{team.max_size})")
        return team

    def _release_member(self, team, member):
        TeamMembership.objects.filter(team=team, user=member).delete()
        cancelled = EventRegistration.objects.active().filter(team=team, user=member).update(
            status=RegistrationStatus.CANCELLED
        )
        team.sync_status()
        return cancelled

    def leave_team(self, user, team_id):
        """
        Leave a team as a regular member. The leader has to transfer
        leadership or disband instead.
        """
        with translate_store_errors("leave_team"), transaction.atomic():
            team = self._lock_team(team_id)
            self._require_not_disbanded(team)
            if team.leader_id == user.pk:
                raise ValidationFailed("Team leader cannot leave, transfer leadership or disband the team first")
            if not team.is_member(user):
                raise ValidationFailed("You are not a member of this team")

            self._release_member(team, user)

        logger.info(f"{user.email} left team {team.team_code}")
        return team

    def remove_member(self, actor, team_id, member_id):
        with translate_store_errors("remove_member"), transaction.atomic():
            team = self._lock_team(team_id)
            self._require_leader(team, actor, "remove members")
            self._require_not_disbanded(team)

            member_uuid = parse_uuid(member_id)
            if member_uuid is not None and member_uuid == team.leader_id:
                raise ValidationFailed("The team leader cannot be removed")
            membership = (
                team.memberships.select_related("user").filter(user_id=member_uuid).first()
                if member_uuid is not None else None
            )
            if membership is None:
                raise ValidationFailed("User is not a member of this team")

            self._release_member(team, membership.user)

        logger.info(f"{actor.email} removed {membership.user.email} from team {team.team_code}")
        return team

    def transfer_leadership(self, actor, team_id, new_leader_id):
        """
        Hand the team over to another member. The previous leader stays a member
        and the two team tickets swap their roles.
        """
        with translate_store_errors("transfer_leadership"), transaction.atomic():
            team = self._lock_team(team_id)
            self._require_leader(team, actor, "transfer leadership")
            self._require_not_disbanded(team)

            new_leader_uuid = parse_uuid(new_leader_id)
            if new_leader_uuid == actor.pk:
                raise ValidationFailed("You are already the team leader")
            membership = (
                team.memberships.select_related("user").filter(user_id=new_leader_uuid).first()
                if new_leader_uuid is not None else None
            )
            if membership is None:
                raise ValidationFailed("New leader must be a member of the team")

            team.leader = membership.user
            team.save(update_fields=["leader", "updated_at"])

            active_tickets = EventRegistration.objects.active().filter(team=team)
            active_tickets.filter(user=actor).update(team_role=EventRegistration.TeamRole.MEMBER)
            active_tickets.filter(user=membership.user).update(team_role=EventRegistration.TeamRole.LEADER)

        logger.info(f"Leadership of team {team.team_code} moved from {actor.email} to {membership.user.email}")
        return team

    def disband_team(self, actor, team_id):
        """
        Disband the team and cancel every active ticket that points at it.

        Returns:
            DisbandSummary
        """
        with translate_store_errors("disband_team"), transaction.atomic():
            team = self._lock_team(team_id)
            self._require_leader(team, actor, "disband the team")
            self._require_not_disbanded(team)

            cancelled = EventRegistration.objects.active().filter(team=team).update(
                status=RegistrationStatus.CANCELLED
            )
            team.status = Team.TeamStatus.DISBANDED
            team.save(update_fields=["status", "updated_at"])

        logger.info(f"Team {team.team_code} disbanded by {actor.email}, {cancelled} registrations cancelled")
        return DisbandSummary(team=team, cancelled_registrations=cancelled)

    # read side

    def team_detail(self, team_id):
        return get_or_not_found(
            Team.objects.select_related("event__festival", "leader").prefetch_related("memberships__user"),
            "Team not found",
            pk=team_id,
        )

    def my_teams(self, user):
        return (
            Team.objects.filter(pk__in=TeamMembership.objects.filter(user=user).values("team_id"))
            .exclude(status=Team.TeamStatus.DISBANDED)
            .select_related("event__festival", "leader")
            .prefetch_related("memberships__user")
        )

    def available_teams(self, user, event_id):
        """
        Active teams of a team event that still have free slots and that
        ``user`` is not part of.
        """
        event = get_or_not_found(Event, "Event not found", pk=event_id)
        if not event.is_team_event:
            raise ValidationFailed("This event does not allow team registration")

        return (
            Team.objects.filter(event=event, status=Team.TeamStatus.ACTIVE)
            .exclude(pk__in=TeamMembership.objects.filter(user=user).values("team_id"))
            .annotate(member_count=Count("memberships"))
            .filter(member_count__lt=F("max_size"))
            .select_related("event__festival", "leader")
            .prefetch_related("memberships__user")
            .order_by("created_at")
        )
