import base64
from datetime import timedelta
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase, override_settings

from apps.registrations.models import (
    FestRegistration, EventRegistration, RegistrationStatus, Team, TeamMembership,
    SoloRegistrant, TeamRegistrant,
)
from apps.registrations.services.registration_service import RegistrationService, days_until
from apps.registrations.services.team_service import TeamService
from core.exceptions import (
    ValidationFailed, ConflictError, ForbiddenError, NotFoundError, InternalError,
)
from core.testing import PERSONAL_INFO, make_user, make_festival, make_event, make_team_event


class FestRegistrationTests(TestCase):

    def setUp(self):
        self.service = RegistrationService()
        self.user = make_user("asha@example.com")
        self.festival = make_festival()

    def test_register_issues_ticket_and_copies_personal_info(self):
        registration = self.service.register_for_fest(self.user, self.festival.pk, PERSONAL_INFO)

        self.assertEqual(registration.status, RegistrationStatus.CONFIRMED)
        self.assertTrue(registration.ticket.startswith("FEST-"))
        self.assertTrue(registration.qr_code.startswith("data:image/png;base64,"))
        png = base64.b64decode(registration.qr_code.split(",", 1)[1])
        self.assertTrue(png.startswith(b"\x89PNG"))
        self.assertEqual(registration.reference, f"fest:{registration.pk}")

        self.user.refresh_from_db()
        self.assertEqual(self.user.institute_name, PERSONAL_INFO["institute_name"])
        self.assertEqual(self.user.gender, "Female")
        self.assertEqual(str(self.user.date_of_birth), PERSONAL_INFO["date_of_birth"])

    def test_accepts_camel_case_personal_info(self):
        info = {k: v for k, v in PERSONAL_INFO.items() if k not in ("institute_name", "date_of_birth")}
        info.update({"instituteName": "VIT", "dateOfBirth": "2002-02-02"})

        self.service.register_for_fest(self.user, self.festival.pk, info)

        self.user.refresh_from_db()
        self.assertEqual(self.user.institute_name, "VIT")

    def test_second_registration_conflicts(self):
        self.service.register_for_fest(self.user, self.festival.pk, PERSONAL_INFO)

        with self.assertRaises(ConflictError):
            self.service.register_for_fest(self.user, self.festival.pk, PERSONAL_INFO)
        self.assertEqual(FestRegistration.objects.filter(user=self.user).count(), 1)

    def test_incomplete_personal_info_is_rejected(self):
        info = dict(PERSONAL_INFO, phone="12")
        info.pop("city")

        with self.assertRaises(ValidationFailed) as ctx:
            self.service.register_for_fest(self.user, self.festival.pk, info)

        self.assertIn("phone", ctx.exception.detail)
        self.assertIn("city", ctx.exception.detail)
        self.assertFalse(FestRegistration.objects.exists())

    def test_closed_festival_is_rejected(self):
        self.festival.is_registration_open = False
        self.festival.save()

        with self.assertRaises(ValidationFailed):
            self.service.register_for_fest(self.user, self.festival.pk, PERSONAL_INFO)

    def test_unknown_or_malformed_festival_is_not_found(self):
        with self.assertRaises(NotFoundError):
            self.service.register_for_fest(self.user, "5f1c1e5e-0000-4000-8000-000000000000", PERSONAL_INFO)
        with self.assertRaises(NotFoundError):
            self.service.register_for_fest(self.user, "not-a-uuid", PERSONAL_INFO)

    def test_qr_failure_writes_nothing(self):
        with mock.patch("apps.registrations.services.ticketing.qrcode.make", side_effect=OSError("disk")):
            with self.assertRaises(InternalError):
                self.service.register_for_fest(self.user, self.festival.pk, PERSONAL_INFO)

        self.assertFalse(FestRegistration.objects.exists())
        self.user.refresh_from_db()
        self.assertIsNone(self.user.institute_name)


class SoloEventRegistrationTests(TestCase):

    def setUp(self):
        self.service = RegistrationService()
        self.user = make_user("ravi@example.com")
        self.festival = make_festival()
        self.event = make_event(self.festival)

    def test_requires_fest_registration_first(self):
        with self.assertRaises(ValidationFailed) as ctx:
            self.service.register_for_event(self.user, self.event.pk, PERSONAL_INFO)

        self.assertIn("Register for the fest first", str(ctx.exception.detail))
        self.assertFalse(EventRegistration.objects.exists())

    @override_settings(FESTHUB_REQUIRE_FEST_REGISTRATION=False)
    def test_fest_registration_is_created_implicitly_when_policy_allows(self):
        registration = self.service.register_for_event(self.user, self.event.pk, PERSONAL_INFO)

        fest_registration = FestRegistration.objects.get(user=self.user, festival=self.festival)
        self.assertEqual(registration.fest_registration, fest_registration)

    def test_solo_registration(self):
        fest_registration = self.service.register_for_fest(self.user, self.festival.pk, PERSONAL_INFO)

        registration = self.service.register_for_event(
            self.user, self.event.pk, PERSONAL_INFO, payment_method="upi"
        )

        self.assertTrue(registration.ticket.startswith("EVENT-"))
        self.assertEqual(registration.registration_type, EventRegistration.RegistrationType.SOLO)
        self.assertEqual(registration.fest_registration, fest_registration)
        self.assertEqual(registration.payment_method, "upi")
        self.assertEqual(registration.registrant, SoloRegistrant(user=self.user))
        self.assertIsNone(registration.team)

    def test_duplicate_solo_registration_conflicts(self):
        self.service.register_for_fest(self.user, self.festival.pk, PERSONAL_INFO)
        self.service.register_for_event(self.user, self.event.pk, PERSONAL_INFO)

        with self.assertRaises(ConflictError):
            self.service.register_for_event(self.user, self.event.pk, PERSONAL_INFO)
        self.assertEqual(EventRegistration.objects.active().filter(user=self.user, event=self.event).count(), 1)

    def test_unpublished_event_is_rejected(self):
        draft = make_event(self.festival, published=False, name="Draft")
        self.service.register_for_fest(self.user, self.festival.pk, PERSONAL_INFO)

        with self.assertRaises(ValidationFailed):
            self.service.register_for_event(self.user, draft.pk, PERSONAL_INFO)

    def test_team_event_is_rejected(self):
        team_event = make_team_event(self.festival)
        self.service.register_for_fest(self.user, self.festival.pk, PERSONAL_INFO)

        with self.assertRaises(ValidationFailed):
            self.service.register_for_event(self.user, team_event.pk, PERSONAL_INFO)

    def test_capacity_counts_only_active_registrations(self):
        self.event.capacity = 1
        self.event.save()
        other = make_user("meera@example.com")
        for user in (self.user, other):
            self.service.register_for_fest(user, self.festival.pk, PERSONAL_INFO)

        self.service.register_for_event(self.user, self.event.pk, PERSONAL_INFO)
        with self.assertRaises(ConflictError) as ctx:
            self.service.register_for_event(other, self.event.pk, PERSONAL_INFO)
        self.assertIn("Event is full", str(ctx.exception.detail))

        self.service.unregister_for_event(self.user, self.event.pk)
        registration = self.service.register_for_event(other, self.event.pk, PERSONAL_INFO)
        self.assertTrue(registration.is_active)

    def test_can_register_again_after_unregistering(self):
        self.service.register_for_fest(self.user, self.festival.pk, PERSONAL_INFO)
        first = self.service.register_for_event(self.user, self.event.pk, PERSONAL_INFO)

        result = self.service.unregister_for_event(self.user, self.event.pk)
        self.assertEqual(result["registration"].status, RegistrationStatus.CANCELLED)
        self.assertFalse(result["team_updated"])

        second = self.service.register_for_event(self.user, self.event.pk, PERSONAL_INFO)
        self.assertNotEqual(first.ticket, second.ticket)
        self.assertEqual(EventRegistration.objects.filter(user=self.user, event=self.event).count(), 2)

    def test_unregister_without_registration_is_not_found(self):
        with self.assertRaises(NotFoundError):
            self.service.unregister_for_event(self.user, self.event.pk)


class CancelRegistrationTests(TestCase):

    def setUp(self):
        self.service = RegistrationService()
        self.user = make_user("kiran@example.com")
        self.festival = make_festival()
        self.event = make_event(self.festival)
        self.fest_registration = self.service.register_for_fest(self.user, self.festival.pk, PERSONAL_INFO)

    def test_cancel_event_registration_by_reference(self):
        registration = self.service.register_for_event(self.user, self.event.pk, PERSONAL_INFO)

        self.service.cancel_registration(self.user, registration.reference)

        self.assertFalse(EventRegistration.objects.filter(pk=registration.pk).exists())
        self.assertTrue(FestRegistration.objects.filter(pk=self.fest_registration.pk).exists())

    def test_cancel_fest_registration_by_bare_id(self):
        self.service.cancel_registration(self.user, str(self.fest_registration.pk))

        self.assertFalse(FestRegistration.objects.exists())

    def test_fest_registration_backing_event_registrations_conflicts(self):
        self.service.register_for_event(self.user, self.event.pk, PERSONAL_INFO)

        with self.assertRaises(ConflictError):
            self.service.cancel_registration(self.user, self.fest_registration.reference)
        self.assertTrue(FestRegistration.objects.filter(pk=self.fest_registration.pk).exists())

    def test_fest_registration_can_be_cancelled_after_leaving_its_events(self):
        self.service.register_for_event(self.user, self.event.pk, PERSONAL_INFO)
        self.service.unregister_for_event(self.user, self.event.pk)

        self.service.cancel_registration(self.user, self.fest_registration.reference)

        self.assertFalse(FestRegistration.objects.exists())
        self.assertFalse(EventRegistration.objects.filter(user=self.user).exists())

    def test_fest_registration_can_be_cancelled_after_leaving_a_team(self):
        teams = TeamService()
        leader = make_user("leader@example.com")
        self.service.register_for_fest(leader, self.festival.pk, PERSONAL_INFO)
        team = teams.create_team(leader, make_team_event(self.festival).pk, "Alpha")
        teams.join_team(self.user, team.team_code)
        teams.leave_team(self.user, team.pk)

        self.service.cancel_registration(self.user, self.fest_registration.reference)

        self.assertFalse(FestRegistration.objects.filter(user=self.user).exists())
        self.assertFalse(EventRegistration.objects.filter(user=self.user).exists())
        self.assertTrue(EventRegistration.objects.active().filter(user=leader, team=team).exists())

    @override_settings(FESTHUB_CANCELLATION_CUTOFF_DAYS=3)
    def test_cutoff_message_follows_the_setting(self):
        soon = make_event(self.festival, name="Soon", starts_in=timedelta(days=2))
        registration = self.service.register_for_event(self.user, soon.pk, PERSONAL_INFO)

        with self.assertRaises(ValidationFailed) as ctx:
            self.service.cancel_registration(self.user, registration.reference)
        self.assertIn("within 3 days", str(ctx.exception.detail))

    def test_within_cutoff_is_rejected(self):
        soon = make_event(self.festival, name="Soon", starts_in=timedelta(hours=12))
        registration = self.service.register_for_event(self.user, soon.pk, PERSONAL_INFO)

        with self.assertRaises(ValidationFailed):
            self.service.cancel_registration(self.user, registration.reference)
        self.assertTrue(EventRegistration.objects.filter(pk=registration.pk).exists())

    def test_other_users_cannot_cancel(self):
        stranger = make_user("stranger@example.com")

        with self.assertRaises(ForbiddenError):
            self.service.cancel_registration(stranger, self.fest_registration.reference)

    def test_platform_admin_can_cancel_for_a_user(self):
        admin = make_user("admin@example.com", role="admin")

        self.service.cancel_registration(admin, self.fest_registration.reference)

        self.assertFalse(FestRegistration.objects.exists())

    def test_team_tickets_cannot_be_cancelled_directly(self):
        team_event = make_team_event(self.festival)
        team = TeamService().create_team(self.user, team_event.pk, "Alpha")
        ticket = EventRegistration.objects.get(team=team, user=self.user)

        with self.assertRaises(ValidationFailed):
            self.service.cancel_registration(self.user, ticket.reference)

    def test_unknown_references(self):
        with self.assertRaises(NotFoundError):
            self.service.cancel_registration(self.user, "event:9b2f6f55-0000-4000-8000-000000000000")
        with self.assertRaises(NotFoundError):
            self.service.cancel_registration(self.user, "garbage")
        with self.assertRaises(ValidationFailed):
            self.service.cancel_registration(self.user, f"ticket:{self.fest_registration.pk}")

    def test_days_until_rounds_up(self):
        start = self.festival.start_date
        self.assertEqual(days_until(start, now=start - timedelta(hours=1)), 1)
        self.assertEqual(days_until(start, now=start - timedelta(days=1, hours=1)), 2)


class UnregisterForFestTests(TestCase):
    '''
    Unregistering from a festival removes every dependent record in one step.
    '''

    def setUp(self):
        self.registrations = RegistrationService()
        self.teams = TeamService()

        self.alice = make_user("alice@example.com")
        self.bob = make_user("bob@example.com")
        self.festival = make_festival()
        self.other_festival = make_festival(name="Cultfest")

        self.solo_event = make_event(self.festival)
        self.team_event = make_team_event(self.festival, team_size=3)
        self.duo_event = make_team_event(self.festival, team_size=2, name="Duo Dance")

        for user in (self.alice, self.bob):
            self.registrations.register_for_fest(user, self.festival.pk, PERSONAL_INFO)
        self.other_registration = self.registrations.register_for_fest(self.alice, self.other_festival.pk, PERSONAL_INFO)

        self.registrations.register_for_event(self.alice, self.solo_event.pk, PERSONAL_INFO)
        self.shared_team = self.teams.create_team(self.alice, self.team_event.pk, "Alpha")
        self.teams.join_team(self.bob, self.shared_team.team_code)
        self.lone_team = self.teams.create_team(self.alice, self.duo_event.pk, "Solo Act")

    def test_cascade_removes_everything_of_the_user(self):
        summary = self.registrations.unregister_for_fest(self.alice, self.festival.pk)

        self.assertTrue(summary.deleted_fest_registration)
        self.assertEqual(summary.deleted_event_registrations, 3)
        self.assertEqual(summary.updated_teams, 1)
        self.assertEqual(summary.deleted_teams, 1)

        self.assertFalse(FestRegistration.objects.filter(user=self.alice, festival=self.festival).exists())
        self.assertFalse(EventRegistration.objects.filter(user=self.alice, event__festival=self.festival).exists())
        self.assertFalse(TeamMembership.objects.filter(user=self.alice, team__event__festival=self.festival).exists())
        self.assertFalse(Team.objects.filter(pk=self.lone_team.pk).exists())

        # the other festival is untouched
        self.assertTrue(FestRegistration.objects.filter(pk=self.other_registration.pk).exists())

    def test_leadership_passes_to_the_remaining_member(self):
        self.registrations.unregister_for_fest(self.alice, self.festival.pk)

        team = Team.objects.get(pk=self.shared_team.pk)
        self.assertEqual(team.leader, self.bob)
        self.assertEqual(team.current_size, 1)
        self.assertEqual(team.status, Team.TeamStatus.ACTIVE)

        ticket = EventRegistration.objects.get(team=team, user=self.bob)
        self.assertEqual(ticket.team_role, EventRegistration.TeamRole.LEADER)
        self.assertEqual(ticket.registrant, TeamRegistrant(team=team, member=self.bob, role="leader"))

    def test_not_registered_is_not_found(self):
        stranger = make_user("stranger@example.com")

        with self.assertRaises(NotFoundError):
            self.registrations.unregister_for_fest(stranger, self.festival.pk)

    def test_store_failure_rolls_back_the_whole_cascade(self):
        before = (
            FestRegistration.objects.count(),
            EventRegistration.objects.count(),
            TeamMembership.objects.count(),
            Team.objects.count(),
        )

        with mock.patch(
            "apps.registrations.services.registration_service.drop_member",
            side_effect=DatabaseError("connection lost"),
        ):
            with self.assertRaises(InternalError):
                self.registrations.unregister_for_fest(self.alice, self.festival.pk)

        after = (
            FestRegistration.objects.count(),
            EventRegistration.objects.count(),
            TeamMembership.objects.count(),
            Team.objects.count(),
        )
        self.assertEqual(before, after)
        self.assertEqual(Team.objects.get(pk=self.shared_team.pk).leader, self.alice)
