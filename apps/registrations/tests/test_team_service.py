import re

from django.test import TestCase

from apps.registrations.models import EventRegistration, RegistrationStatus, Team, TeamMembership
from apps.registrations.services.registration_service import RegistrationService
from apps.registrations.services.team_service import TeamService
from core.exceptions import ValidationFailed, ConflictError, ForbiddenError, NotFoundError
from core.testing import PERSONAL_INFO, make_user, make_festival, make_event, make_team_event


class TeamTestCase(TestCase):

    def setUp(self):
        self.service = TeamService()
        self.registrations = RegistrationService()
        self.festival = make_festival()
        self.event = make_team_event(self.festival, team_size=3)

        self.leader = self.registered_user("lead@example.com")
        self.member = self.registered_user("mem@example.com")
        self.third = self.registered_user("third@example.com")
        self.fourth = self.registered_user("fourth@example.com")

    def registered_user(self, email):
        user = make_user(email)
        self.registrations.register_for_fest(user, self.festival.pk, PERSONAL_INFO)
        return user

    def assertTeamInvariants(self, team):
        team.refresh_from_db()
        member_ids = set(team.memberships.values_list("user_id", flat=True))
        self.assertIn(team.leader_id, member_ids)
        self.assertLessEqual(len(member_ids), team.max_size)
        if not team.is_disbanded:
            expected = Team.TeamStatus.FULL if len(member_ids) == team.max_size else Team.TeamStatus.ACTIVE
            self.assertEqual(team.status, expected)


class CreateTeamTests(TeamTestCase):

    def test_create_team_registers_the_leader(self):
        team = self.service.create_team(self.leader, self.event.pk, "  Alpha  ", description="We build robots")

        self.assertEqual(team.team_name, "Alpha")
        self.assertEqual(team.max_size, 3)
        self.assertEqual(team.status, Team.TeamStatus.ACTIVE)
        self.assertRegex(team.team_code, r"^[A-Z0-9]{8}$")
        self.assertTeamInvariants(team)

        ticket = EventRegistration.objects.get(team=team, user=self.leader)
        self.assertTrue(ticket.ticket.startswith("TEAM-"))
        self.assertEqual(ticket.team_role, EventRegistration.TeamRole.LEADER)
        self.assertEqual(ticket.registration_type, EventRegistration.RegistrationType.TEAM)
        self.assertEqual(ticket.status, RegistrationStatus.CONFIRMED)

    def test_single_seat_team_is_full_immediately(self):
        pairs = make_team_event(self.festival, team_size=1, name="Solo Coding")

        team = self.service.create_team(self.leader, pairs.pk, "One")

        self.assertEqual(team.status, Team.TeamStatus.FULL)

    def test_rejections(self):
        solo_event = make_event(self.festival, name="Solo")
        outsider = make_user("outsider@example.com")

        with self.assertRaises(ValidationFailed):
            self.service.create_team(self.leader, self.event.pk, "   ")
        with self.assertRaises(ValidationFailed):
            self.service.create_team(self.leader, solo_event.pk, "Alpha")
        with self.assertRaises(NotFoundError):
            self.service.create_team(self.leader, "0c0e7a4a-0000-4000-8000-000000000000", "Alpha")
        with self.assertRaises(ForbiddenError):
            self.service.create_team(outsider, self.event.pk, "Alpha")

        self.assertFalse(Team.objects.exists())

    def test_one_team_per_event(self):
        self.service.create_team(self.leader, self.event.pk, "Alpha")

        with self.assertRaises(ConflictError):
            self.service.create_team(self.leader, self.event.pk, "Beta")
        self.assertEqual(Team.objects.count(), 1)


class JoinTeamTests(TeamTestCase):

    def setUp(self):
        super().setUp()
        self.team = self.service.create_team(self.leader, self.event.pk, "Alpha")

    def test_join_with_lowercase_code(self):
        team = self.service.join_team(self.member, self.team.team_code.lower())

        self.assertEqual(team.pk, self.team.pk)
        self.assertTrue(team.is_member(self.member))
        ticket = EventRegistration.objects.get(team=team, user=self.member)
        self.assertEqual(ticket.team_role, EventRegistration.TeamRole.MEMBER)
        self.assertTeamInvariants(team)

    def test_team_becomes_full_and_rejects_more_members(self):
        self.service.join_team(self.member, self.team.team_code)
        team = self.service.join_team(self.third, self.team.team_code)
        self.assertEqual(team.status, Team.TeamStatus.FULL)

        with self.assertRaises(ConflictError) as ctx:
            self.service.join_team(self.fourth, self.team.team_code)

        self.assertIn("full", str(ctx.exception.detail))
        self.assertFalse(EventRegistration.objects.filter(user=self.fourth).exists())
        self.assertTeamInvariants(self.team)

    def test_cannot_join_twice_or_two_teams(self):
        self.service.join_team(self.member, self.team.team_code)
        with self.assertRaises(ConflictError):
            self.service.join_team(self.member, self.team.team_code)

        other_team = self.service.create_team(self.third, self.event.pk, "Beta")
        with self.assertRaises(ConflictError):
            self.service.join_team(self.member, other_team.team_code)

    def test_solo_registered_user_cannot_join(self):
        EventRegistration.objects.create(
            event=self.event,
            fest_registration=self.member.fest_registrations.get(),
            user=self.member,
            ticket="EVENT-legacy-seat",
        )

        with self.assertRaises(ConflictError):
            self.service.join_team(self.member, self.team.team_code)

    def test_requires_fest_registration(self):
        outsider = make_user("outsider@example.com")

        with self.assertRaises(ForbiddenError):
            self.service.join_team(outsider, self.team.team_code)

    def test_unknown_code(self):
        with self.assertRaises(NotFoundError):
            self.service.join_team(self.member, "ZZZZZZZZ")

    def test_disbanded_team_rejects_joins(self):
        self.service.disband_team(self.leader, self.team.pk)

        with self.assertRaises(ValidationFailed):
            self.service.join_team(self.member, self.team.team_code)


class TeamMembershipChangeTests(TeamTestCase):

    def setUp(self):
        super().setUp()
        self.team = self.service.create_team(self.leader, self.event.pk, "Alpha")
        self.service.join_team(self.member, self.team.team_code)
        self.service.join_team(self.third, self.team.team_code)

    def test_member_leaves(self):
        self.service.leave_team(self.member, self.team.pk)

        self.assertFalse(self.team.is_member(self.member))
        ticket = EventRegistration.objects.get(team=self.team, user=self.member)
        self.assertEqual(ticket.status, RegistrationStatus.CANCELLED)
        self.assertTeamInvariants(self.team)
        self.assertEqual(self.team.status, Team.TeamStatus.ACTIVE)

    def test_leader_cannot_leave(self):
        with self.assertRaises(ValidationFailed):
            self.service.leave_team(self.leader, self.team.pk)

    def test_non_member_cannot_leave(self):
        with self.assertRaises(ValidationFailed):
            self.service.leave_team(self.fourth, self.team.pk)

    def test_leader_removes_member(self):
        self.service.remove_member(self.leader, self.team.pk, self.third.pk)

        self.assertFalse(self.team.is_member(self.third))
        self.assertFalse(EventRegistration.objects.active().filter(user=self.third, event=self.event).exists())
        self.assertTeamInvariants(self.team)

    def test_remove_member_rules(self):
        with self.assertRaises(ForbiddenError):
            self.service.remove_member(self.member, self.team.pk, self.third.pk)
        with self.assertRaises(ValidationFailed):
            self.service.remove_member(self.leader, self.team.pk, self.leader.pk)
        with self.assertRaises(ValidationFailed):
            self.service.remove_member(self.leader, self.team.pk, self.fourth.pk)

    def test_transfer_leadership_swaps_roles(self):
        self.service.transfer_leadership(self.leader, self.team.pk, self.member.pk)

        self.team.refresh_from_db()
        self.assertEqual(self.team.leader, self.member)
        self.assertTrue(self.team.is_member(self.leader))
        roles = dict(
            EventRegistration.objects.active().filter(team=self.team).values_list("user_id", "team_role")
        )
        self.assertEqual(roles[self.member.pk], EventRegistration.TeamRole.LEADER)
        self.assertEqual(roles[self.leader.pk], EventRegistration.TeamRole.MEMBER)
        self.assertTeamInvariants(self.team)

        # the previous leader is now a regular member and can leave
        self.service.leave_team(self.leader, self.team.pk)
        self.assertTeamInvariants(self.team)

    def test_transfer_rules(self):
        with self.assertRaises(ForbiddenError):
            self.service.transfer_leadership(self.member, self.team.pk, self.third.pk)
        with self.assertRaises(ValidationFailed):
            self.service.transfer_leadership(self.leader, self.team.pk, self.fourth.pk)
        with self.assertRaises(ValidationFailed):
            self.service.transfer_leadership(self.leader, self.team.pk, self.leader.pk)

    def test_disband_cancels_every_ticket(self):
        summary = self.service.disband_team(self.leader, self.team.pk)

        self.assertEqual(summary.cancelled_registrations, 3)
        self.team.refresh_from_db()
        self.assertEqual(self.team.status, Team.TeamStatus.DISBANDED)
        self.assertFalse(EventRegistration.objects.active().filter(team=self.team).exists())

        with self.assertRaises(ValidationFailed):
            self.service.leave_team(self.member, self.team.pk)
        with self.assertRaises(ValidationFailed):
            self.service.disband_team(self.leader, self.team.pk)

        # members are free to form a new team afterwards
        new_team = self.service.create_team(self.member, self.event.pk, "Phoenix")
        self.assertTeamInvariants(new_team)

    def test_only_leader_disbands(self):
        with self.assertRaises(ForbiddenError):
            self.service.disband_team(self.member, self.team.pk)

    def test_member_unregistering_from_event_leaves_team(self):
        result = self.registrations.unregister_for_event(self.member, self.event.pk)

        self.assertTrue(result["team_updated"])
        self.assertFalse(self.team.is_member(self.member))
        self.assertTeamInvariants(self.team)

    def test_leader_with_members_cannot_unregister_from_event(self):
        with self.assertRaises(ValidationFailed):
            self.registrations.unregister_for_event(self.leader, self.event.pk)


class TeamQueryTests(TeamTestCase):

    def test_available_teams(self):
        open_team = self.service.create_team(self.leader, self.event.pk, "Open")
        full_team = self.service.create_team(self.member, self.event.pk, "Packed")
        self.service.join_team(self.third, full_team.team_code)
        self.service.join_team(self.fourth, full_team.team_code)

        outsider = self.registered_user("outsider@example.com")
        available = list(self.service.available_teams(outsider, self.event.pk))
        self.assertEqual(available, [open_team])

        self.assertEqual(list(self.service.available_teams(self.leader, self.event.pk)), [])

    def test_available_teams_needs_a_team_event(self):
        solo_event = make_event(self.festival, name="Solo")

        with self.assertRaises(ValidationFailed):
            self.service.available_teams(self.leader, solo_event.pk)

    def test_my_teams_skips_disbanded(self):
        kept = self.service.create_team(self.leader, self.event.pk, "Kept")
        other_event = make_team_event(self.festival, name="Other")
        gone = self.service.create_team(self.leader, other_event.pk, "Gone")
        self.service.disband_team(self.leader, gone.pk)

        self.assertEqual(list(self.service.my_teams(self.leader)), [kept])

    def test_team_codes_are_unique(self):
        codes = {
            self.service.create_team(user, self.event.pk, f"Team {i}").team_code
            for i, user in enumerate((self.leader, self.member, self.third, self.fourth))
        }
        self.assertEqual(len(codes), 4)
        self.assertTrue(all(re.fullmatch(r"[A-Z0-9]{8}", code) for code in codes))
        self.assertEqual(TeamMembership.objects.count(), 4)
