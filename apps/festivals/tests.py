from datetime import timedelta

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.festivals.models import Event, Festival, FestivalUserRole
from apps.festivals.services.role_service import FestivalRoleService
from apps.festivals.tasks import deactivate_expired_festival_roles
from apps.registrations.services.registration_service import RegistrationService
from core.exceptions import ForbiddenError, NotFoundError, ValidationFailed
from core.festival_permissions import AuthorizationContext
from core.testing import PERSONAL_INFO, make_user, make_festival, make_event, grant_festival_role


class AuthorizationContextTests(TestCase):

    def setUp(self):
        self.festival = make_festival()

    def test_festival_head_administers_the_festival(self):
        head = make_user("head@example.com")
        grant_festival_role(head, self.festival, FestivalUserRole.FestivalRole.FESTIVAL_HEAD)

        context = AuthorizationContext.for_festival(head, self.festival)

        self.assertTrue(context.is_administrator)
        self.assertTrue(context.can("can_manage_festivals"))
        self.assertFalse(context.can("can_create_festivals"))
        self.assertEqual(context.effective_role, "festival_head")

    def test_event_manager_manages_events_only(self):
        manager = make_user("manager@example.com")
        grant_festival_role(manager, self.festival, FestivalUserRole.FestivalRole.EVENT_MANAGER)

        context = AuthorizationContext.for_festival(manager, self.festival.pk)

        self.assertFalse(context.is_administrator)
        self.assertTrue(context.can("can_create_events"))
        self.assertFalse(context.can("can_manage_festivals"))

    def test_role_does_not_leak_to_other_festivals(self):
        manager = make_user("manager@example.com")
        grant_festival_role(manager, self.festival, FestivalUserRole.FestivalRole.EVENT_MANAGER)
        other = make_festival(name="Moodi")

        context = AuthorizationContext.for_festival(manager, other)

        self.assertIsNone(context.festival_role)
        self.assertFalse(context.can("can_create_events"))

    def test_expired_and_inactive_roles_are_ignored(self):
        expired = make_user("expired@example.com")
        grant_festival_role(
            expired, self.festival, FestivalUserRole.FestivalRole.ADMIN,
            expires_at=timezone.now() - timedelta(minutes=1),
        )
        inactive = make_user("inactive@example.com")
        grant_festival_role(inactive, self.festival, FestivalUserRole.FestivalRole.ADMIN, is_active=False)

        for user in (expired, inactive):
            context = AuthorizationContext.for_festival(user, self.festival)
            self.assertIsNone(context.festival_role)
            self.assertFalse(context.is_administrator)

    def test_platform_roles(self):
        admin = make_user("admin@example.com", role="admin")
        superadmin = make_user("root@example.com", role="superadmin")
        participant = make_user("guest@example.com")

        self.assertTrue(AuthorizationContext.for_festival(admin, self.festival).is_administrator)
        self.assertFalse(AuthorizationContext.for_festival(admin, self.festival).can("can_manage_users"))
        self.assertTrue(AuthorizationContext.for_festival(superadmin, self.festival).can("can_manage_users"))

        flags = AuthorizationContext.for_festival(participant, self.festival).permissions()
        self.assertEqual(flags["effective_role"], "participant")
        self.assertFalse(any(value for key, value in flags.items() if key.startswith("can_")))


class FestivalRoleServiceTests(TestCase):

    def setUp(self):
        self.service = FestivalRoleService()
        self.festival = make_festival()
        self.head = make_user("head@example.com")
        grant_festival_role(self.head, self.festival, FestivalUserRole.FestivalRole.FESTIVAL_HEAD)
        self.volunteer = make_user("volunteer@example.com")

    def test_assign_is_an_upsert(self):
        self.service.assign_role(self.head, self.festival.pk, self.volunteer.pk, "event_volunteer")
        assignment = self.service.assign_role(self.head, self.festival.pk, self.volunteer.pk, "event_coordinator")

        self.assertEqual(assignment.role, "event_coordinator")
        self.assertEqual(assignment.assigned_by, self.head)
        self.assertEqual(FestivalUserRole.objects.filter(user=self.volunteer).count(), 1)

    def test_assign_validations(self):
        participant = make_user("guest@example.com")

        with self.assertRaises(ForbiddenError):
            self.service.assign_role(participant, self.festival.pk, self.volunteer.pk, "event_volunteer")
        with self.assertRaises(ValidationFailed):
            self.service.assign_role(self.head, self.festival.pk, self.volunteer.pk, "overlord")
        with self.assertRaises(ValidationFailed):
            self.service.assign_role(
                self.head, self.festival.pk, self.volunteer.pk, "event_volunteer",
                expires_at=timezone.now() - timedelta(days=1),
            )
        with self.assertRaises(NotFoundError):
            self.service.assign_role(
                self.head, self.festival.pk, "0c0e7a4a-0000-4000-8000-000000000000", "event_volunteer"
            )

    def test_remove_role_deactivates_and_reassign_reactivates(self):
        self.service.assign_role(self.head, self.festival.pk, self.volunteer.pk, "event_manager")

        self.service.remove_role(self.head, self.festival.pk, self.volunteer.pk)

        self.assertIsNone(AuthorizationContext.for_festival(self.volunteer, self.festival).festival_role)
        self.assertNotIn(self.volunteer, [role.user for role in self.service.list_roles(self.head, self.festival.pk)])

        assignment = self.service.assign_role(self.head, self.festival.pk, self.volunteer.pk, "event_manager")
        self.assertTrue(assignment.is_effective)

    def test_remove_unknown_role(self):
        with self.assertRaises(NotFoundError):
            self.service.remove_role(self.head, self.festival.pk, self.volunteer.pk)

    def test_my_role(self):
        result = self.service.my_role(self.head, self.festival.pk)

        self.assertEqual(result["role"], "festival_head")
        self.assertEqual(result["global_role"], "participant")
        self.assertTrue(result["permissions"]["is_administrator"])


class EventLifecycleTests(TestCase):

    def setUp(self):
        self.festival = make_festival()
        self.publisher = make_user("head@example.com")

    def test_publish_and_unpublish(self):
        event = make_event(self.festival, published=False)

        event.publish(self.publisher)
        event.refresh_from_db()
        self.assertEqual(event.status, Event.EventStatus.PUBLISHED)
        self.assertEqual(event.published_by, self.publisher)
        self.assertIsNotNone(event.published_at)

        with self.assertRaises(ValidationFailed):
            event.publish(self.publisher)

        event.unpublish()
        event.refresh_from_db()
        self.assertEqual(event.status, Event.EventStatus.DRAFT)
        self.assertIsNone(event.published_by)

    def test_publish_requires_complete_event(self):
        event = make_event(self.festival, published=False, location=None, venue="")

        with self.assertRaises(ValidationFailed) as ctx:
            event.publish(self.publisher)

        missing = [str(field) for field in ctx.exception.detail["missing_fields"]]
        self.assertEqual(missing, ["location", "venue"])

    def test_save_as_draft_bumps_version(self):
        event = make_event(self.festival, published=False)

        event.save_as_draft()
        event.save_as_draft()

        self.assertEqual(event.draft_version, 3)
        self.assertIsNotNone(event.last_saved_as_draft)

    def test_only_drafts_are_archived(self):
        published = make_event(self.festival)
        with self.assertRaises(ValidationFailed):
            published.archive()

        draft = make_event(self.festival, published=False, name="Quiz")
        draft.archive()
        self.assertEqual(draft.status, Event.EventStatus.ARCHIVED)


class FestivalApiTests(APITestCase):

    def setUp(self):
        self.admin = make_user("admin@example.com", role="admin")
        self.participant = make_user("guest@example.com")
        self.head = make_user("head@example.com")
        self.festival = make_festival(created_by=self.admin)
        grant_festival_role(self.head, self.festival, FestivalUserRole.FestivalRole.FESTIVAL_HEAD)

    def festival_payload(self):
        start = timezone.now() + timedelta(days=30)
        return {
            "name": "Mood Indigo",
            "festival_type": "cultural",
            "state": "Maharashtra",
            "city": "Mumbai",
            "venue": "Convocation Hall",
            "start_date": start.isoformat(),
            "end_date": (start + timedelta(days=3)).isoformat(),
            "tickets": [{"name": "General", "price": "0.00"}],
        }

    def test_only_platform_admins_create_festivals(self):
        self.client.force_authenticate(self.participant)
        response = self.client.post(reverse("festival-list"), self.festival_payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.admin)
        response = self.client.post(reverse("festival-list"), self.festival_payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["created_by"]["email"], "admin@example.com")
        self.assertEqual(len(response.data["tickets"]), 1)

    def test_private_festivals_are_hidden_from_outsiders(self):
        hidden = make_festival(name="Staff Retreat", visibility=Festival.Visibility.PRIVATE)
        grant_festival_role(self.head, hidden, FestivalUserRole.FestivalRole.EVENT_VOLUNTEER)

        self.client.force_authenticate(self.participant)
        names = [row["name"] for row in self.client.get(reverse("festival-list")).data["results"]]
        self.assertEqual(names, ["Techfest"])

        self.client.force_authenticate(self.head)
        names = {row["name"] for row in self.client.get(reverse("festival-list")).data["results"]}
        self.assertEqual(names, {"Techfest", "Staff Retreat"})

    def test_festival_updates_need_manage_capability(self):
        url = reverse("festival-detail", kwargs={"pk": self.festival.pk})

        self.client.force_authenticate(self.participant)
        response = self.client.patch(url, {"about": "Hijacked"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.head)
        response = self.client.patch(url, {"about": "Asia's largest science fest"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_assign_role_and_my_role(self):
        manager = make_user("manager@example.com")

        self.client.force_authenticate(self.head)
        response = self.client.post(
            reverse("festival-assign-role", kwargs={"pk": self.festival.pk}),
            {"user": str(manager.pk), "role": "event_manager"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["role"], "event_manager")

        self.client.force_authenticate(manager)
        response = self.client.get(reverse("festival-my-role", kwargs={"pk": self.festival.pk}))
        self.assertEqual(response.data["role"], "event_manager")
        self.assertTrue(response.data["permissions"]["can_create_events"])

        response = self.client.get(reverse("festival-users", kwargs={"pk": self.festival.pk}))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_registration_stats_and_candidates(self):
        registrant = make_user("priya@example.com")
        RegistrationService().register_for_fest(registrant, self.festival.pk, PERSONAL_INFO)

        self.client.force_authenticate(self.participant)
        response = self.client.get(reverse("festival-registration-stats", kwargs={"pk": self.festival.pk}))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.get(reverse("festival-candidates", kwargs={"pk": self.festival.pk}))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.head)
        response = self.client.get(reverse("festival-registration-stats", kwargs={"pk": self.festival.pk}))
        self.assertEqual(response.data["confirmed"], 1)
        self.assertEqual(response.data["gender_distribution"], {"Female": 1})
        self.assertEqual(response.data["top_institutes"][0]["institute_name"], PERSONAL_INFO["institute_name"])

        response = self.client.get(
            reverse("festival-candidates", kwargs={"pk": self.festival.pk}), {"search": "priya"}
        )
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["institute_name"], PERSONAL_INFO["institute_name"])


class EventApiTests(APITestCase):

    def setUp(self):
        self.festival = make_festival()
        self.manager = make_user("manager@example.com")
        grant_festival_role(self.manager, self.festival, FestivalUserRole.FestivalRole.EVENT_MANAGER)
        self.participant = make_user("guest@example.com")

    def event_payload(self):
        start = timezone.now() + timedelta(days=12)
        return {
            "festival": str(self.festival.pk),
            "name": "Line Follower",
            "event_type": "competition",
            "visibility": "public",
            "mode": "offline",
            "location": "Workshop",
            "venue": "Hangar",
            "start_date": start.isoformat(),
            "end_date": (start + timedelta(hours=4)).isoformat(),
            "is_team_event": True,
            "team_size": 4,
            "rewards": [{"rank": 1, "cash": "10000.00"}],
        }

    def test_event_manager_creates_and_publishes(self):
        self.client.force_authenticate(self.manager)

        response = self.client.post(reverse("event-list"), self.event_payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["status"], "draft")
        self.assertEqual(len(response.data["rewards"]), 1)

        event_id = response.data["id"]
        response = self.client.post(reverse("event-publish", kwargs={"pk": event_id}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "published")
        self.assertEqual(response.data["published_by"]["email"], "manager@example.com")

    def test_participant_cannot_create_events(self):
        self.client.force_authenticate(self.participant)

        response = self.client.post(reverse("event-list"), self.event_payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Event.objects.exists())

    def test_team_event_needs_team_size(self):
        self.client.force_authenticate(self.manager)
        payload = {**self.event_payload(), "team_size": None}

        response = self.client.post(reverse("event-list"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("team_size", response.data["error"]["details"])

    def test_drafts_are_hidden_from_participants(self):
        draft = make_event(self.festival, published=False)
        url = reverse("event-detail", kwargs={"pk": draft.pk})

        self.client.force_authenticate(self.participant)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_404_NOT_FOUND)

        self.client.force_authenticate(self.manager)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_200_OK)

    def test_save_draft(self):
        draft = make_event(self.festival, published=False)
        self.client.force_authenticate(self.manager)

        response = self.client.post(reverse("event-save-draft", kwargs={"pk": draft.pk}))

        self.assertEqual(response.data["draft_version"], 2)

    def test_stats(self):
        event = make_event(self.festival, capacity=5)
        registrant = make_user("priya@example.com")
        service = RegistrationService()
        service.register_for_fest(registrant, self.festival.pk, PERSONAL_INFO)
        service.register_for_event(registrant, event.pk, PERSONAL_INFO)
        url = reverse("event-stats", kwargs={"pk": event.pk})

        self.client.force_authenticate(self.participant)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.manager)
        response = self.client.get(url)
        self.assertEqual(response.data["total_active"], 1)
        self.assertEqual(response.data["solo"], 1)
        self.assertEqual(response.data["capacity"], 5)

    def test_candidates_are_for_administrators(self):
        event = make_event(self.festival)
        url = reverse("event-candidates", kwargs={"pk": event.pk})

        self.client.force_authenticate(self.manager)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_403_FORBIDDEN)

        head = make_user("head@example.com")
        grant_festival_role(head, self.festival, FestivalUserRole.FestivalRole.FESTIVAL_HEAD)
        self.client.force_authenticate(head)
        response = self.client.get(url, {"registration_type": "duo"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class DeactivateExpiredRolesTaskTests(TestCase):

    def test_deactivates_only_expired_roles(self):
        festival = make_festival()
        expired = grant_festival_role(
            make_user("old@example.com"), festival, FestivalUserRole.FestivalRole.EVENT_VOLUNTEER,
            expires_at=timezone.now() - timedelta(hours=1),
        )
        current = grant_festival_role(
            make_user("new@example.com"), festival, FestivalUserRole.FestivalRole.EVENT_VOLUNTEER,
            expires_at=timezone.now() + timedelta(days=1),
        )

        self.assertEqual(deactivate_expired_festival_roles(), 1)
        self.assertEqual(deactivate_expired_festival_roles(), 0)

        expired.refresh_from_db()
        current.refresh_from_db()
        self.assertFalse(expired.is_active)
        self.assertTrue(current.is_active)
