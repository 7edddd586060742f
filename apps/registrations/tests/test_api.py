from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.registrations.models import FestRegistration, EventRegistration, Team
from core.testing import PERSONAL_INFO, make_user, make_festival, make_event, make_team_event


class RegistrationApiTests(APITestCase):

    def setUp(self):
        self.user = make_user("priya@example.com")
        self.festival = make_festival()
        self.event = make_event(self.festival, capacity=10)
        self.client.force_authenticate(self.user)

    def fest_url(self, festival_id=None):
        return reverse("registration-fest", kwargs={"festival_id": festival_id or self.festival.pk})

    def test_requires_authentication(self):
        self.client.force_authenticate(None)

        response = self.client.post(self.fest_url(), PERSONAL_INFO, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(response.data["success"])
        self.assertNotIn("WWW-Authenticate", response)

    def test_register_check_and_unregister_fest(self):
        response = self.client.post(self.fest_url(), PERSONAL_INFO, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data["ticket"].startswith("FEST-"))
        self.assertEqual(response.data["reference"], f"fest:{response.data['id']}")

        response = self.client.get(self.fest_url())
        self.assertTrue(response.data["is_registered"])

        response = self.client.delete(self.fest_url())
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["deleted_fest_registration"])
        self.assertFalse(FestRegistration.objects.exists())

    def test_duplicate_registration_uses_error_envelope(self):
        self.client.post(self.fest_url(), PERSONAL_INFO, format="json")

        response = self.client.post(self.fest_url(), PERSONAL_INFO, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["success"], False)
        self.assertEqual(response.data["error"]["code"], "conflict")
        self.assertIn("already registered", response.data["error"]["message"])

    def test_validation_errors_carry_field_details(self):
        response = self.client.post(self.fest_url(), {"phone": "1"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "invalid")
        self.assertIn("phone", response.data["error"]["details"])
        self.assertIn("institute_name", response.data["error"]["details"])

    def test_unknown_festival_is_404(self):
        response = self.client.post(self.fest_url("not-a-festival"), PERSONAL_INFO, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"]["code"], "not_found")

    def test_solo_registration_flow(self):
        self.client.post(self.fest_url(), PERSONAL_INFO, format="json")
        solo_url = reverse("registration-event-solo", kwargs={"event_id": self.event.pk})

        response = self.client.post(solo_url, {**PERSONAL_INFO, "payment_method": "upi"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["registration_type"], "solo")
        self.assertEqual(response.data["payment_method"], "upi")

        response = self.client.get(reverse("registration-mine"))
        self.assertEqual(len(response.data["fest_registrations"]), 1)
        self.assertEqual(len(response.data["event_registrations"]), 1)

        response = self.client.delete(reverse("registration-event-unregister", kwargs={"event_id": self.event.pk}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["registration"]["status"], "cancelled")

    def test_solo_registration_without_fest_registration(self):
        solo_url = reverse("registration-event-solo", kwargs={"event_id": self.event.pk})

        response = self.client.post(solo_url, PERSONAL_INFO, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["message"], "Register for the fest first")

    def test_cancel_by_reference(self):
        self.client.post(self.fest_url(), PERSONAL_INFO, format="json")
        solo = self.client.post(
            reverse("registration-event-solo", kwargs={"event_id": self.event.pk}), PERSONAL_INFO, format="json"
        )

        response = self.client.delete(reverse("registration-cancel", kwargs={"reference": solo.data["reference"]}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(EventRegistration.objects.exists())


class TeamApiTests(APITestCase):

    def setUp(self):
        self.festival = make_festival()
        self.event = make_team_event(self.festival, team_size=2)
        self.leader = make_user("lead@example.com")
        self.member = make_user("member@example.com")
        for user in (self.leader, self.member):
            self.client.force_authenticate(user)
            self.client.post(
                reverse("registration-fest", kwargs={"festival_id": self.festival.pk}), PERSONAL_INFO, format="json"
            )

    def create_team(self):
        self.client.force_authenticate(self.leader)
        response = self.client.post(
            reverse("team-list"), {"event": str(self.event.pk), "team_name": "Alpha"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return response.data

    def test_create_join_and_disband(self):
        team = self.create_team()
        self.assertEqual(team["current_size"], 1)
        self.assertEqual(team["leader"]["email"], "lead@example.com")

        self.client.force_authenticate(self.member)
        response = self.client.post(reverse("team-join"), {"team_code": team["team_code"].lower()}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "full")
        self.assertEqual(len(response.data["members"]), 2)

        response = self.client.get(reverse("team-my-teams"))
        self.assertEqual([t["id"] for t in response.data], [team["id"]])

        response = self.client.post(reverse("team-disband", kwargs={"pk": team["id"]}))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.leader)
        response = self.client.post(reverse("team-disband", kwargs={"pk": team["id"]}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["cancelled_registrations"], 2)
        self.assertEqual(Team.objects.get().status, Team.TeamStatus.DISBANDED)

    def test_transfer_leadership_and_leave(self):
        team = self.create_team()
        self.client.force_authenticate(self.member)
        self.client.post(reverse("team-join"), {"team_code": team["team_code"]}, format="json")

        self.client.force_authenticate(self.leader)
        response = self.client.post(
            reverse("team-transfer-leadership", kwargs={"pk": team["id"]}),
            {"new_leader_id": str(self.member.pk)},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["leader"]["id"], str(self.member.pk))

        response = self.client.post(reverse("team-leave", kwargs={"pk": team["id"]}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.get(reverse("team-detail", kwargs={"pk": team["id"]}))
        self.assertEqual(response.data["current_size"], 1)
        self.assertEqual(response.data["status"], "active")

    def test_available_teams(self):
        team = self.create_team()
        outsider = make_user("outsider@example.com")
        self.client.force_authenticate(outsider)

        response = self.client.get(reverse("team-available", kwargs={"event_id": self.event.pk}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([t["id"] for t in response.data["results"]], [team["id"]])

    def test_join_without_fest_registration_is_forbidden(self):
        team = self.create_team()
        outsider = make_user("outsider@example.com")
        self.client.force_authenticate(outsider)

        response = self.client.post(reverse("team-join"), {"team_code": team["team_code"]}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"]["code"], "forbidden")
