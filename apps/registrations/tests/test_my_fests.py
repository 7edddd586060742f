from datetime import timedelta

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.engagement.services.recently_viewed_service import RecentlyViewedService
from apps.engagement.services.wishlist_service import WishlistService
from apps.festivals.models import Festival
from apps.registrations.services import registration_queries
from apps.registrations.services.registration_service import RegistrationService
from apps.registrations.services.team_service import TeamService
from core.testing import PERSONAL_INFO, make_user, make_festival, make_event, make_team_event


class MyFestsFixture:

    def build(self):
        self.service = RegistrationService()
        self.user = make_user("priya@example.com")

        self.techfest = make_festival()
        self.ongoing = make_festival(name="Hackathon Week", starts_in=timedelta(days=-1))
        self.past = make_festival(name="Winter Fest", starts_in=timedelta(days=-10))

        self.moodi = make_festival(name="Moodi", festival_type=Festival.FestivalType.CULTURAL, starts_in=timedelta(days=20))
        self.robowars = make_festival(name="Robowars", starts_in=timedelta(days=30))
        make_festival(name="Closed", starts_in=timedelta(days=15), is_registration_open=False)
        make_festival(name="Secret", starts_in=timedelta(days=15), visibility=Festival.Visibility.PRIVATE)
        make_festival(name="Gone", starts_in=timedelta(days=-5))

        self.service.register_for_fest(self.user, self.techfest.pk, PERSONAL_INFO)
        self.service.register_for_fest(self.user, self.ongoing.pk, PERSONAL_INFO)
        self.service.register_for_fest(self.user, self.past.pk, PERSONAL_INFO)


class MyFestsQueryTests(MyFestsFixture, TestCase):

    def setUp(self):
        self.build()

    def test_registered_festivals_are_grouped_by_timing(self):
        summary = registration_queries.my_fests(self.user)

        self.assertEqual(summary["upcoming"], [self.techfest])
        self.assertEqual(summary["ongoing"], [self.ongoing])
        self.assertEqual(summary["past"], [self.past])

    def test_stats_cover_events_teams_wishlist_and_views(self):
        self.service.register_for_event(self.user, make_event(self.techfest).pk, PERSONAL_INFO)
        TeamService().create_team(self.user, make_team_event(self.techfest).pk, "Alpha")
        WishlistService().add(self.user, self.moodi.pk)
        RecentlyViewedService().record_view(self.user, self.moodi.pk)

        stats = registration_queries.my_fests(self.user)["stats"]

        self.assertEqual(stats["total_registered"], 3)
        self.assertEqual((stats["upcoming_count"], stats["ongoing_count"], stats["past_count"]), (1, 1, 1))
        self.assertEqual(stats["event_registrations"], 2)
        self.assertEqual(stats["teams"], 1)
        self.assertEqual(stats["wishlist_count"], 1)
        self.assertEqual(stats["festival_types"], ["technical"])
        self.assertEqual(stats["recently_viewed"]["total_views"], 1)

    def test_recommendations_prefer_known_festival_types(self):
        recommended = registration_queries.recommended_festivals(self.user)

        self.assertEqual(recommended, [self.robowars, self.moodi])
        self.assertEqual(registration_queries.recommended_festivals(self.user, limit=1), [self.robowars])

    def test_recommendations_without_history_follow_start_date(self):
        newcomer = make_user("neha@example.com")

        recommended = registration_queries.recommended_festivals(newcomer, limit=2)

        self.assertEqual(recommended, [self.techfest, self.moodi])


class MyFestsApiTests(MyFestsFixture, APITestCase):

    def setUp(self):
        self.build()
        self.client.force_authenticate(self.user)

    def test_my_fests_summary(self):
        response = self.client.get(reverse("registration-my-fests"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row["name"] for row in response.data["upcoming"]], ["Techfest"])
        self.assertEqual([row["name"] for row in response.data["ongoing"]], ["Hackathon Week"])
        self.assertEqual([row["name"] for row in response.data["past"]], ["Winter Fest"])
        self.assertEqual(response.data["stats"]["total_registered"], 3)
        self.assertEqual([row["name"] for row in response.data["recommended"]], ["Robowars", "Moodi"])

    def test_recommended_limit(self):
        response = self.client.get(reverse("registration-recommended"), {"limit": 1})
        self.assertEqual([row["name"] for row in response.data], ["Robowars"])

        response = self.client.get(reverse("registration-recommended"), {"limit": "abc"})
        self.assertEqual(len(response.data), 2)

    def test_requires_authentication(self):
        self.client.force_authenticate(None)

        self.assertEqual(self.client.get(reverse("registration-my-fests")).status_code, status.HTTP_403_FORBIDDEN)
