from datetime import timedelta

from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.engagement.models import Wishlist, RecentlyViewed
from apps.engagement.services.recently_viewed_service import RecentlyViewedService
from apps.engagement.services.wishlist_service import WishlistService
from apps.engagement.tasks import cleanup_recently_viewed
from core.exceptions import ConflictError, NotFoundError
from core.testing import make_user, make_festival


class WishlistServiceTests(TestCase):

    def setUp(self):
        self.service = WishlistService()
        self.user = make_user("priya@example.com")
        self.festival = make_festival()

    def test_add_check_and_remove(self):
        self.service.add(self.user, self.festival.pk)

        self.assertTrue(self.service.contains(self.user, self.festival.pk))
        self.assertEqual(self.service.count(self.user), 1)

        self.service.remove(self.user, self.festival.pk)
        self.assertFalse(self.service.contains(self.user, self.festival.pk))

    def test_add_twice_conflicts(self):
        self.service.add(self.user, self.festival.pk)

        with self.assertRaises(ConflictError):
            self.service.add(self.user, self.festival.pk)
        self.assertEqual(Wishlist.objects.count(), 1)

    def test_missing_rows(self):
        with self.assertRaises(NotFoundError):
            self.service.add(self.user, "0c0e7a4a-0000-4000-8000-000000000000")
        with self.assertRaises(NotFoundError):
            self.service.remove(self.user, self.festival.pk)
        self.assertFalse(self.service.contains(self.user, "not-a-uuid"))

    def test_clear_only_touches_own_wishlist(self):
        other = make_user("other@example.com")
        self.service.add(self.user, self.festival.pk)
        self.service.add(self.user, make_festival(name="Moodi").pk)
        self.service.add(other, self.festival.pk)

        self.assertEqual(self.service.clear(self.user), 2)
        self.assertEqual(self.service.count(other), 1)


class RecentlyViewedServiceTests(TestCase):

    def setUp(self):
        self.service = RecentlyViewedService()
        self.user = make_user("priya@example.com")
        self.techfest = make_festival()
        self.moodi = make_festival(name="Moodi")

    def test_repeated_views_update_one_row(self):
        first = self.service.record_view(self.user, self.techfest.pk)
        second = self.service.record_view(self.user, self.techfest.pk)

        self.assertEqual(first.pk, second.pk)
        self.assertEqual(second.view_count, 2)
        self.assertGreaterEqual(second.viewed_at, first.viewed_at)
        self.assertEqual(RecentlyViewed.objects.count(), 1)

    def test_list_most_viewed_and_stats(self):
        for _ in range(3):
            self.service.record_view(self.user, self.techfest.pk)
        self.service.record_view(self.user, self.moodi.pk)

        self.assertEqual([entry.festival for entry in self.service.list(self.user)], [self.moodi, self.techfest])
        self.assertEqual([entry.festival for entry in self.service.most_viewed(self.user, limit=1)], [self.techfest])
        self.assertEqual(
            self.service.stats(self.user),
            {"total_views": 4, "unique_festivals": 2, "avg_views_per_festival": 2.0},
        )

    def test_stats_without_history(self):
        self.assertEqual(
            self.service.stats(self.user),
            {"total_views": 0, "unique_festivals": 0, "avg_views_per_festival": 0},
        )

    def test_remove_and_clear(self):
        self.service.record_view(self.user, self.techfest.pk)
        self.service.record_view(self.user, self.moodi.pk)

        self.service.remove(self.user, self.techfest.pk)
        with self.assertRaises(NotFoundError):
            self.service.remove(self.user, self.techfest.pk)

        self.assertEqual(self.service.clear(self.user), 1)
        self.assertEqual(self.service.count(self.user), 0)

    @override_settings(FESTHUB_RECENTLY_VIEWED_RETENTION_DAYS=30)
    def test_cleanup_task_removes_stale_history(self):
        self.service.record_view(self.user, self.techfest.pk)
        stale = self.service.record_view(self.user, self.moodi.pk)
        RecentlyViewed.objects.filter(pk=stale.pk).update(viewed_at=timezone.now() - timedelta(days=45))

        self.assertEqual(cleanup_recently_viewed(), 1)
        self.assertEqual([entry.festival for entry in self.service.list(self.user)], [self.techfest])


class EngagementApiTests(APITestCase):

    def setUp(self):
        self.user = make_user("priya@example.com")
        self.festival = make_festival()
        self.client.force_authenticate(self.user)

    def test_wishlist_endpoints(self):
        kwargs = {"festival_id": self.festival.pk}

        response = self.client.post(reverse("wishlist-add", kwargs=kwargs))
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["festival"]["name"], "Techfest")

        response = self.client.post(reverse("wishlist-add", kwargs=kwargs))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error"]["message"], "Festival already in wishlist")

        self.assertTrue(self.client.get(reverse("wishlist-check", kwargs=kwargs)).data["is_in_wishlist"])
        self.assertEqual(self.client.get(reverse("wishlist-count")).data["count"], 1)
        self.assertEqual(self.client.get(reverse("wishlist-list")).data["count"], 1)

        response = self.client.delete(reverse("wishlist-remove", kwargs=kwargs))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.delete(reverse("wishlist-remove", kwargs=kwargs))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_recently_viewed_endpoints(self):
        kwargs = {"festival_id": self.festival.pk}
        self.client.post(reverse("recently-viewed-add", kwargs=kwargs))
        response = self.client.post(reverse("recently-viewed-add", kwargs=kwargs))
        self.assertEqual(response.data["view_count"], 2)

        response = self.client.get(reverse("recently-viewed-most-viewed"), {"limit": "abc"})
        self.assertEqual(len(response.data), 1)

        response = self.client.get(reverse("recently-viewed-stats"))
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["total_views"], 2)

        response = self.client.delete(reverse("recently-viewed-clear"))
        self.assertEqual(response.data["deleted"], 1)

    def test_requires_authentication(self):
        self.client.force_authenticate(None)

        response = self.client.get(reverse("wishlist-list"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
