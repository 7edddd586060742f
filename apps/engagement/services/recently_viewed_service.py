"""
Recently Viewed Service
Tracks which festivals a user opened, when, and how many times.
"""
import logging
from datetime import timedelta

from django.db import transaction
from django.db.models import F, Sum, Count, Avg
from django.utils import timezone

from apps.engagement.models import RecentlyViewed
from apps.festivals.models import Festival
from apps.registrations.services.atomic import translate_store_errors
from core.lookups import get_or_not_found

logger = logging.getLogger(__name__)

MOST_VIEWED_LIMIT = 10


class RecentlyViewedService:

    def record_view(self, user, festival_id):
        """
        Upsert the view row: first view creates it, later views bump
        ``view_count`` and move ``viewed_at`` to now.

        Returns:
            RecentlyViewed
        """
        festival = get_or_not_found(Festival, "Festival not found", pk=festival_id)
        now = timezone.now()

        with translate_store_errors("record_view"), transaction.atomic():
            entry, created = RecentlyViewed.objects.get_or_create(
                user=user,
                festival=festival,
                defaults={"viewed_at": now, "view_count": 1},
            )
            if not created:
                RecentlyViewed.objects.filter(pk=entry.pk).update(view_count=F("view_count") + 1, viewed_at=now)
                entry.refresh_from_db(fields=["view_count", "viewed_at"])

        return entry

    def list(self, user):
        return RecentlyViewed.objects.filter(user=user).select_related("festival").order_by("-viewed_at")

    def most_viewed(self, user, limit=MOST_VIEWED_LIMIT):
        return (
            RecentlyViewed.objects.filter(user=user)
            .select_related("festival")
            .order_by("-view_count", "-viewed_at")[:limit]
        )

    def remove(self, user, festival_id):
        entry = get_or_not_found(
            RecentlyViewed.objects.filter(user=user), "Festival not found in recently viewed", festival_id=festival_id
        )
        entry.delete()

    def clear(self, user):
        deleted, _details = RecentlyViewed.objects.filter(user=user).delete()
        return deleted

    def count(self, user):
        return RecentlyViewed.objects.filter(user=user).count()

    def stats(self, user):
        """
        Returns:
            dict: total_views, unique_festivals and avg_views_per_festival
        """
        result = RecentlyViewed.objects.filter(user=user).aggregate(
            total_views=Sum("view_count"),
            unique_festivals=Count("id"),
            avg_views_per_festival=Avg("view_count"),
        )
        return {
            "total_views": result["total_views"] or 0,
            "unique_festivals": result["unique_festivals"],
            "avg_views_per_festival": round(result["avg_views_per_festival"] or 0, 2),
        }

    def cleanup_old_entries(self, days):
        cutoff = timezone.now() - timedelta(days=days)
        deleted, _details = RecentlyViewed.objects.filter(viewed_at__lt=cutoff).delete()
        logger.info(f"Removed {deleted} recently viewed entries older than {days} days")
        return deleted
