"""
Wishlist Service
Festivals a user bookmarked. One row per (user, festival).
"""
import logging

from django.db import transaction

from apps.engagement.models import Wishlist
from apps.festivals.models import Festival
from apps.registrations.services.atomic import translate_store_errors, parse_uuid
from core.lookups import get_or_not_found

logger = logging.getLogger(__name__)


class WishlistService:

    def add(self, user, festival_id):
        """
        Raises:
            NotFoundError: festival missing
            ConflictError: festival already in the wishlist
        """
        festival = get_or_not_found(Festival, "Festival not found", pk=festival_id)
        with translate_store_errors("wishlist_add", conflict="Festival already in wishlist"), transaction.atomic():
            item = Wishlist.objects.create(user=user, festival=festival)
        logger.info(f"{user.email} wishlisted {festival.name}")
        return item

    def remove(self, user, festival_id):
        item = get_or_not_found(Wishlist.objects.filter(user=user), "Festival not found in wishlist", festival_id=festival_id)
        item.delete()

    def list(self, user):
        return Wishlist.objects.filter(user=user).select_related("festival").order_by("-added_at")

    def contains(self, user, festival_id):
        festival_id = parse_uuid(festival_id)
        return festival_id is not None and Wishlist.objects.filter(user=user, festival_id=festival_id).exists()

    def count(self, user):
        return Wishlist.objects.filter(user=user).count()

    def clear(self, user):
        deleted, _details = Wishlist.objects.filter(user=user).delete()
        logger.info(f"Cleared {deleted} wishlist items of {user.email}")
        return deleted
