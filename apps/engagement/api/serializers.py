from rest_framework import serializers

from apps.engagement.models import Wishlist, RecentlyViewed
from apps.festivals.api.serializers import SimplifiedFestivalSerializer


class WishlistSerializer(serializers.ModelSerializer):
    festival = SimplifiedFestivalSerializer(read_only=True)

    class Meta:
        model = Wishlist
        fields = ["id", "festival", "added_at"]
        read_only_fields = fields


class RecentlyViewedSerializer(serializers.ModelSerializer):
    festival = SimplifiedFestivalSerializer(read_only=True)

    class Meta:
        model = RecentlyViewed
        fields = ["id", "festival", "viewed_at", "view_count"]
        read_only_fields = fields
