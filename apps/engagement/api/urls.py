from rest_framework.routers import DefaultRouter
from apps.engagement.api.views import WishlistViewSet, RecentlyViewedViewSet

engagement_router = DefaultRouter()
engagement_router.register(r'wishlist', WishlistViewSet, basename='wishlist')
engagement_router.register(r'recently-viewed', RecentlyViewedViewSet, basename='recently-viewed')
