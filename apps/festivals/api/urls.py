from rest_framework.routers import DefaultRouter
from apps.festivals.api.views import FestivalViewSet, EventViewSet

festival_router = DefaultRouter()
festival_router.register(r'manage', FestivalViewSet, basename='festival')
festival_router.register(r'events', EventViewSet, basename='event')
