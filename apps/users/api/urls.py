from rest_framework.routers import DefaultRouter
from django.urls import path
from apps.users.api.views import FestUserViewSet, HealthCheckView
from apps.users.api.auth_views import (
    SecureTokenObtainView, SecureTokenRefreshView, SecureLogoutView, SignupView, CurrentUserView,
)


user_router = DefaultRouter()
user_router.register(r'manage', FestUserViewSet, basename='festuser')

# mounted under api/auth/
auth_urlpatterns = [
    path('signup/', SignupView.as_view(), name='auth-signup'),
    path('token/', SecureTokenObtainView.as_view(), name='auth-token'),
    path('token/refresh/', SecureTokenRefreshView.as_view(), name='auth-token-refresh'),
    path('logout/', SecureLogoutView.as_view(), name='auth-logout'),
    path('me/', CurrentUserView.as_view(), name='auth-me'),
]

# Health check endpoint for container monitoring
health_urlpatterns = [
    path('health/', HealthCheckView.as_view(), name='health-check'),
]
