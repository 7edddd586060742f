from django.contrib import admin

from django.urls import path, include
from django.conf.urls.static import static
from django.conf import settings

from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

from apps.users.api.urls import user_router, auth_urlpatterns, health_urlpatterns
from apps.festivals.api.urls import festival_router
from apps.registrations.api.urls import registration_router, team_router
from apps.engagement.api.urls import engagement_router

'''
SCHEMA
'''

# Swagger schema view
schema_view = get_schema_view(
    openapi.Info(
        title="FestHub API",
        default_version='v1',
        description="Festival, event, registration and team management",
        license=openapi.License(name="MIT License"),
    ),
    public=True,
    permission_classes=(permissions.AllowAny,),
)

'''
MAIN URL PATTERNS
'''

urlpatterns = [
    path("admin/", admin.site.urls),

    path('api/auth/', include(auth_urlpatterns)),

    path('api/users/', include(user_router.urls)),
    path('api/festivals/', include(festival_router.urls)),
    path('api/registrations/', include(registration_router.urls)),
    path('api/teams/', include(team_router.urls)),
    path('api/engagement/', include(engagement_router.urls)),
    path('api/', include(health_urlpatterns)),

    # Swagger and ReDoc documentation
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]

if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
