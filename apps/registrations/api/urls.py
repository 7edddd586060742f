from rest_framework.routers import SimpleRouter
from apps.registrations.api.views import RegistrationViewSet, TeamViewSet

# no list endpoints on these viewsets, so no browsable root view is wanted
registration_router = SimpleRouter()
registration_router.register(r'', RegistrationViewSet, basename='registration')

team_router = SimpleRouter()
team_router.register(r'', TeamViewSet, basename='team')
