from rest_framework import filters, response, status
from rest_framework.decorators import action
from rest_framework import viewsets, permissions, views

from django_filters.rest_framework import DjangoFilterBackend
from django.contrib.auth import get_user_model

from core.permissions import IsPlatformAdmin, IsSuperAdmin
from .serializers import FestUserSerializer, UserRoleSerializer

import logging

logger = logging.getLogger(__name__)


class FestUserViewSet(viewsets.ReadOnlyModelViewSet):
    '''
    User directory for platform administrators plus the self-service profile endpoints
    '''
    queryset = get_user_model().objects.all()
    serializer_class = FestUserSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['role', 'gender', 'city', 'state', 'is_active']
    search_fields = ['first_name', 'last_name', 'email', 'institute_name']
    ordering_fields = ['first_name', 'last_name', 'date_joined']
    ordering = ['first_name', 'last_name']
    permission_classes = [IsPlatformAdmin]

    @action(detail=False, methods=['get', 'patch'], permission_classes=[permissions.IsAuthenticated], url_name="self", url_path="me")
    def me(self, request):
        '''
        Get or update the profile of the current logged in user
        '''
        if request.method == 'GET':
            return response.Response(FestUserSerializer(request.user).data)

        serializer = FestUserSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return response.Response(serializer.data)

    @action(detail=False, methods=['get'], permission_classes=[permissions.IsAuthenticated], url_name="choices", url_path="choices")
    def choices(self, request):
        """
        Return selectable choices for profile fields to power dropdowns in the UI.
        """
        UserModel = get_user_model()

        def choices_to_list(choices):
            return [
                {"value": key, "label": label}
                for key, label in choices
            ]

        return response.Response({
            "gender": choices_to_list(UserModel.GenderType.choices),
            "role": choices_to_list(UserModel.GlobalRole.choices),
        })

    @action(detail=True, methods=['post'], permission_classes=[IsSuperAdmin], url_name="set-role", url_path="set-role")
    def set_role(self, request, pk=None):
        '''
        Change the global role of a user. Superadmin only.
        '''
        user = self.get_object()
        serializer = UserRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        previous = user.role
        user.role = serializer.validated_data['role']
        user.save(update_fields=['role', 'updated_at'])
        logger.info(f"Global role of {user.email} changed from {previous} to {user.role} by {request.user.email}")
        return response.Response(FestUserSerializer(user).data, status=status.HTTP_200_OK)


class HealthCheckView(views.APIView):
    '''
    Lightweight endpoint for container health monitoring
    '''
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def get(self, request):
        return response.Response({"status": "ok"})
