from rest_framework import viewsets, filters, status, permissions
from rest_framework.decorators import action
from rest_framework.response import Response
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from django_filters.rest_framework import DjangoFilterBackend

from apps.festivals.models import Festival, Event, FestivalUserRole
from apps.festivals.api.serializers import (
    FestivalSerializer, SimplifiedFestivalSerializer, FestivalUserRoleSerializer,
    AssignFestivalRoleSerializer, RemoveFestivalRoleSerializer,
    EventSerializer, SimplifiedEventSerializer,
)
from apps.festivals.api.filters import FestivalFilter, EventFilter
from apps.festivals.services.role_service import FestivalRoleService
from apps.registrations.api.serializers import CandidateSerializer
from apps.registrations.services import registration_queries
from core.exceptions import ForbiddenError
from core.festival_permissions import AuthorizationContext
from core.permissions import CanCreateFestivals

import logging

logger = logging.getLogger(__name__)


def _roles_held_by(user):
    return FestivalUserRole.objects.effective().filter(user=user).values("festival_id")


def _require_capability(user, festival, capability, message):
    context = AuthorizationContext.for_festival(user, festival)
    if not context.can(capability):
        logger.warning(f"{user.email} lacks {capability} on festival {getattr(festival, 'pk', festival)}")
        raise ForbiddenError(message)
    return context


class FestivalViewSet(viewsets.ModelViewSet):
    '''
    Festival catalog plus festival role management and organiser dashboards
    '''
    queryset = Festival.objects.all()
    serializer_class = FestivalSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = FestivalFilter
    search_fields = ['name', 'city', 'college']
    ordering_fields = ['start_date', 'end_date', 'name', 'created_at']
    ordering = ['start_date']
    permission_classes = [permissions.IsAuthenticated]
    role_service = FestivalRoleService()

    def get_permissions(self):
        if self.action == 'create':
            return [CanCreateFestivals()]
        return super().get_permissions()

    def get_serializer_class(self):
        if self.action == 'list':
            detailed = self.request.query_params.get('detailed', 'false').lower() == 'true'
            if not detailed:
                return SimplifiedFestivalSerializer
        return super().get_serializer_class()

    def get_queryset(self):
        user = self.request.user
        queryset = Festival.objects.prefetch_related("tickets", "sponsors")
        if getattr(user, 'is_platform_admin', False):
            return queryset
        # private festivals stay visible to their creator and staff
        return queryset.filter(
            Q(visibility=Festival.Visibility.PUBLIC) |
            Q(created_by=user) |
            Q(pk__in=_roles_held_by(user))
        ).distinct()

    def perform_create(self, serializer):
        festival = serializer.save(created_by=self.request.user)
        logger.info(f"Festival {festival.name} created by {self.request.user.email}")

    def perform_update(self, serializer):
        _require_capability(self.request.user, serializer.instance, 'can_manage_festivals',
                            "You do not have permission to modify this festival")
        serializer.save()

    def perform_destroy(self, instance):
        _require_capability(self.request.user, instance, 'can_manage_festivals',
                            "You do not have permission to delete this festival")
        logger.info(f"Festival {instance.name} deleted by {self.request.user.email}")
        instance.delete()

    @action(detail=True, methods=['post'], url_name="assign-role", url_path="assign-role")
    def assign_role(self, request, pk=None):
        '''
        Assign (or replace) a festival role for a user
        '''
        serializer = AssignFestivalRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        assignment = self.role_service.assign_role(
            request.user,
            pk,
            serializer.validated_data['user'],
            serializer.validated_data['role'],
            expires_at=serializer.validated_data.get('expires_at'),
        )
        return Response(FestivalUserRoleSerializer(assignment).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=['post'], url_name="remove-role", url_path="remove-role")
    def remove_role(self, request, pk=None):
        serializer = RemoveFestivalRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.role_service.remove_role(request.user, pk, serializer.validated_data['user'])
        return Response({'message': _('Festival role removed.')})

    @action(detail=True, methods=['get'], url_name="users", url_path="users")
    def users(self, request, pk=None):
        '''
        Active festival staff with their roles
        '''
        roles = self.role_service.list_roles(request.user, pk)
        return Response(FestivalUserRoleSerializer(roles, many=True).data)

    @action(detail=True, methods=['get'], url_name="my-role", url_path="my-role")
    def my_role(self, request, pk=None):
        return Response(self.role_service.my_role(request.user, pk))

    @action(detail=True, methods=['get'], url_name="registration-stats", url_path="registration-stats")
    def registration_stats(self, request, pk=None):
        festival = self.get_object()
        _require_capability(request.user, festival, 'can_view_participants',
                            "You do not have permission to view registration statistics")
        return Response(registration_queries.festival_registration_stats(festival))

    @action(detail=True, methods=['get'], url_name="candidates", url_path="candidates")
    def candidates(self, request, pk=None):
        '''
        Fest registrations of this festival, filterable by ``status`` and ``search``
        '''
        queryset = registration_queries.festival_candidates(
            request.user,
            pk,
            status=request.query_params.get('status'),
            search=request.query_params.get('search'),
        )
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(CandidateSerializer(page, many=True).data)
        return Response(CandidateSerializer(queryset, many=True).data)


class EventViewSet(viewsets.ModelViewSet):
    '''
    Events of a festival with their draft / published / archived lifecycle
    '''
    queryset = Event.objects.all()
    serializer_class = EventSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = EventFilter
    search_fields = ['name', 'description']
    ordering_fields = ['start_date', 'name', 'created_at']
    ordering = ['start_date']
    permission_classes = [permissions.IsAuthenticated]

    def get_serializer_class(self):
        if self.action == 'list':
            detailed = self.request.query_params.get('detailed', 'false').lower() == 'true'
            if not detailed:
                return SimplifiedEventSerializer
        return super().get_serializer_class()

    def get_queryset(self):
        user = self.request.user
        queryset = Event.objects.select_related("festival", "created_by", "published_by").prefetch_related(
            "rewards", "tickets", "sponsors", "judges"
        )
        if getattr(user, 'is_platform_admin', False):
            return queryset
        # drafts are only visible to the festival's staff and the event creator
        return queryset.filter(
            Q(status=Event.EventStatus.PUBLISHED) |
            Q(created_by=user) |
            Q(festival_id__in=_roles_held_by(user))
        ).distinct()

    def perform_create(self, serializer):
        festival = serializer.validated_data['festival']
        _require_capability(self.request.user, festival, 'can_create_events',
                            "You do not have permission to create events for this festival")
        event = serializer.save(created_by=self.request.user)
        logger.info(f"Event {event.name} created in {festival.name} by {self.request.user.email}")

    def perform_update(self, serializer):
        _require_capability(self.request.user, serializer.instance.festival_id, 'can_modify_events',
                            "You do not have permission to modify this event")
        serializer.save()

    def perform_destroy(self, instance):
        _require_capability(self.request.user, instance.festival_id, 'can_modify_events',
                            "You do not have permission to delete this event")
        logger.info(f"Event {instance.name} deleted by {self.request.user.email}")
        instance.delete()

    def _lifecycle_event(self, capability="can_modify_events"):
        event = self.get_object()
        _require_capability(self.request.user, event.festival_id, capability,
                            "You do not have permission to change the status of this event")
        return event

    @action(detail=True, methods=['post'], url_name="publish", url_path="publish")
    def publish(self, request, pk=None):
        event = self._lifecycle_event("can_manage_events")
        event.publish(request.user)
        logger.info(f"Event {event.name} published by {request.user.email}")
        return Response(EventSerializer(event).data)

    @action(detail=True, methods=['post'], url_name="unpublish", url_path="unpublish")
    def unpublish(self, request, pk=None):
        event = self._lifecycle_event("can_manage_events")
        event.unpublish()
        logger.info(f"Event {event.name} unpublished by {request.user.email}")
        return Response(EventSerializer(event).data)

    @action(detail=True, methods=['post'], url_name="save-draft", url_path="save-draft")
    def save_draft(self, request, pk=None):
        event = self._lifecycle_event()
        event.save_as_draft()
        return Response({
            'message': _('Draft saved.'),
            'draft_version': event.draft_version,
            'last_saved_as_draft': event.last_saved_as_draft,
        })

    @action(detail=True, methods=['post'], url_name="archive", url_path="archive")
    def archive(self, request, pk=None):
        event = self._lifecycle_event("can_manage_events")
        event.archive()
        logger.info(f"Event {event.name} archived by {request.user.email}")
        return Response(EventSerializer(event).data)

    @action(detail=True, methods=['get'], url_name="stats", url_path="stats")
    def stats(self, request, pk=None):
        '''
        Registration counts by status, solo vs team and teams by status
        '''
        event = self.get_object()
        _require_capability(request.user, event.festival_id, 'can_view_participants',
                            "You do not have permission to view event statistics")
        return Response({
            'event_id': event.pk,
            'generated_at': timezone.now(),
            **registration_queries.registration_counts_for_event(event),
        })

    @action(detail=True, methods=['get'], url_name="candidates", url_path="candidates")
    def candidates(self, request, pk=None):
        queryset = registration_queries.event_candidates(
            request.user,
            pk,
            status=request.query_params.get('status'),
            registration_type=request.query_params.get('registration_type'),
            search=request.query_params.get('search'),
        )
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(CandidateSerializer(page, many=True).data)
        return Response(CandidateSerializer(queryset, many=True).data)
