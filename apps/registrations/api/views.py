from dataclasses import asdict

from rest_framework import viewsets, permissions, status, mixins
from rest_framework.decorators import action
from rest_framework.response import Response
from django.utils.translation import gettext_lazy as _

from apps.festivals.api.serializers import SimplifiedFestivalSerializer
from apps.registrations.models import FestRegistration, Team
from apps.registrations.services.registration_service import RegistrationService
from apps.registrations.services.team_service import TeamService
from apps.registrations.services import registration_queries
from .serializers import (
    FestRegistrationSerializer, EventRegistrationSerializer, TeamSerializer,
    CreateTeamSerializer, JoinTeamSerializer, MemberReferenceSerializer, TransferLeadershipSerializer,
)


class RegistrationViewSet(viewsets.GenericViewSet):
    '''
    Fest and solo event registration for the current user.

    POST   fest/<festival_id>/                 register for a festival
    GET    fest/<festival_id>/                 registration status for a festival
    DELETE fest/<festival_id>/                 unregister from a festival (cascades)
    POST   event/<event_id>/solo/              solo registration for an event
    DELETE event/<event_id>/unregister/        cancel the event registration
    DELETE <reference>/cancel/                 cancel one registration by reference
    GET    mine/                               all registrations of the user
    GET    my-fests/                           registered festivals by timing, stats, recommendations
    GET    my-fests/recommended/               festival recommendations only
    '''
    permission_classes = [permissions.IsAuthenticated]
    queryset = FestRegistration.objects.none()
    service = RegistrationService()

    @action(detail=False, methods=['get', 'post', 'delete'], url_name="fest", url_path=r"fest/(?P<festival_id>[^/.]+)")
    def fest(self, request, festival_id=None):
        if request.method == 'POST':
            registration = self.service.register_for_fest(request.user, festival_id, request.data)
            return Response(FestRegistrationSerializer(registration).data, status=status.HTTP_201_CREATED)

        if request.method == 'DELETE':
            summary = self.service.unregister_for_fest(request.user, festival_id)
            return Response({
                'message': _('Successfully unregistered from the festival.'),
                **asdict(summary),
            }, status=status.HTTP_200_OK)

        result = registration_queries.fest_registration_status(request.user, festival_id)
        registration = result['registration']
        return Response({
            'festival_id': result['festival_id'],
            'is_registered': result['is_registered'],
            'registration': FestRegistrationSerializer(registration).data if registration else None,
        })

    @action(detail=False, methods=['post'], url_name="event-solo", url_path=r"event/(?P<event_id>[^/.]+)/solo")
    def register_solo(self, request, event_id=None):
        registration = self.service.register_for_event(
            request.user,
            event_id,
            request.data,
            payment_method=request.data.get('payment_method'),
        )
        return Response(EventRegistrationSerializer(registration).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['delete'], url_name="event-unregister", url_path=r"event/(?P<event_id>[^/.]+)/unregister")
    def unregister_event(self, request, event_id=None):
        result = self.service.unregister_for_event(request.user, event_id)
        return Response({
            'message': _('Successfully unregistered from the event.'),
            'registration': EventRegistrationSerializer(result['registration']).data,
            'team_updated': result['team_updated'],
        })

    @action(detail=False, methods=['delete'], url_name="cancel", url_path=r"(?P<reference>[^/]+)/cancel")
    def cancel(self, request, reference=None):
        registration = self.service.cancel_registration(request.user, reference)
        return Response({
            'message': _('Registration cancelled.'),
            'reference': registration.reference,
        })

    @action(detail=False, methods=['get'], url_name="mine", url_path="mine")
    def mine(self, request):
        registrations = registration_queries.my_registrations(request.user)
        return Response({
            'fest_registrations': FestRegistrationSerializer(registrations['fest_registrations'], many=True).data,
            'event_registrations': EventRegistrationSerializer(registrations['event_registrations'], many=True).data,
        })

    def _recommended_limit(self, request):
        try:
            limit = int(request.query_params.get('limit', registration_queries.RECOMMENDED_LIMIT))
        except ValueError:
            limit = registration_queries.RECOMMENDED_LIMIT
        return max(1, min(limit, 20))

    @action(detail=False, methods=['get'], url_name="my-fests", url_path="my-fests")
    def my_fests(self, request):
        summary = registration_queries.my_fests(request.user, recommended_limit=self._recommended_limit(request))
        return Response({
            'upcoming': SimplifiedFestivalSerializer(summary['upcoming'], many=True).data,
            'ongoing': SimplifiedFestivalSerializer(summary['ongoing'], many=True).data,
            'past': SimplifiedFestivalSerializer(summary['past'], many=True).data,
            'stats': summary['stats'],
            'recommended': SimplifiedFestivalSerializer(summary['recommended'], many=True).data,
        })

    @action(detail=False, methods=['get'], url_name="recommended", url_path="my-fests/recommended")
    def recommended(self, request):
        festivals = registration_queries.recommended_festivals(request.user, limit=self._recommended_limit(request))
        return Response(SimplifiedFestivalSerializer(festivals, many=True).data)


class TeamViewSet(mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    '''
    Team creation and membership management.
    '''
    permission_classes = [permissions.IsAuthenticated]
    serializer_class = TeamSerializer
    queryset = Team.objects.select_related("event__festival", "leader").prefetch_related("memberships__user")
    service = TeamService()

    def create(self, request):
        serializer = CreateTeamSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        team = self.service.create_team(
            request.user,
            serializer.validated_data['event'],
            serializer.validated_data['team_name'],
            description=serializer.validated_data.get('description'),
        )
        return Response(TeamSerializer(self.service.team_detail(team.pk)).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        return Response(TeamSerializer(self.service.team_detail(pk)).data)

    @action(detail=False, methods=['post'], url_name="join", url_path="join")
    def join(self, request):
        serializer = JoinTeamSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        team = self.service.join_team(request.user, serializer.validated_data['team_code'])
        return Response(TeamSerializer(self.service.team_detail(team.pk)).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=['post'], url_name="leave", url_path="leave")
    def leave(self, request, pk=None):
        self.service.leave_team(request.user, pk)
        return Response({'message': _('You have left the team.')})

    @action(detail=True, methods=['post'], url_name="remove-member", url_path="remove-member")
    def remove_member(self, request, pk=None):
        serializer = MemberReferenceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        team = self.service.remove_member(request.user, pk, serializer.validated_data['member_id'])
        return Response(TeamSerializer(self.service.team_detail(team.pk)).data)

    @action(detail=True, methods=['post'], url_name="transfer-leadership", url_path="transfer-leadership")
    def transfer_leadership(self, request, pk=None):
        serializer = TransferLeadershipSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        team = self.service.transfer_leadership(request.user, pk, serializer.validated_data['new_leader_id'])
        return Response(TeamSerializer(self.service.team_detail(team.pk)).data)

    @action(detail=True, methods=['post'], url_name="disband", url_path="disband")
    def disband(self, request, pk=None):
        summary = self.service.disband_team(request.user, pk)
        return Response({
            'message': _('Team disbanded.'),
            'team': TeamSerializer(self.service.team_detail(summary.team.pk)).data,
            'cancelled_registrations': summary.cancelled_registrations,
        })

    @action(detail=False, methods=['get'], url_name="my-teams", url_path="my-teams")
    def my_teams(self, request):
        return Response(TeamSerializer(self.service.my_teams(request.user), many=True).data)

    @action(detail=False, methods=['get'], url_name="available", url_path=r"event/(?P<event_id>[^/.]+)/available")
    def available(self, request, event_id=None):
        teams = self.service.available_teams(request.user, event_id)
        page = self.paginate_queryset(teams)
        if page is not None:
            return self.get_paginated_response(TeamSerializer(page, many=True).data)
        return Response(TeamSerializer(teams, many=True).data)
