from rest_framework import serializers
from django.utils.translation import gettext_lazy as _

from apps.festivals.api.serializers import SimplifiedFestivalSerializer, SimplifiedEventSerializer
from apps.registrations.models import FestRegistration, EventRegistration, Team
from apps.users.api.serializers import SimplifiedFestUserSerializer


class FestRegistrationSerializer(serializers.ModelSerializer):
    '''
    Fest registration with its ticket; ``reference`` is the id to use for cancellation.
    '''
    festival = SimplifiedFestivalSerializer(read_only=True)
    user = SimplifiedFestUserSerializer(read_only=True)
    status_display = serializers.CharField(source="get_status_display", read_only=True)
    reference = serializers.CharField(read_only=True)

    class Meta:
        model = FestRegistration
        fields = ["id", "reference", "festival", "user", "status", "status_display", "ticket", "qr_code", "registered_at"]
        read_only_fields = fields


class TeamSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Team
        fields = ["id", "team_name", "team_code", "status"]
        read_only_fields = fields


class EventRegistrationSerializer(serializers.ModelSerializer):
    event = SimplifiedEventSerializer(read_only=True)
    user = SimplifiedFestUserSerializer(read_only=True)
    team = TeamSummarySerializer(read_only=True)
    status_display = serializers.CharField(source="get_status_display", read_only=True)
    reference = serializers.CharField(read_only=True)

    class Meta:
        model = EventRegistration
        fields = [
            "id", "reference", "event", "user", "registration_type", "team", "team_role",
            "status", "status_display", "ticket", "qr_code", "payment_method", "registered_at",
        ]
        read_only_fields = fields


class CandidateSerializer(serializers.Serializer):
    '''
    Compact row for organiser candidate listings (no QR payload).
    '''
    id = serializers.UUIDField()
    reference = serializers.CharField()
    user = SimplifiedFestUserSerializer()
    phone = serializers.CharField(source="user.phone", allow_null=True)
    gender = serializers.CharField(source="user.gender", allow_null=True)
    institute_name = serializers.CharField(source="user.institute_name", allow_null=True)
    status = serializers.CharField()
    ticket = serializers.CharField()
    registration_type = serializers.CharField(required=False)
    team = TeamSummarySerializer(required=False, allow_null=True)
    team_role = serializers.CharField(required=False, allow_null=True)
    registered_at = serializers.DateTimeField()


class TeamMemberSerializer(serializers.Serializer):
    id = serializers.UUIDField(source="user.id")
    email = serializers.EmailField(source="user.email")
    full_name = serializers.CharField(source="user.get_full_name")
    joined_at = serializers.DateTimeField()


class TeamSerializer(serializers.ModelSerializer):
    """
    Team with its members.

    Response example:
    {
        "id": "123e4567-e89b-12d3-a456-426614174005",
        "team_name": "Alpha",
        "team_code": "K7Q2ZP4M",
        "status": "active",
        "max_size": 3,
        "current_size": 1,
        "available_slots": 2,
        "leader": {"id": "...", "email": "lead@example.com", "full_name": "Lea Der"},
        "members": [{"id": "...", "email": "lead@example.com", "full_name": "Lea Der", "joined_at": "..."}]
    }
    """
    event = SimplifiedEventSerializer(read_only=True)
    leader = SimplifiedFestUserSerializer(read_only=True)
    members = TeamMemberSerializer(source="memberships", many=True, read_only=True)
    current_size = serializers.IntegerField(read_only=True)
    available_slots = serializers.IntegerField(read_only=True)
    status_display = serializers.CharField(source="get_status_display", read_only=True)

    class Meta:
        model = Team
        fields = [
            "id", "team_name", "team_code", "event", "leader", "members",
            "max_size", "current_size", "available_slots",
            "status", "status_display", "description", "created_at",
        ]
        read_only_fields = fields


class CreateTeamSerializer(serializers.Serializer):
    event = serializers.UUIDField()
    team_name = serializers.CharField(max_length=100)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class JoinTeamSerializer(serializers.Serializer):
    team_code = serializers.CharField(max_length=16)


class MemberReferenceSerializer(serializers.Serializer):
    member_id = serializers.UUIDField(help_text=_("User id of the team member"))


class TransferLeadershipSerializer(serializers.Serializer):
    new_leader_id = serializers.UUIDField(help_text=_("User id of the member who becomes leader"))
