from rest_framework import serializers
from django.db import transaction
from django.utils.translation import gettext_lazy as _

from apps.festivals.models import Festival, FestivalTicket, FestivalSponsor, FestivalUserRole
from apps.users.api.serializers import SimplifiedFestUserSerializer


class FestivalTicketSerializer(serializers.ModelSerializer):
    class Meta:
        model = FestivalTicket
        fields = ["id", "name", "price", "description"]
        read_only_fields = ["id"]


class FestivalSponsorSerializer(serializers.ModelSerializer):
    class Meta:
        model = FestivalSponsor
        fields = ["id", "name", "logo", "website"]
        read_only_fields = ["id"]


class FestivalSerializer(serializers.ModelSerializer):
    """
    Festival with its owned tickets and sponsors.

    Example API object:
    {
        "name": "Techfest 2026",
        "festival_type": "technical",
        "visibility": "public",
        "state": "Maharashtra",
        "city": "Mumbai",
        "venue": "Main Campus",
        "start_date": "2026-12-10T09:00:00Z",
        "end_date": "2026-12-12T18:00:00Z",
        "mode": "offline",
        "tickets": [{"name": "General", "price": "0.00"}],
        "sponsors": [{"name": "Acme", "website": "https://acme.example"}]
    }

    Nested lists replace the existing children when sent on update.
    """
    tickets = FestivalTicketSerializer(many=True, required=False)
    sponsors = FestivalSponsorSerializer(many=True, required=False)
    created_by = SimplifiedFestUserSerializer(read_only=True)
    event_count = serializers.IntegerField(source="events.count", read_only=True)

    class Meta:
        model = Festival
        fields = [
            "id", "name", "festival_type", "visibility",
            "state", "city", "venue", "college",
            "start_date", "end_date", "mode",
            "about", "contact", "email", "is_registration_open",
            "tickets", "sponsors", "event_count",
            "created_by", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "created_by", "created_at", "updated_at", "event_count"]

    def validate(self, attrs):
        start = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start and end and end < start:
            raise serializers.ValidationError({"end_date": _("End date must be after the start date.")})
        return attrs

    def create(self, validated_data):
        tickets = validated_data.pop("tickets", [])
        sponsors = validated_data.pop("sponsors", [])

        with transaction.atomic():
            festival = Festival.objects.create(**validated_data)
            FestivalTicket.objects.bulk_create([FestivalTicket(festival=festival, **t) for t in tickets])
            FestivalSponsor.objects.bulk_create([FestivalSponsor(festival=festival, **s) for s in sponsors])
        return festival

    def update(self, instance, validated_data):
        tickets = validated_data.pop("tickets", None)
        sponsors = validated_data.pop("sponsors", None)

        with transaction.atomic():
            instance = super().update(instance, validated_data)
            if tickets is not None:
                instance.tickets.all().delete()
                FestivalTicket.objects.bulk_create([FestivalTicket(festival=instance, **t) for t in tickets])
            if sponsors is not None:
                instance.sponsors.all().delete()
                FestivalSponsor.objects.bulk_create([FestivalSponsor(festival=instance, **s) for s in sponsors])
        return instance


class SimplifiedFestivalSerializer(serializers.ModelSerializer):
    class Meta:
        model = Festival
        fields = ["id", "name", "city", "state", "start_date", "end_date", "mode"]


class FestivalUserRoleSerializer(serializers.ModelSerializer):
    user = SimplifiedFestUserSerializer(read_only=True)
    assigned_by = SimplifiedFestUserSerializer(read_only=True)
    role_display = serializers.CharField(source="get_role_display", read_only=True)

    class Meta:
        model = FestivalUserRole
        fields = ["id", "user", "festival", "role", "role_display", "assigned_by", "is_active", "assigned_at", "expires_at"]
        read_only_fields = fields


class AssignFestivalRoleSerializer(serializers.Serializer):
    user = serializers.UUIDField()
    role = serializers.ChoiceField(choices=FestivalUserRole.FestivalRole.choices)
    expires_at = serializers.DateTimeField(required=False, allow_null=True)


class RemoveFestivalRoleSerializer(serializers.Serializer):
    user = serializers.UUIDField()
