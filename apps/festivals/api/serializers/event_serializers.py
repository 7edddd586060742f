from rest_framework import serializers
from django.db import transaction
from django.utils.translation import gettext_lazy as _

from apps.festivals.models import Event, EventReward, EventTicket, EventSponsor, EventJudge
from apps.users.api.serializers import SimplifiedFestUserSerializer


class EventRewardSerializer(serializers.ModelSerializer):
    class Meta:
        model = EventReward
        fields = ["id", "rank", "cash", "coupon", "goodies", "description"]
        read_only_fields = ["id"]


class EventTicketSerializer(serializers.ModelSerializer):
    class Meta:
        model = EventTicket
        fields = [
            "id", "name", "fee_type", "price", "available_from", "available_till",
            "max_quantity", "current_quantity", "description"
        ]
        read_only_fields = ["id", "current_quantity"]


class EventSponsorSerializer(serializers.ModelSerializer):
    class Meta:
        model = EventSponsor
        fields = ["id", "name", "logo", "website"]
        read_only_fields = ["id"]


class EventJudgeSerializer(serializers.ModelSerializer):
    class Meta:
        model = EventJudge
        fields = ["id", "name", "photo", "bio", "mobile", "email"]
        read_only_fields = ["id"]


# nested children owned by an event: (field name, model, related name)
EVENT_CHILDREN = (
    ("rewards", EventReward),
    ("tickets", EventTicket),
    ("sponsors", EventSponsor),
    ("judges", EventJudge),
)


class EventSerializer(serializers.ModelSerializer):
    """
    Event with its embedded rewards, tickets, sponsors and judges.

    Example API object:
    {
        "festival": "456e7890-e89b-12d3-a456-426614174001",
        "name": "Code Sprint",
        "event_type": "hackathon",
        "visibility": "public",
        "mode": "offline",
        "location": "Block A",
        "venue": "Lab 3",
        "is_team_event": true,
        "team_size": 3,
        "rewards": [{"rank": 1, "cash": "5000.00"}],
        "judges": [{"name": "Dr. Rao"}]
    }

    Lifecycle fields (status, published_at, ...) are read only here and
    change through the publish/unpublish/save-draft/archive actions.
    """
    rewards = EventRewardSerializer(many=True, required=False)
    tickets = EventTicketSerializer(many=True, required=False)
    sponsors = EventSponsorSerializer(many=True, required=False)
    judges = EventJudgeSerializer(many=True, required=False)
    created_by = SimplifiedFestUserSerializer(read_only=True)
    published_by = SimplifiedFestUserSerializer(read_only=True)
    status_display = serializers.CharField(source="get_status_display", read_only=True)

    class Meta:
        model = Event
        fields = [
            "id", "festival", "name", "event_type", "visibility", "mode",
            "location", "venue", "start_date", "end_date",
            "rulebook_link", "description", "image_urls",
            "is_team_event", "team_size", "capacity",
            "status", "status_display", "published_at", "published_by",
            "draft_version", "last_saved_as_draft",
            "rewards", "tickets", "sponsors", "judges",
            "created_by", "created_at", "updated_at",
        ]
        read_only_fields = [
            "id", "status", "status_display", "published_at", "published_by",
            "draft_version", "last_saved_as_draft", "created_by", "created_at", "updated_at",
        ]

    def validate(self, attrs):
        is_team_event = attrs.get("is_team_event", getattr(self.instance, "is_team_event", False))
        team_size = attrs.get("team_size", getattr(self.instance, "team_size", None))
        if is_team_event and not team_size:
            raise serializers.ValidationError({"team_size": _("Team size is required for team events.")})

        start = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start and end and end < start:
            raise serializers.ValidationError({"end_date": _("End date must be after the start date.")})

        if self.instance is not None and "festival" in attrs and attrs["festival"] != self.instance.festival:
            raise serializers.ValidationError({"festival": _("An event cannot be moved to another festival.")})
        return attrs

    def _write_children(self, event, children, replace):
        for field, model in EVENT_CHILDREN:
            items = children.get(field)
            if items is None:
                continue
            if replace:
                getattr(event, field).all().delete()
            model.objects.bulk_create([model(event=event, **item) for item in items])

    def create(self, validated_data):
        children = {field: validated_data.pop(field, None) for field, _model in EVENT_CHILDREN}
        with transaction.atomic():
            event = Event.objects.create(**validated_data)
            self._write_children(event, children, replace=False)
        return event

    def update(self, instance, validated_data):
        children = {field: validated_data.pop(field, None) for field, _model in EVENT_CHILDREN}
        with transaction.atomic():
            instance = super().update(instance, validated_data)
            self._write_children(instance, children, replace=True)
        return instance


class SimplifiedEventSerializer(serializers.ModelSerializer):
    festival_name = serializers.CharField(source="festival.name", read_only=True)

    class Meta:
        model = Event
        fields = ["id", "name", "festival", "festival_name", "is_team_event", "team_size", "status", "start_date"]
