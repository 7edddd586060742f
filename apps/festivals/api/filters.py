import django_filters
from django.db.models import Q

from apps.festivals.models import Festival, Event


class FestivalFilter(django_filters.FilterSet):
    '''
    Festival discovery filters
    '''
    city = django_filters.CharFilter(lookup_expr="iexact")
    state = django_filters.CharFilter(lookup_expr="iexact")
    college = django_filters.CharFilter(lookup_expr="icontains")
    starts_after = django_filters.IsoDateTimeFilter(field_name="start_date", lookup_expr="gte")
    starts_before = django_filters.IsoDateTimeFilter(field_name="start_date", lookup_expr="lte")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Festival
        fields = ["festival_type", "visibility", "mode", "is_registration_open"]

    def filter_search(self, queryset, name, value):
        return queryset.filter(
            Q(name__icontains=value) |
            Q(about__icontains=value) |
            Q(city__icontains=value) |
            Q(college__icontains=value)
        )


class EventFilter(django_filters.FilterSet):
    festival = django_filters.UUIDFilter(field_name="festival_id")
    name = django_filters.CharFilter(lookup_expr="icontains")
    event_type__in = django_filters.CharFilter(method="filter_event_types")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Event
        fields = ["event_type", "status", "mode", "visibility", "is_team_event"]

    def filter_event_types(self, queryset, name, value):
        """Filter by multiple event types separated by comma"""
        event_types = [event_type.strip() for event_type in value.split(',')]
        return queryset.filter(event_type__in=event_types)

    def filter_search(self, queryset, name, value):
        return queryset.filter(
            Q(name__icontains=value) |
            Q(description__icontains=value) |
            Q(venue__icontains=value)
        )
