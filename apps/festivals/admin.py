from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from .models import (
    Festival, FestivalTicket, FestivalSponsor,
    Event, EventReward, EventTicket, EventSponsor, EventJudge,
    FestivalUserRole,
)


class FestivalTicketInline(admin.TabularInline):
    model = FestivalTicket
    extra = 0


class FestivalSponsorInline(admin.TabularInline):
    model = FestivalSponsor
    extra = 0


@admin.register(Festival)
class FestivalAdmin(admin.ModelAdmin):
    list_display = ('name', 'festival_type', 'city', 'state', 'start_date', 'end_date', 'mode', 'is_registration_open')
    list_filter = ('festival_type', 'visibility', 'mode', 'is_registration_open', 'state')
    search_fields = ('name', 'city', 'college')
    ordering = ('-start_date',)
    readonly_fields = ('id', 'created_at', 'updated_at')
    autocomplete_fields = ('created_by',)
    inlines = [FestivalTicketInline, FestivalSponsorInline]


class EventRewardInline(admin.TabularInline):
    model = EventReward
    extra = 0


class EventTicketInline(admin.TabularInline):
    model = EventTicket
    extra = 0


class EventSponsorInline(admin.TabularInline):
    model = EventSponsor
    extra = 0


class EventJudgeInline(admin.StackedInline):
    model = EventJudge
    extra = 0


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ('name', 'festival', 'event_type', 'status', 'is_team_event', 'team_size', 'capacity', 'start_date')
    list_filter = ('status', 'event_type', 'mode', 'is_team_event')
    search_fields = ('name', 'festival__name', 'venue')
    ordering = ('festival', 'start_date')
    readonly_fields = ('id', 'published_at', 'published_by', 'draft_version', 'last_saved_as_draft', 'created_at', 'updated_at')
    autocomplete_fields = ('festival', 'created_by')
    inlines = [EventRewardInline, EventTicketInline, EventSponsorInline, EventJudgeInline]

    fieldsets = (
        (None, {'fields': ('id', 'festival', 'name', 'event_type', 'visibility', 'mode')}),
        (_('Schedule & place'), {'fields': ('start_date', 'end_date', 'location', 'venue')}),
        (_('Participation'), {'fields': ('is_team_event', 'team_size', 'capacity')}),
        (_('Content'), {'fields': ('description', 'rulebook_link', 'image_urls')}),
        (_('Lifecycle'), {
            'fields': ('status', 'published_at', 'published_by', 'draft_version', 'last_saved_as_draft')
        }),
        (_('Audit'), {'fields': ('created_by', 'created_at', 'updated_at')}),
    )


@admin.register(FestivalUserRole)
class FestivalUserRoleAdmin(admin.ModelAdmin):
    list_display = ('user', 'festival', 'role', 'is_active', 'assigned_at', 'expires_at')
    list_filter = ('role', 'is_active')
    search_fields = ('user__email', 'festival__name')
    autocomplete_fields = ('user', 'festival', 'assigned_by')
    readonly_fields = ('id', 'assigned_at')
