from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from .models import FestRegistration, EventRegistration, Team, TeamMembership


@admin.register(FestRegistration)
class FestRegistrationAdmin(admin.ModelAdmin):
    list_display = ('ticket', 'user', 'festival', 'status', 'registered_at')
    list_filter = ('status', 'festival')
    search_fields = ('ticket', 'user__email', 'user__first_name', 'user__last_name', 'festival__name')
    ordering = ('-registered_at',)
    readonly_fields = ('id', 'ticket', 'qr_code', 'registered_at', 'updated_at')
    autocomplete_fields = ('user', 'festival')


@admin.register(EventRegistration)
class EventRegistrationAdmin(admin.ModelAdmin):
    list_display = ('ticket', 'user', 'event', 'registration_type', 'team', 'team_role', 'status', 'registered_at')
    list_filter = ('status', 'registration_type', 'team_role')
    search_fields = ('ticket', 'user__email', 'event__name', 'team__team_code')
    ordering = ('-registered_at',)
    readonly_fields = ('id', 'ticket', 'qr_code', 'registered_at', 'updated_at')
    autocomplete_fields = ('user', 'event', 'team', 'fest_registration')

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('user', 'event', 'team')


class TeamMembershipInline(admin.TabularInline):
    model = TeamMembership
    extra = 0
    autocomplete_fields = ('user',)
    verbose_name = _("Member")
    verbose_name_plural = _("Members")


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ('team_name', 'team_code', 'event', 'leader', 'status', 'max_size', 'created_at')
    list_filter = ('status',)
    search_fields = ('team_name', 'team_code', 'leader__email', 'event__name')
    readonly_fields = ('id', 'team_code', 'created_at', 'updated_at')
    autocomplete_fields = ('event', 'leader')
    inlines = [TeamMembershipInline]
