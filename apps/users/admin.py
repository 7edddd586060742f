from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from django.utils.translation import gettext_lazy as _

from .models import FestUser


@admin.register(FestUser)
class FestUserAdmin(UserAdmin):
    list_display = ('email', 'first_name', 'last_name', 'role', 'institute_name', 'is_active')
    list_filter = ('role', 'gender', 'is_active', 'is_staff')
    search_fields = ('email', 'first_name', 'last_name', 'institute_name')
    ordering = ('first_name', 'last_name')
    readonly_fields = ('id', 'date_joined', 'updated_at')

    fieldsets = (
        (None, {'fields': ('id', 'email', 'password')}),
        (_('Identity'), {'fields': ('first_name', 'last_name', 'role')}),
        (_('Personal information'), {
            'fields': ('phone', 'date_of_birth', 'gender', 'city', 'state', 'institute_name')
        }),
        (_('Permissions'), {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        (_('Dates'), {'fields': ('last_login', 'date_joined', 'updated_at')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'first_name', 'last_name', 'role', 'password1', 'password2'),
        }),
    )
