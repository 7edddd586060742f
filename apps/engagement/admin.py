from django.contrib import admin

from .models import Wishlist, RecentlyViewed


@admin.register(Wishlist)
class WishlistAdmin(admin.ModelAdmin):
    list_display = ('user', 'festival', 'added_at')
    search_fields = ('user__email', 'festival__name')
    autocomplete_fields = ('user', 'festival')


@admin.register(RecentlyViewed)
class RecentlyViewedAdmin(admin.ModelAdmin):
    list_display = ('user', 'festival', 'view_count', 'viewed_at')
    search_fields = ('user__email', 'festival__name')
    ordering = ('-viewed_at',)
    autocomplete_fields = ('user', 'festival')
