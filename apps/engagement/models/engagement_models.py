from django.db import models
from django.conf import settings
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

import uuid


class Wishlist(models.Model):
    '''
    A festival a user saved for later
    '''
    id = models.UUIDField(verbose_name=_("wishlist item id"), default=uuid.uuid4, editable=False, primary_key=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="wishlist",
        verbose_name=_("user")
    )
    festival = models.ForeignKey(
        "festivals.Festival",
        on_delete=models.CASCADE,
        related_name="wishlisted_by",
        verbose_name=_("festival")
    )
    added_at = models.DateTimeField(auto_now_add=True, verbose_name=_("added at"))

    class Meta:
        verbose_name = _("wishlist item")
        verbose_name_plural = _("wishlist items")
        ordering = ["-added_at"]
        constraints = [
            models.UniqueConstraint(fields=["user", "festival"], name="unique_wishlist_festival"),
        ]

    def __str__(self):
        return f"{self.user} ♥ {self.festival}"


class RecentlyViewed(models.Model):
    '''
    Last time (and how often) a user opened a festival page
    '''
    id = models.UUIDField(verbose_name=_("view id"), default=uuid.uuid4, editable=False, primary_key=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="recently_viewed",
        verbose_name=_("user")
    )
    festival = models.ForeignKey(
        "festivals.Festival",
        on_delete=models.CASCADE,
        related_name="viewed_by",
        verbose_name=_("festival")
    )
    viewed_at = models.DateTimeField(default=timezone.now, verbose_name=_("viewed at"))
    view_count = models.PositiveIntegerField(default=1, verbose_name=_("view count"))

    class Meta:
        verbose_name = _("recently viewed festival")
        verbose_name_plural = _("recently viewed festivals")
        ordering = ["-viewed_at"]
        constraints = [
            models.UniqueConstraint(fields=["user", "festival"], name="unique_recently_viewed_festival"),
        ]
        indexes = [
            models.Index(fields=["user", "-viewed_at"], name="recently_viewed_user_recent"),
        ]

    def __str__(self):
        return f"{self.user} viewed {self.festival} x{self.view_count}"
