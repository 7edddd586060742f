"""
Celery Tasks for Engagement Housekeeping

Tasks:
- cleanup_recently_viewed: deletes view history older than the retention
  window (FESTHUB_RECENTLY_VIEWED_RETENTION_DAYS)
"""

from celery import shared_task
from django.conf import settings
import logging

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    name='engagement.cleanup_recently_viewed',
    max_retries=3,
    default_retry_delay=60,
)
def cleanup_recently_viewed(self, days=None):
    """
    Returns:
        int: Number of history rows deleted
    """
    try:
        from apps.engagement.services.recently_viewed_service import RecentlyViewedService

        days = days or settings.FESTHUB_RECENTLY_VIEWED_RETENTION_DAYS
        logger.info(f"[Engagement] Cleaning recently viewed entries older than {days} days")
        return RecentlyViewedService().cleanup_old_entries(days)

    except Exception as exc:
        logger.error(f"[Engagement] Error cleaning recently viewed entries: {str(exc)}", exc_info=True)
        raise self.retry(exc=exc)
