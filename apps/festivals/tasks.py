"""
Celery Tasks for Festival Role Maintenance

Tasks:
- deactivate_expired_festival_roles: flips ``is_active`` off for festival
  roles whose ``expires_at`` has passed, so listings and admin screens match
  what the authorization context already treats as ineffective.
"""

from celery import shared_task
from django.utils import timezone
import logging

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    name='festivals.deactivate_expired_festival_roles',
    max_retries=3,
    default_retry_delay=60,
)
def deactivate_expired_festival_roles(self):
    """
    Deactivate festival roles past their expiry.

    Idempotent bulk update; already inactive rows are left alone.

    Returns:
        int: Number of roles deactivated
    """
    try:
        from apps.festivals.models import FestivalUserRole

        now = timezone.now()
        expired = FestivalUserRole.objects.filter(is_active=True, expires_at__isnull=False, expires_at__lte=now)

        updated_count = expired.update(is_active=False)
        if updated_count:
            logger.info(f"[Festival Roles] Deactivated {updated_count} expired festival roles")
        else:
            logger.info("[Festival Roles] No expired festival roles")
        return updated_count

    except Exception as exc:
        logger.error(f"[Festival Roles] Error deactivating expired roles: {str(exc)}", exc_info=True)
        raise self.retry(exc=exc)
