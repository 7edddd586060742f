"""
Celery Configuration for Core Project

This module configures Celery for asynchronous task processing.
Redis is used as both broker and result backend, on separate database
indices:

Redis Database Allocation:
- DB 1: Celery broker
- DB 2: Celery results

Workers must be run as separate processes:
    celery -A core worker -l info
    celery -A core beat -l info
"""

import os
from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'core.settings')

app = Celery('core')

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
# - namespace='CELERY' means all celery-related configuration keys
#   should have a `CELERY_` prefix.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Load task modules from all registered Django apps.
app.autodiscover_tasks()

app.conf.beat_schedule = {
    'deactivate-expired-festival-roles': {
        'task': 'festivals.deactivate_expired_festival_roles',
        'schedule': crontab(minute=0),
    },
    'cleanup-recently-viewed': {
        'task': 'engagement.cleanup_recently_viewed',
        'schedule': crontab(hour=3, minute=30),
    },
}
