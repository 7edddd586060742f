"""
FestHub project package.

The Celery app is imported here so that ``shared_task`` tasks in
apps.festivals and apps.engagement bind to it as soon as Django loads.
"""

from .celery import app as celery_app

__all__ = ('celery_app',)
