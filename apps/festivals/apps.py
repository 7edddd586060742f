from django.apps import AppConfig


class FestivalsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.festivals'
    label = 'festivals'
