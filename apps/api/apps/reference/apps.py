"""Reference app configuration."""
from django.apps import AppConfig


class ReferenceConfig(AppConfig):
    """Lookup tables seeded at bootstrap."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.reference'
    verbose_name = 'Reference Data'

    def ready(self):
        import apps.reference.signals  # noqa
