"""Authz app configuration."""
from django.apps import AppConfig


class AuthzConfig(AppConfig):
    """Users, staff and notifications."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.authz'
    verbose_name = 'Users & Staff'
