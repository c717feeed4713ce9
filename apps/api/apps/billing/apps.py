"""Billing app configuration."""
from django.apps import AppConfig


class BillingConfig(AppConfig):
    """Invoices and their service lines."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.billing'
    verbose_name = 'Billing'
