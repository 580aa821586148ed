"""Django app configuration for django-lab-orders."""

from django.apps import AppConfig


class DjangoLabOrdersConfig(AppConfig):
    """App configuration for django-lab-orders."""

    name = "django_lab_orders"
    verbose_name = "Lab Orders"
    default_auto_field = "django.db.models.BigAutoField"
