# storefront/apps.py

"""
STOREFRONT APP CONFIG

Public shop for reading services:
- Service catalog, orders + intake questionnaire
- Testimonials and FAQ content
- Admin console stats
"""

from django.apps import AppConfig


class StorefrontConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "storefront"
    verbose_name = "Storefront"
