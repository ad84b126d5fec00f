# wallets/apps.py

"""
WALLETS APP CONFIG

Prepaid credit wallets:
- One wallet per customer identity (email), created lazily
- Append-only transaction log explaining every balance change
"""

from django.apps import AppConfig


class WalletsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "wallets"
    verbose_name = "Customer Wallets"
