# ledgerapp/apps.py
from django.apps import AppConfig


class LedgerappConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "ledgerapp"

    def ready(self):
        # ✅ Only load signals
        from . import signals  # noqa: F401
