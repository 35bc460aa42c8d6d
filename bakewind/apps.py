"""
Bakewind app configuration.
"""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class BakewindConfig(AppConfig):
    """Bakewind application configuration."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "bakewind"
    verbose_name = _("Production")

    def ready(self):
        """Build the lock registry for the lifetime of this process."""
        from bakewind.conf import build_lock_store, get_setting
        from bakewind.locks import LockRegistry

        self.lock_registry = LockRegistry(
            store_factory=build_lock_store,
            ttl_seconds=get_setting("LOCK_TTL_SECONDS"),
        )
