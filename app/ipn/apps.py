"""
IPN app configuration.

On startup the modules listed in IPN_HANDLER_MODULES are imported so that
their ``@ipn_handlers.on(...)`` decorators run before the first request.
The listener used by the webhook view is then built once from settings, so
a bad IPN_* setting (such as a missing IPN_CA_BUNDLE) stops the process at
boot instead of failing every request.
"""

from importlib import import_module

from django.apps import AppConfig
from django.conf import settings


class IpnConfig(AppConfig):
    """Configuration for the ipn application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "ipn"
    verbose_name = "PayPal IPN"

    def ready(self):
        """Import handler modules and build the process-wide listener."""
        for module_path in getattr(settings, "IPN_HANDLER_MODULES", []):
            import_module(module_path)

        from ipn.listener import IPNListener

        self.listener = IPNListener.from_settings()
