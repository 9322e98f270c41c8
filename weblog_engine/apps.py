"""Django app configuration for weblog_engine."""
from django.apps import AppConfig


class WebLogEngineConfig(AppConfig):
    """Configuration for the web log engine app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "weblog_engine"
    verbose_name = "Web Log Engine"

    def ready(self):
        """Drop the cached data backend whenever the engine settings change."""
        from django.core.signals import setting_changed

        from .conf import reset_data_backend

        setting_changed.connect(reset_data_backend, dispatch_uid="weblog_engine_settings")
