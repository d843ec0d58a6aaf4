from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "fleetfix.apps.core"
    verbose_name = "Core"

    def ready(self):
        from django.core.signals import setting_changed

        from fleetfix.apps.core.config import _reset_portal_config

        setting_changed.connect(_reset_portal_config)
