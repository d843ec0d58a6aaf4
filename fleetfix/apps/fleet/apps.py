from django.apps import AppConfig


class FleetConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "fleetfix.apps.fleet"
    verbose_name = "Fleet"
