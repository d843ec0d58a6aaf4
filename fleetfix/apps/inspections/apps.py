from django.apps import AppConfig


class InspectionsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "fleetfix.apps.inspections"
    verbose_name = "Inspections"
