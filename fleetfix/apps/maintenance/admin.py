"""Admin configuration for maintenance app."""

from django.contrib import admin
from django.db import transaction
from simple_history.admin import SimpleHistoryAdmin

from fleetfix.apps.fleet.readings import mark_down
from fleetfix.apps.maintenance.models import Task


@admin.register(Task)
class TaskAdmin(SimpleHistoryAdmin):
    list_display = ["id", "type", "status", "equipment", "customer", "scheduled_date", "created_at"]
    list_filter = ["status", "type", "organization"]
    search_fields = ["description", "equipment__unit_name", "reported_by_name"]
    autocomplete_fields = ["equipment", "assigned_mechanic"]
    # Status changes only through TaskDetailView
    readonly_fields = ["status", "customer", "created_at", "updated_at"]
    ordering = ["-created_at"]

    def save_model(self, request, obj, form, change):
        if change:
            super().save_model(request, obj, form, change)
            return

        obj.status = Task.Status.CREATED
        obj.customer_id = obj.equipment.customer_id
        obj.organization_id = obj.equipment.organization_id
        with transaction.atomic():
            super().save_model(request, obj, form, change)
            if obj.type == Task.Type.BREAKDOWN:
                mark_down(obj.equipment)
