"""Admin configuration for fleet app."""

from django import forms
from django.contrib import admin
from simple_history.admin import SimpleHistoryAdmin

from fleetfix.apps.fleet.models import Customer, Equipment
from fleetfix.apps.fleet.readings import check_reading


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("name", "organization", "contact_name", "phone", "email")
    list_filter = ("organization",)
    search_fields = ("name", "contact_name", "email", "phone")


class EquipmentAdminForm(forms.ModelForm):
    class Meta:
        model = Equipment
        fields = "__all__"

    def clean_current_reading(self):
        reading = self.cleaned_data["current_reading"]
        if self.instance.pk is not None and reading is not None:
            stored = Equipment.objects.only("current_reading").get(pk=self.instance.pk)
            check_reading(stored, reading)
        return reading


@admin.register(Equipment)
class EquipmentAdmin(SimpleHistoryAdmin):
    form = EquipmentAdminForm
    list_display = (
        "unit_name",
        "customer",
        "organization",
        "current_reading",
        "tracking_unit",
        "operating_status",
        "status",
        "next_service_due",
    )
    list_filter = ("organization", "operating_status", "status", "tracking_unit")
    search_fields = ("unit_name", "make", "model", "serial_number", "customer__name")
    autocomplete_fields = ("customer",)
    readonly_fields = ("created_at", "updated_at")
