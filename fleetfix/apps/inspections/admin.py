"""Admin configuration for inspections app."""

from django.contrib import admin

from fleetfix.apps.core.admin import MediaInline
from fleetfix.apps.inspections.models import (
    DefectReport,
    DefectReportMedia,
    PrestartSubmission,
    PrestartSubmissionItem,
    PrestartSubmissionItemMedia,
    PrestartTemplate,
    PrestartTemplateItem,
)


class PrestartTemplateItemInline(admin.TabularInline):
    model = PrestartTemplateItem
    extra = 0
    fields = ["sort_order", "label", "field_type", "is_critical", "is_required"]
    ordering = ["sort_order", "id"]


@admin.register(PrestartTemplate)
class PrestartTemplateAdmin(admin.ModelAdmin):
    list_display = ["name", "organization", "is_active", "item_count"]
    list_filter = ["organization", "is_active"]
    search_fields = ["name"]
    inlines = [PrestartTemplateItemInline]

    @admin.display(description="Items")
    def item_count(self, obj):
        return obj.items.count()


class PrestartSubmissionItemInline(admin.TabularInline):
    model = PrestartSubmissionItem
    extra = 0
    fields = ["template_item", "result", "failure_description", "generated_task"]
    readonly_fields = fields
    can_delete = False


@admin.register(PrestartSubmission)
class PrestartSubmissionAdmin(admin.ModelAdmin):
    list_display = ["id", "equipment", "operator_name", "equipment_reading", "created_at"]
    list_filter = ["organization", "created_at"]
    search_fields = ["operator_name", "equipment__unit_name"]
    readonly_fields = ["ip_address", "created_at", "updated_at"]
    inlines = [PrestartSubmissionItemInline]


class PrestartSubmissionItemMediaInline(MediaInline):
    model = PrestartSubmissionItemMedia


@admin.register(PrestartSubmissionItem)
class PrestartSubmissionItemAdmin(admin.ModelAdmin):
    list_display = ["id", "submission", "template_item", "result", "generated_task"]
    search_fields = ["template_item__label", "failure_description"]
    inlines = [PrestartSubmissionItemMediaInline]


class DefectReportMediaInline(MediaInline):
    model = DefectReportMedia


@admin.register(DefectReport)
class DefectReportAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "equipment",
        "severity",
        "is_equipment_down",
        "operator_name",
        "generated_task",
        "created_at",
    ]
    list_filter = ["severity", "is_equipment_down", "organization"]
    search_fields = ["description", "operator_name", "equipment__unit_name"]
    readonly_fields = ["ip_address", "created_at", "updated_at"]
    inlines = [DefectReportMediaInline]
