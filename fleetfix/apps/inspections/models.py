"""Pre-start checklists and operator defect/breakdown reports."""

from __future__ import annotations

from uuid import uuid4

from django.db import models

from fleetfix.apps.accounts.models import Organization
from fleetfix.apps.core.config import PortalConfig, get_portal_config
from fleetfix.apps.core.models import AbstractMedia, TimeStampedMixin
from fleetfix.apps.fleet.models import Equipment
from fleetfix.apps.maintenance.models import Task


class PrestartTemplate(TimeStampedMixin):
    """A checklist operators complete before starting a unit."""

    organization = models.ForeignKey(
        Organization, on_delete=models.CASCADE, related_name="prestart_templates"
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class PrestartTemplateItem(TimeStampedMixin):
    class FieldType(models.TextChoices):
        PASS_FAIL = "pass_fail", "Pass / Fail"
        YES_NO = "yes_no", "Yes / No"
        TEXT = "text", "Text"
        NUMBER = "number", "Number"

    template = models.ForeignKey(PrestartTemplate, on_delete=models.CASCADE, related_name="items")
    label = models.CharField(max_length=200)
    field_type = models.CharField(
        max_length=20, choices=FieldType.choices, default=FieldType.PASS_FAIL
    )
    is_critical = models.BooleanField(
        default=False, help_text="A failure takes the unit out of service and raises a breakdown"
    )
    is_required = models.BooleanField(default=True)
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["sort_order", "id"]

    def __str__(self) -> str:
        return self.label


class PrestartSubmission(TimeStampedMixin):
    """One operator's completed checklist for one unit."""

    organization = models.ForeignKey(
        Organization, on_delete=models.PROTECT, related_name="prestart_submissions"
    )
    equipment = models.ForeignKey(
        Equipment, on_delete=models.PROTECT, related_name="prestart_submissions"
    )
    template = models.ForeignKey(
        PrestartTemplate, on_delete=models.PROTECT, related_name="submissions"
    )
    operator_name = models.CharField(max_length=200)
    operator_phone = models.CharField(max_length=50, blank=True)
    equipment_reading = models.PositiveIntegerField()
    ip_address = models.GenericIPAddressField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Pre-start #{self.pk} for {self.equipment} by {self.operator_name}"

    @property
    def has_failures(self) -> bool:
        return any(item.generated_task_id for item in self.items.all())


class PrestartSubmissionItem(TimeStampedMixin):
    submission = models.ForeignKey(
        PrestartSubmission, on_delete=models.CASCADE, related_name="items"
    )
    template_item = models.ForeignKey(
        PrestartTemplateItem, on_delete=models.PROTECT, related_name="submission_items"
    )
    result = models.CharField(max_length=255, blank=True)
    failure_description = models.TextField(blank=True)
    generated_task = models.ForeignKey(
        Task,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="prestart_items",
    )

    class Meta:
        ordering = ["template_item__sort_order", "id"]

    def __str__(self) -> str:
        return f"{self.template_item.label}: {self.result or '-'}"


def prestart_media_folder(config: PortalConfig, submission: PrestartSubmission) -> str:
    return f"{config.prestart_media_bucket}/{submission.equipment_id}/prestart/{submission.pk}"


def prestart_item_media_upload_to(instance: PrestartSubmissionItemMedia, filename: str) -> str:
    folder = prestart_media_folder(get_portal_config(), instance.submission_item.submission)
    return f"{folder}/{uuid4()}-{filename}"


class PrestartSubmissionItemMedia(AbstractMedia):
    """Photo or video attached to one checklist answer."""

    parent_field_name = "submission_item"

    submission_item = models.ForeignKey(
        PrestartSubmissionItem, on_delete=models.CASCADE, related_name="media"
    )
    file = models.FileField(upload_to=prestart_item_media_upload_to, max_length=255)

    class Meta(AbstractMedia.Meta):
        verbose_name = "Pre-start item media"
        verbose_name_plural = "Pre-start item media"


class DefectReportQuerySet(models.QuerySet):
    def for_organization(self, organization):
        return self.filter(organization=organization)

    def unlinked_critical(self):
        """Critical reports that never produced a task."""
        return self.filter(severity=DefectReport.Severity.CRITICAL, generated_task__isnull=True)


class DefectReport(TimeStampedMixin):
    """A defect or breakdown reported by an operator through the QR portal."""

    class Severity(models.TextChoices):
        LOW = "low", "Low"
        MEDIUM = "medium", "Medium"
        HIGH = "high", "High"
        CRITICAL = "critical", "Critical"

    organization = models.ForeignKey(
        Organization, on_delete=models.PROTECT, related_name="defect_reports"
    )
    equipment = models.ForeignKey(
        Equipment, on_delete=models.PROTECT, related_name="defect_reports"
    )
    operator_name = models.CharField(max_length=200)
    operator_phone = models.CharField(max_length=50, blank=True)
    equipment_reading = models.PositiveIntegerField()
    description = models.TextField()
    severity = models.CharField(max_length=10, choices=Severity.choices, db_index=True)
    is_equipment_down = models.BooleanField(default=False)
    generated_task = models.ForeignKey(
        Task,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="defect_reports",
    )
    ip_address = models.GenericIPAddressField(null=True, blank=True)

    objects = DefectReportQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        kind = "Breakdown" if self.is_equipment_down else "Defect"
        return f"{kind} report #{self.pk} for {self.equipment}"


def defect_report_media_folder(config: PortalConfig, report: DefectReport) -> str:
    return f"{config.qr_media_bucket}/{report.equipment_id}/qr-reports"


def defect_report_media_upload_to(instance: DefectReportMedia, filename: str) -> str:
    folder = defect_report_media_folder(get_portal_config(), instance.report)
    return f"{folder}/{uuid4()}-{filename}"


class DefectReportMedia(AbstractMedia):
    """Photo or video attached to a defect or breakdown report."""

    parent_field_name = "report"

    report = models.ForeignKey(DefectReport, on_delete=models.CASCADE, related_name="media")
    file = models.FileField(upload_to=defect_report_media_upload_to, max_length=255)

    class Meta(AbstractMedia.Meta):
        verbose_name = "Defect report media"
        verbose_name_plural = "Defect report media"
