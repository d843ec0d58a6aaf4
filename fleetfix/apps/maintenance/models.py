"""Maintenance tasks."""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.urls import reverse
from simple_history.models import HistoricalRecords

from fleetfix.apps.accounts.models import Organization
from fleetfix.apps.core.models import TimeStampedMixin
from fleetfix.apps.fleet.models import Customer, Equipment


class TaskQuerySet(models.QuerySet):
    def for_organization(self, organization):
        return self.filter(organization=organization)

    def open(self):
        """Return tasks that are neither completed nor rejected."""
        return self.exclude(status__in=Task.CLOSED_STATUSES)

    def overdue(self, now):
        return self.open().filter(scheduled_date__isnull=False, scheduled_date__lt=now)


class Task(TimeStampedMixin):
    """A unit of maintenance work on one piece of equipment."""

    class Type(models.TextChoices):
        BREAKDOWN = "breakdown", "Breakdown"
        DEFECT = "defect", "Defect"
        PLANNED_MAINTENANCE = "planned_maintenance", "Planned maintenance"

    class Status(models.TextChoices):
        """Lifecycle state of a task. Legal moves live in ``transitions.py``."""

        CREATED = "created", "Created"
        APPROVED = "approved", "Approved"
        PREPARED = "prepared", "Prepared"
        ASSIGNED = "assigned", "Assigned"
        ACCEPTED = "accepted", "Accepted"
        IN_PROGRESS = "in_progress", "In progress"
        COMPLETED = "completed", "Completed"
        NOT_APPROVED = "not_approved", "Not approved"

    CLOSED_STATUSES = (Status.COMPLETED, Status.NOT_APPROVED)

    organization = models.ForeignKey(Organization, on_delete=models.PROTECT, related_name="tasks")
    equipment = models.ForeignKey(Equipment, on_delete=models.PROTECT, related_name="tasks")
    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name="tasks",
        help_text="Owner of the equipment when the task was raised",
    )
    type = models.CharField(max_length=30, choices=Type.choices)
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.CREATED, db_index=True
    )
    description = models.TextField(blank=True)
    reported_by_name = models.CharField(max_length=200, blank=True)
    reported_by_phone = models.CharField(max_length=50, blank=True)
    equipment_reading_at_report = models.PositiveIntegerField(null=True, blank=True)
    scheduled_date = models.DateTimeField(null=True, blank=True)
    assigned_mechanic = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_tasks",
    )

    objects = TaskQuerySet.as_manager()
    history = HistoricalRecords()

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.get_type_display()} #{self.pk} on {self.equipment}"

    @property
    def is_closed(self) -> bool:
        return self.status in self.CLOSED_STATUSES

    def get_absolute_url(self):
        return reverse("task-detail", args=[self.pk])
