"""Customers and the equipment they own."""

from __future__ import annotations

from django.db import models
from django.urls import reverse
from simple_history.models import HistoricalRecords

from fleetfix.apps.accounts.models import Organization
from fleetfix.apps.core.models import TimeStampedMixin


class Customer(TimeStampedMixin):
    organization = models.ForeignKey(
        Organization, on_delete=models.PROTECT, related_name="customers"
    )
    name = models.CharField(max_length=200)
    contact_name = models.CharField(max_length=200, blank=True)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=50, blank=True)
    address = models.TextField(blank=True)
    notes = models.TextField(blank=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class EquipmentQuerySet(models.QuerySet):
    def for_organization(self, organization):
        return self.filter(organization=organization)

    def active(self):
        """Return equipment that has not been deactivated."""
        return self.filter(status=Equipment.Status.ACTIVE)


class Equipment(TimeStampedMixin):
    """A tracked unit with a usage reading and an operating status."""

    class TrackingUnit(models.TextChoices):
        HOURS = "hours", "Hours"
        KILOMETERS = "kilometers", "Kilometers"

    class OperatingStatus(models.TextChoices):
        UP = "up", "Up"
        DOWN = "down", "Down"

    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        INACTIVE = "inactive", "Inactive"

    organization = models.ForeignKey(
        Organization, on_delete=models.PROTECT, related_name="equipment"
    )
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name="equipment")
    unit_name = models.CharField(max_length=200, help_text="Fleet number or name, e.g. 'EX-12'")
    make = models.CharField(max_length=100, blank=True)
    model = models.CharField(max_length=100, blank=True)
    serial_number = models.CharField(max_length=100, blank=True)
    tracking_unit = models.CharField(
        max_length=20, choices=TrackingUnit.choices, default=TrackingUnit.HOURS
    )
    current_reading = models.PositiveIntegerField(
        default=0, help_text="Hour meter or odometer reading. Only ever moves forward."
    )
    operating_status = models.CharField(
        max_length=10,
        choices=OperatingStatus.choices,
        default=OperatingStatus.UP,
        db_index=True,
    )
    status = models.CharField(
        max_length=10, choices=Status.choices, default=Status.ACTIVE, db_index=True
    )
    next_service_due = models.PositiveIntegerField(
        null=True, blank=True, help_text="Reading at which the next service is due"
    )
    next_service_type = models.CharField(max_length=100, blank=True)
    service_interval_hours = models.PositiveIntegerField(null=True, blank=True)
    service_interval_kms = models.PositiveIntegerField(null=True, blank=True)
    prestart_template = models.ForeignKey(
        "inspections.PrestartTemplate",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="equipment",
        help_text="Checklist operators complete before starting this unit",
    )

    objects = EquipmentQuerySet.as_manager()
    history = HistoricalRecords()

    class Meta:
        ordering = ["unit_name"]
        verbose_name_plural = "equipment"

    def __str__(self) -> str:
        return self.unit_name

    @property
    def display_name(self) -> str:
        details = " ".join(part for part in (self.make, self.model) if part)
        return f"{self.unit_name} ({details})" if details else self.unit_name

    @property
    def is_down(self) -> bool:
        return self.operating_status == self.OperatingStatus.DOWN

    @property
    def reading_unit_label(self) -> str:
        """Short unit word used in operator messages: "hours" or "kms"."""
        return "hours" if self.tracking_unit == self.TrackingUnit.HOURS else "kms"

    @property
    def service_interval(self) -> int | None:
        """The service interval matching this unit's tracking unit."""
        if self.tracking_unit == self.TrackingUnit.HOURS:
            return self.service_interval_hours
        return self.service_interval_kms

    @property
    def remaining_to_service(self) -> int | None:
        if self.next_service_due is None:
            return None
        return self.next_service_due - self.current_reading

    def get_portal_url(self) -> str:
        return reverse("portal-equipment", args=[self.pk])

    def get_qr_url(self) -> str:
        return reverse("equipment-qr", args=[self.pk])
