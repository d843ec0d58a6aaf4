"""Dashboard selectors: read-only queries behind the staff dashboard.

Everything here is scoped to one organization and recomputed on each
request. List sizes default to admin-editable constance values and are
clamped so a bad value cannot produce an empty or unbounded list.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field

from constance import config
from django.db.models import Case, ExpressionWrapper, F, IntegerField, When
from django.utils import timezone

from fleetfix.apps.accounts.models import Organization
from fleetfix.apps.fleet.models import Equipment
from fleetfix.apps.inspections.models import DefectReport
from fleetfix.apps.maintenance.models import Task

ATTENTION_LIMIT_MAX = 25
ALERT_LIMIT_MAX = 30
ACTIVITY_LIMIT_DEFAULT = 10
ACTIVITY_LIMIT_MAX = 25

# Remaining reading at or below this share of the interval counts as "approaching"
SERVICE_WARNING_PERCENT = 10

# created_at and updated_at are stamped separately on insert, so they differ by microseconds
EDIT_GRACE = datetime.timedelta(seconds=1)


def clamp_limit(limit, *, default: int, maximum: int) -> int:
    """Coerce ``limit`` to an int between 1 and ``maximum``; junk falls back to ``default``."""
    try:
        value = int(limit)
    except (TypeError, ValueError, OverflowError):
        return default
    return min(max(value, 1), maximum)


@dataclass
class AttentionItems:
    created_tasks: list[Task] = field(default_factory=list)
    overdue_tasks: list[Task] = field(default_factory=list)
    critical_defects: list[DefectReport] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.created_tasks) + len(self.overdue_tasks) + len(self.critical_defects)


@dataclass(frozen=True)
class EquipmentAlert:
    BROKEN_DOWN = "broken_down"
    APPROACHING_SERVICE = "approaching_service"

    equipment: Equipment
    alert_type: str
    remaining_reading: int | None = None

    @property
    def is_broken_down(self) -> bool:
        return self.alert_type == self.BROKEN_DOWN


@dataclass(frozen=True)
class DashboardStats:
    total_equipment: int
    active_tasks: int
    completed_this_month: int
    due_for_service: int
    overdue_tasks: int


@dataclass(frozen=True)
class RecentActivityItem:
    task: Task
    description: str
    activity_at: datetime.datetime
    activity_type: str


def get_attention_items(organization: Organization, limit: int | None = None) -> AttentionItems:
    """Tasks awaiting approval, overdue tasks and critical defects with no task."""
    if limit is None:
        limit = config.DASHBOARD_ATTENTION_LIMIT
    limit = clamp_limit(limit, default=8, maximum=ATTENTION_LIMIT_MAX)
    now = timezone.now()

    tasks = Task.objects.for_organization(organization).select_related("equipment", "customer")
    created = tasks.filter(status=Task.Status.CREATED).order_by("-created_at")[:limit]
    overdue = tasks.overdue(now).order_by("scheduled_date")[:limit]
    defects = (
        DefectReport.objects.for_organization(organization)
        .unlinked_critical()
        .select_related("equipment", "equipment__customer")
        .order_by("-created_at")[:limit]
    )
    return AttentionItems(
        created_tasks=list(created),
        overdue_tasks=list(overdue),
        critical_defects=list(defects),
    )


def _service_interval_expression():
    return Case(
        When(tracking_unit=Equipment.TrackingUnit.HOURS, then=F("service_interval_hours")),
        default=F("service_interval_kms"),
        output_field=IntegerField(),
    )


def get_equipment_alerts(
    organization: Organization, limit: int | None = None
) -> list[EquipmentAlert]:
    """Broken-down units first, then units close to their next service.

    A unit is close to service when its reading is below ``next_service_due``
    and the remaining reading is within 10% of the service interval for its
    tracking unit. A unit that is both down and due is listed once, as down.
    """
    if limit is None:
        limit = config.DASHBOARD_ALERT_LIMIT
    limit = clamp_limit(limit, default=12, maximum=ALERT_LIMIT_MAX)

    equipment = (
        Equipment.objects.for_organization(organization).active().select_related("customer")
    )
    broken_down = equipment.filter(operating_status=Equipment.OperatingStatus.DOWN).order_by(
        "-updated_at", "unit_name"
    )[:limit]
    approaching = (
        equipment.filter(next_service_due__isnull=False)
        .annotate(
            interval=_service_interval_expression(),
            remaining=ExpressionWrapper(
                F("next_service_due") - F("current_reading"), output_field=IntegerField()
            ),
        )
        .filter(
            current_reading__lt=F("next_service_due"),
            interval__isnull=False,
            interval__gt=0,
        )
        .annotate(
            remaining_scaled=ExpressionWrapper(
                F("remaining") * 100, output_field=IntegerField()
            ),
            threshold_scaled=ExpressionWrapper(
                F("interval") * SERVICE_WARNING_PERCENT, output_field=IntegerField()
            ),
        )
        .filter(remaining_scaled__lte=F("threshold_scaled"))
        .order_by("remaining", "unit_name")[:limit]
    )

    alerts: dict[int, EquipmentAlert] = {}
    for unit in broken_down:
        alerts[unit.pk] = EquipmentAlert(unit, EquipmentAlert.BROKEN_DOWN)
    for unit in approaching:
        alerts.setdefault(
            unit.pk,
            EquipmentAlert(
                unit, EquipmentAlert.APPROACHING_SERVICE, remaining_reading=unit.remaining
            ),
        )
    return list(alerts.values())[:limit]


def get_dashboard_stats(organization: Organization) -> DashboardStats:
    now = timezone.now().astimezone(datetime.timezone.utc)
    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    equipment = Equipment.objects.for_organization(organization).active()
    tasks = Task.objects.for_organization(organization)
    return DashboardStats(
        total_equipment=equipment.count(),
        active_tasks=tasks.open().count(),
        completed_this_month=tasks.filter(
            status=Task.Status.COMPLETED, updated_at__gte=month_start
        ).count(),
        due_for_service=equipment.filter(
            next_service_due__isnull=False, current_reading__gte=F("next_service_due")
        ).count(),
        overdue_tasks=tasks.overdue(now).count(),
    )


def get_recent_activity(
    organization: Organization, limit: int = ACTIVITY_LIMIT_DEFAULT
) -> list[RecentActivityItem]:
    """Most recently touched tasks, newest first."""
    limit = clamp_limit(limit, default=ACTIVITY_LIMIT_DEFAULT, maximum=ACTIVITY_LIMIT_MAX)
    tasks = (
        Task.objects.for_organization(organization)
        .select_related("equipment")
        .order_by("-updated_at", "-created_at")[:limit]
    )
    return [
        RecentActivityItem(
            task=task,
            description=task.description or f"{task.get_type_display()} task",
            activity_at=task.updated_at,
            activity_type=(
                "updated" if task.updated_at - task.created_at > EDIT_GRACE else "created"
            ),
        )
        for task in tasks
    ]
