"""Tests for dashboard selectors."""

from datetime import timedelta

from constance.test import override_config
from django.test import SimpleTestCase, TestCase, tag
from django.utils import timezone

from fleetfix.apps.core.test_utils import (
    TestDataMixin,
    create_defect_report,
    create_equipment,
    create_task,
)
from fleetfix.apps.dashboard.selectors import (
    EquipmentAlert,
    clamp_limit,
    get_attention_items,
    get_dashboard_stats,
    get_equipment_alerts,
    get_recent_activity,
)
from fleetfix.apps.fleet.models import Equipment
from fleetfix.apps.inspections.models import DefectReport
from fleetfix.apps.maintenance.models import Task


@tag("unit")
class ClampLimitTests(SimpleTestCase):
    def test_clamps_into_range(self):
        self.assertEqual(clamp_limit(0, default=8, maximum=25), 1)
        self.assertEqual(clamp_limit(-4, default=8, maximum=25), 1)
        self.assertEqual(clamp_limit(100, default=8, maximum=25), 25)
        self.assertEqual(clamp_limit(7.9, default=8, maximum=25), 7)

    def test_junk_falls_back_to_default(self):
        for value in (None, "lots", float("nan"), float("inf")):
            with self.subTest(value=value):
                self.assertEqual(clamp_limit(value, default=8, maximum=25), 8)


@tag("models")
class EquipmentAlertTests(TestDataMixin, TestCase):
    def setUp(self):
        super().setUp()
        Equipment.objects.filter(pk=self.equipment.pk).update(
            next_service_due=1000, service_interval_hours=100
        )

    def set_reading(self, reading, **fields):
        Equipment.objects.filter(pk=self.equipment.pk).update(current_reading=reading, **fields)

    def alerts_for_unit(self):
        alerts = get_equipment_alerts(self.organization)
        return [a for a in alerts if a.equipment.pk == self.equipment.pk]

    def test_remaining_above_ten_percent_not_flagged(self):
        self.set_reading(905)
        self.assertEqual(self.alerts_for_unit(), [])

    def test_remaining_within_ten_percent_flagged(self):
        self.set_reading(995)
        alerts = self.alerts_for_unit()

        self.assertEqual(len(alerts), 1)
        self.assertEqual(alerts[0].alert_type, EquipmentAlert.APPROACHING_SERVICE)
        self.assertEqual(alerts[0].remaining_reading, 5)

    def test_exactly_ten_percent_flagged(self):
        self.set_reading(990)
        self.assertEqual(self.alerts_for_unit()[0].remaining_reading, 10)

    def test_just_over_ten_percent_not_flagged(self):
        self.set_reading(989)
        self.assertEqual(self.alerts_for_unit(), [])

    def test_down_unit_listed_once_as_broken_down(self):
        self.set_reading(995, operating_status=Equipment.OperatingStatus.DOWN)
        alerts = self.alerts_for_unit()

        self.assertEqual(len(alerts), 1)
        self.assertEqual(alerts[0].alert_type, EquipmentAlert.BROKEN_DOWN)
        self.assertIsNone(alerts[0].remaining_reading)

    def test_reading_at_or_past_due_is_not_approaching(self):
        self.set_reading(1000)
        self.assertEqual(self.alerts_for_unit(), [])

    def test_interval_must_match_tracking_unit(self):
        Equipment.objects.filter(pk=self.equipment.pk).update(
            tracking_unit=Equipment.TrackingUnit.KILOMETERS, service_interval_kms=None
        )
        self.set_reading(995)
        self.assertEqual(self.alerts_for_unit(), [])

    def test_zero_interval_ignored(self):
        Equipment.objects.filter(pk=self.equipment.pk).update(service_interval_hours=0)
        self.set_reading(999)
        self.assertEqual(self.alerts_for_unit(), [])

    def test_inactive_equipment_ignored(self):
        self.set_reading(995, status=Equipment.Status.INACTIVE)
        self.assertEqual(self.alerts_for_unit(), [])

    def test_broken_down_first_then_by_remaining(self):
        self.set_reading(992)
        close = create_equipment(
            self.organization,
            self.customer,
            unit_name="EX-02",
            current_reading=995,
            next_service_due=1000,
            service_interval_hours=100,
        )
        down = create_equipment(
            self.organization,
            self.customer,
            unit_name="EX-03",
            operating_status=Equipment.OperatingStatus.DOWN,
        )

        alerts = get_equipment_alerts(self.organization)

        self.assertEqual([a.equipment.pk for a in alerts], [down.pk, close.pk, self.equipment.pk])
        self.assertEqual([a.remaining_reading for a in alerts], [None, 5, 8])

    def test_scoped_to_organization(self):
        create_equipment(self.other_organization, operating_status=Equipment.OperatingStatus.DOWN)
        self.assertEqual(get_equipment_alerts(self.organization), [])

    def test_limit_applies_after_merge(self):
        for i in range(3):
            create_equipment(
                self.organization,
                self.customer,
                unit_name=f"DOWN-{i}",
                operating_status=Equipment.OperatingStatus.DOWN,
            )
        self.assertEqual(len(get_equipment_alerts(self.organization, limit=2)), 2)

    @override_config(DASHBOARD_ALERT_LIMIT=1)
    def test_default_limit_from_constance(self):
        for i in range(3):
            create_equipment(
                self.organization,
                self.customer,
                unit_name=f"DOWN-{i}",
                operating_status=Equipment.OperatingStatus.DOWN,
            )
        self.assertEqual(len(get_equipment_alerts(self.organization)), 1)


@tag("models")
class AttentionItemsTests(TestDataMixin, TestCase):
    def test_groups_and_total(self):
        now = timezone.now()
        awaiting_old = create_task(self.equipment, description="Old request")
        Task.objects.filter(pk=awaiting_old.pk).update(created_at=now - timedelta(days=2))
        awaiting_new = create_task(self.equipment, description="New request")
        overdue_recent = create_task(
            self.equipment,
            status=Task.Status.ASSIGNED,
            scheduled_date=now - timedelta(days=1),
        )
        overdue_oldest = create_task(
            self.equipment,
            status=Task.Status.APPROVED,
            scheduled_date=now - timedelta(days=5),
        )
        create_task(
            self.equipment, status=Task.Status.COMPLETED, scheduled_date=now - timedelta(days=3)
        )
        create_task(
            self.equipment, status=Task.Status.APPROVED, scheduled_date=now + timedelta(days=3)
        )
        unlinked = create_defect_report(self.equipment, severity=DefectReport.Severity.CRITICAL)
        create_defect_report(
            self.equipment,
            severity=DefectReport.Severity.CRITICAL,
            generated_task=awaiting_new,
        )
        create_defect_report(self.equipment, severity=DefectReport.Severity.HIGH)

        attention = get_attention_items(self.organization)

        self.assertEqual(
            [t.pk for t in attention.created_tasks], [awaiting_new.pk, awaiting_old.pk]
        )
        self.assertEqual(
            [t.pk for t in attention.overdue_tasks], [overdue_oldest.pk, overdue_recent.pk]
        )
        self.assertEqual([r.pk for r in attention.critical_defects], [unlinked.pk])
        self.assertEqual(attention.total, 5)

    def test_limit_per_group(self):
        for _ in range(3):
            create_task(self.equipment)
        attention = get_attention_items(self.organization, limit=2)
        self.assertEqual(len(attention.created_tasks), 2)

    def test_scoped_to_organization(self):
        create_task(create_equipment(self.other_organization))
        self.assertEqual(get_attention_items(self.organization).total, 0)


@tag("models")
class DashboardStatsTests(TestDataMixin, TestCase):
    def test_counts(self):
        now = timezone.now()
        Equipment.objects.filter(pk=self.equipment.pk).update(next_service_due=900)
        create_equipment(self.organization, self.customer, current_reading=10, next_service_due=500)
        create_equipment(self.organization, self.customer, status=Equipment.Status.INACTIVE)
        create_equipment(self.other_organization)

        create_task(self.equipment)
        create_task(
            self.equipment,
            status=Task.Status.IN_PROGRESS,
            scheduled_date=now - timedelta(hours=1),
        )
        create_task(self.equipment, status=Task.Status.COMPLETED)
        last_month = now.replace(day=1) - timedelta(days=3)
        create_task(self.equipment, status=Task.Status.COMPLETED, updated_at=last_month)
        create_task(self.equipment, status=Task.Status.NOT_APPROVED)

        stats = get_dashboard_stats(self.organization)

        self.assertEqual(stats.total_equipment, 2)
        self.assertEqual(stats.active_tasks, 2)
        self.assertEqual(stats.completed_this_month, 1)
        self.assertEqual(stats.due_for_service, 1)
        self.assertEqual(stats.overdue_tasks, 1)


@tag("models")
class RecentActivityTests(TestDataMixin, TestCase):
    def test_newest_first_with_activity_type(self):
        now = timezone.now()
        created = create_task(self.equipment, description="")
        updated = create_task(self.equipment, description="Replace filter")
        Task.objects.filter(pk=updated.pk).update(
            created_at=now - timedelta(days=1), updated_at=now + timedelta(minutes=1)
        )

        activity = get_recent_activity(self.organization)

        self.assertEqual([item.task.pk for item in activity], [updated.pk, created.pk])
        self.assertEqual(activity[0].activity_type, "updated")
        self.assertEqual(activity[0].description, "Replace filter")
        self.assertEqual(activity[1].activity_type, "created")
        self.assertEqual(activity[1].description, "Defect task")

    def test_limit_clamped(self):
        for _ in range(3):
            create_task(self.equipment)
        self.assertEqual(len(get_recent_activity(self.organization, limit=0)), 1)
