"""Tests for task creation and status changes."""

from django.db import transaction
from django.db.transaction import TransactionManagementError
from django.test import TestCase, TransactionTestCase, tag

from fleetfix.apps.core.test_utils import TestDataMixin, create_equipment, create_user
from fleetfix.apps.fleet.models import Equipment
from fleetfix.apps.maintenance.models import Task
from fleetfix.apps.maintenance.services import change_task_status, create_task
from fleetfix.apps.maintenance.transitions import InvalidTransition


@tag("models")
class CreateTaskTests(TestDataMixin, TestCase):
    def test_defect_task_copies_owner_and_leaves_equipment_up(self):
        with transaction.atomic():
            task = create_task(
                self.equipment,
                type=Task.Type.DEFECT,
                description="Cracked mirror",
                reporter_name="Sam",
                reporter_phone="0400 000 000",
                reading_at_report=1010,
            )

        self.assertEqual(task.status, Task.Status.CREATED)
        self.assertEqual(task.customer, self.customer)
        self.assertEqual(task.organization, self.organization)
        self.assertEqual(task.reported_by_name, "Sam")
        self.assertEqual(task.equipment_reading_at_report, 1010)
        self.equipment.refresh_from_db()
        self.assertEqual(self.equipment.operating_status, Equipment.OperatingStatus.UP)

    def test_breakdown_task_marks_equipment_down(self):
        with transaction.atomic():
            create_task(self.equipment, type=Task.Type.BREAKDOWN, description="Engine seized")

        self.equipment.refresh_from_db()
        self.assertEqual(self.equipment.operating_status, Equipment.OperatingStatus.DOWN)

    def test_breakdown_on_down_equipment_keeps_it_down(self):
        Equipment.objects.filter(pk=self.equipment.pk).update(
            operating_status=Equipment.OperatingStatus.DOWN
        )
        with transaction.atomic():
            task = create_task(self.equipment, type=Task.Type.BREAKDOWN, description="Again")

        self.assertEqual(task.type, Task.Type.BREAKDOWN)
        self.equipment.refresh_from_db()
        self.assertTrue(self.equipment.is_down)

    def test_task_keeps_customer_at_time_of_report(self):
        with transaction.atomic():
            task = create_task(self.equipment, type=Task.Type.DEFECT, description="Leak")
        other = create_equipment(self.organization).customer
        Equipment.objects.filter(pk=self.equipment.pk).update(customer=other)

        task.refresh_from_db()
        self.assertEqual(task.customer, self.customer)


@tag("models")
class CreateTaskTransactionTests(TransactionTestCase):
    def test_requires_atomic_block(self):
        equipment = create_equipment()
        with self.assertRaises(TransactionManagementError):
            create_task(equipment, type=Task.Type.DEFECT, description="Outside a transaction")
        self.assertFalse(Task.objects.exists())


@tag("models")
class ChangeTaskStatusTests(TestDataMixin, TestCase):
    def setUp(self):
        super().setUp()
        with transaction.atomic():
            self.task = create_task(self.equipment, type=Task.Type.DEFECT, description="Leak")

    def test_valid_move_is_saved_with_history_user(self):
        change_task_status(self.task, Task.Status.APPROVED, user=self.mechanic_user)

        self.task.refresh_from_db()
        self.assertEqual(self.task.status, Task.Status.APPROVED)
        latest = self.task.history.order_by("-history_date", "-history_id").first()
        self.assertEqual(latest.status, Task.Status.APPROVED)
        self.assertEqual(latest.history_user, self.mechanic_user)

    def test_invalid_move_raises_and_saves_nothing(self):
        with self.assertRaises(InvalidTransition):
            change_task_status(self.task, Task.Status.IN_PROGRESS, user=create_user())

        self.task.refresh_from_db()
        self.assertEqual(self.task.status, Task.Status.CREATED)
