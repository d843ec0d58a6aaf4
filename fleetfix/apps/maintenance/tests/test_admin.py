"""Tests for the task admin."""

from django.contrib.admin.sites import AdminSite
from django.test import RequestFactory, TestCase, tag

from fleetfix.apps.core.test_utils import TestDataMixin, create_user
from fleetfix.apps.fleet.models import Equipment
from fleetfix.apps.maintenance.admin import TaskAdmin
from fleetfix.apps.maintenance.models import Task


@tag("admin")
class TaskAdminTests(TestDataMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.admin = TaskAdmin(Task, AdminSite())
        self.request = RequestFactory().post("/admin/maintenance/task/add/")
        self.request.user = create_user(is_superuser=True)

    def add_task(self, type):
        task = Task(equipment=self.equipment, type=type, description="Added from admin")
        self.admin.save_model(self.request, task, None, False)
        return task

    def test_breakdown_added_in_admin_takes_unit_down(self):
        task = self.add_task(Task.Type.BREAKDOWN)

        self.assertEqual(task.status, Task.Status.CREATED)
        self.assertEqual(task.customer_id, self.customer.pk)
        self.assertEqual(task.organization_id, self.organization.pk)
        self.equipment.refresh_from_db()
        self.assertEqual(self.equipment.operating_status, Equipment.OperatingStatus.DOWN)

    def test_defect_added_in_admin_leaves_unit_up(self):
        self.add_task(Task.Type.DEFECT)

        self.equipment.refresh_from_db()
        self.assertEqual(self.equipment.operating_status, Equipment.OperatingStatus.UP)
