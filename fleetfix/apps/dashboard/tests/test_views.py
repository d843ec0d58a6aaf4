"""Tests for the dashboard view."""

from django.test import tag
from django.urls import reverse

from fleetfix.apps.core.test_utils import (
    AccessControlTestCase,
    TestDataMixin,
    create_task,
    create_user,
)
from fleetfix.apps.fleet.models import Equipment


@tag("views")
class DashboardViewTests(TestDataMixin, AccessControlTestCase):
    def setUp(self):
        super().setUp()
        self.url = reverse("dashboard")

    def test_requires_login(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 302)
        self.assertIn("/login/", response.url)

    def test_user_without_membership_denied(self):
        self.client.force_login(create_user())
        self.assertEqual(self.client.get(self.url).status_code, 403)

    def test_shows_organization_data(self):
        create_task(self.equipment, description="Check hydraulic pump")
        Equipment.objects.filter(pk=self.equipment.pk).update(
            operating_status=Equipment.OperatingStatus.DOWN
        )
        self.client.force_login(self.viewer_user)

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context["organization"], self.organization)
        self.assertEqual(response.context["stats"].total_equipment, 1)
        self.assertEqual(response.context["attention"].total, 1)
        self.assertEqual(len(response.context["alerts"]), 1)
        self.assertContains(response, "Check hydraulic pump")
        self.assertContains(response, "Broken down")

    def test_home_redirects_to_dashboard(self):
        response = self.client.get("/")
        self.assertRedirects(response, self.url, fetch_redirect_response=False)
