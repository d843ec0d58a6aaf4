"""Tests for the public QR portal views."""

import json

from django.conf import settings
from django.test import TestCase, override_settings, tag
from django.urls import reverse

from fleetfix.apps.core.test_utils import (
    AccessControlTestCase,
    TemporaryMediaMixin,
    TestDataMixin,
    create_defect_report,
    create_uploaded_image,
)
from fleetfix.apps.fleet.models import Equipment
from fleetfix.apps.inspections.models import DefectReport, DefectReportMedia, PrestartSubmission
from fleetfix.apps.maintenance.models import Task


@tag("views")
class PortalEquipmentViewTests(TestDataMixin, AccessControlTestCase):
    def setUp(self):
        super().setUp()
        self.url = reverse("portal-equipment", args=[self.equipment.pk])

    def test_public_page_without_login(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "EX-01")
        self.assertEqual(response.context["form"].initial["reading"], 1000)

    def test_inactive_equipment_not_found(self):
        Equipment.objects.filter(pk=self.equipment.pk).update(status=Equipment.Status.INACTIVE)
        self.assertEqual(self.client.get(self.url).status_code, 404)

    def test_unknown_equipment_not_found(self):
        response = self.client.get(reverse("portal-equipment", args=[999999]))
        self.assertEqual(response.status_code, 404)

    def test_reading_update(self):
        response = self.client.post(self.url, {"reading": "1250"}, follow=True)

        self.assertRedirects(response, self.url)
        self.assertContains(response, "Hours updated to 1,250")
        self.equipment.refresh_from_db()
        self.assertEqual(self.equipment.current_reading, 1250)

    def test_reading_regression_message(self):
        response = self.client.post(self.url, {"reading": "10"}, follow=True)

        self.assertContains(response, "New hours reading must be at least 1,000")
        self.equipment.refresh_from_db()
        self.assertEqual(self.equipment.current_reading, 1000)

    def test_non_numeric_reading(self):
        response = self.client.post(self.url, {"reading": "abc"}, follow=True)
        self.assertContains(response, "Reading must be a whole number")


@tag("views")
class PrestartCheckViewTests(TestDataMixin, AccessControlTestCase):
    def setUp(self):
        super().setUp()
        self.url = reverse("portal-prestart", args=[self.equipment.pk])
        self.tyres, self.brakes = list(self.template.items.all())

    def post_data(self, **overrides):
        data = {
            "operator_name": "Sam Operator",
            "operator_phone": "0400 111 222",
            "equipment_reading": "1010",
            f"item-{self.tyres.pk}-result": "pass",
            f"item-{self.brakes.pk}-result": "pass",
        }
        data.update(overrides)
        return data

    def test_renders_checklist(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, 200)
        labels = [row["item"].label for row in response.context["checklist"]]
        self.assertEqual(labels, ["Tyres", "Brakes"])
        self.assertEqual(response.context["form"].initial["equipment_reading"], 1000)

    def test_successful_submission_sets_operator_cookie(self):
        response = self.client.post(self.url, self.post_data())

        self.assertRedirects(response, self.url)
        self.assertEqual(PrestartSubmission.objects.count(), 1)
        cookie = response.cookies[settings.OPERATOR_COOKIE_NAME]
        self.assertEqual(
            json.loads(cookie.value), {"name": "Sam Operator", "phone": "0400 111 222"}
        )

    def test_cookie_prefills_next_visit(self):
        self.client.cookies[settings.OPERATOR_COOKIE_NAME] = json.dumps(
            {"name": "Returning Operator", "phone": "0400 999 888"}
        )
        response = self.client.get(self.url)

        initial = response.context["form"].initial
        self.assertEqual(initial["operator_name"], "Returning Operator")
        self.assertEqual(initial["operator_phone"], "0400 999 888")

    def test_garbled_cookie_ignored(self):
        self.client.cookies[settings.OPERATOR_COOKIE_NAME] = "not json"
        response = self.client.get(self.url)
        self.assertNotIn("operator_name", response.context["form"].initial)

    def test_failed_item_without_notes_rerenders_with_error(self):
        response = self.client.post(
            self.url, self.post_data(**{f"item-{self.brakes.pk}-result": "fail"})
        )

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Brakes failure notes are required")
        self.assertFalse(PrestartSubmission.objects.exists())

    def test_critical_failure_takes_unit_down(self):
        response = self.client.post(
            self.url,
            self.post_data(
                **{
                    f"item-{self.brakes.pk}-result": "fail",
                    f"item-{self.brakes.pk}-notes": "Pedal to the floor",
                }
            ),
            follow=True,
        )

        self.assertContains(
            response, "Pre-start submitted with failures. Maintenance team has been notified."
        )
        self.equipment.refresh_from_db()
        self.assertTrue(self.equipment.is_down)
        self.assertEqual(Task.objects.get().type, Task.Type.BREAKDOWN)

    def test_missing_operator_name(self):
        response = self.client.post(self.url, self.post_data(operator_name=""))

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Operator name is required")
        self.assertFalse(PrestartSubmission.objects.exists())

    def test_no_template_message(self):
        Equipment.objects.filter(pk=self.equipment.pk).update(prestart_template=None)
        response = self.client.post(self.url, self.post_data())

        self.assertContains(response, "No pre-start template configured for this equipment")


@tag("views")
class DefectReportViewTests(TemporaryMediaMixin, TestDataMixin, AccessControlTestCase):
    def setUp(self):
        super().setUp()
        self.url = reverse("portal-defect", args=[self.equipment.pk])

    def post_data(self, **overrides):
        data = {
            "operator_name": "Sam Operator",
            "equipment_reading": "1005",
            "description": "Left track tension is loose",
            "severity": DefectReport.Severity.HIGH,
        }
        data.update(overrides)
        return data

    def test_submits_report_with_photo(self):
        data = self.post_data(media=[create_uploaded_image("crack.jpg")])
        response = self.client.post(self.url, data, follow=True)

        self.assertRedirects(response, self.url)
        self.assertContains(response, "Defect report submitted.")
        report = DefectReport.objects.get()
        self.assertEqual(report.severity, DefectReport.Severity.HIGH)
        self.assertEqual(report.ip_address, "127.0.0.1")
        self.assertEqual(DefectReportMedia.objects.filter(report=report).count(), 1)

    def test_short_description_rejected(self):
        response = self.client.post(self.url, self.post_data(description="short"))

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Description must be at least 10 characters")
        self.assertFalse(DefectReport.objects.exists())

    def test_six_photos_rejected(self):
        photos = [create_uploaded_image(f"photo{i}.jpg") for i in range(6)]
        response = self.client.post(self.url, self.post_data(media=photos))

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Up to 5 photos are allowed")
        self.assertFalse(DefectReport.objects.exists())

    @override_settings(RATE_LIMIT_REPORTS_PER_IP=2)
    def test_rate_limited_per_ip(self):
        for _ in range(2):
            create_defect_report(self.equipment, ip_address="127.0.0.1")

        response = self.client.post(self.url, self.post_data(), follow=True)

        self.assertContains(
            response, "Too many reports submitted recently. Please try again later."
        )
        self.assertEqual(DefectReport.objects.count(), 2)

    def test_rate_limit_ignores_other_addresses(self):
        for _ in range(5):
            create_defect_report(self.equipment, ip_address="10.9.9.9")

        self.client.post(self.url, self.post_data())

        self.assertEqual(DefectReport.objects.filter(ip_address="127.0.0.1").count(), 1)


@tag("views")
class BreakdownReportViewTests(TestDataMixin, AccessControlTestCase):
    def test_breakdown_takes_unit_down(self):
        url = reverse("portal-breakdown", args=[self.equipment.pk])
        response = self.client.post(
            url,
            {
                "operator_name": "Sam Operator",
                "equipment_reading": "1000",
                "description": "Engine will not turn over",
            },
            follow=True,
        )

        self.assertRedirects(response, url)
        self.assertContains(response, "Breakdown reported. Equipment marked as down.")
        report = DefectReport.objects.get()
        self.assertEqual(report.severity, DefectReport.Severity.CRITICAL)
        self.equipment.refresh_from_db()
        self.assertTrue(self.equipment.is_down)

    def test_form_has_no_severity_choice(self):
        response = self.client.get(reverse("portal-breakdown", args=[self.equipment.pk]))
        self.assertNotIn("severity", response.context["form"].fields)
        self.assertTrue(response.context["is_breakdown"])


@tag("views")
class PrestartHistoryViewTests(TestDataMixin, TestCase):
    def test_lists_recent_submissions_for_unit(self):
        tyres, brakes = list(self.template.items.all())
        self.client.post(
            reverse("portal-prestart", args=[self.equipment.pk]),
            {
                "operator_name": "Sam Operator",
                "equipment_reading": "1010",
                f"item-{tyres.pk}-result": "fail",
                f"item-{tyres.pk}-notes": "Worn tread",
                f"item-{brakes.pk}-result": "pass",
            },
        )

        response = self.client.get(reverse("portal-history", args=[self.equipment.pk]))

        self.assertEqual(response.status_code, 200)
        submissions = response.context["submissions"]
        self.assertEqual(len(submissions), 1)
        self.assertEqual(
            [item.template_item.label for item in submissions[0].items.all()], ["Tyres", "Brakes"]
        )
        self.assertContains(response, "Worn tread")
