import django.db.models.deletion
from django.db import migrations, models

import fleetfix.apps.inspections.models

MEDIA_TYPE_CHOICES = [("photo", "Photo"), ("video", "Video")]


def base_fields():
    return [
        (
            "id",
            models.BigAutoField(
                auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
            ),
        ),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
    ]


def media_fields():
    return [
        ("media_type", models.CharField(choices=MEDIA_TYPE_CHOICES, max_length=20)),
        ("display_order", models.PositiveIntegerField(blank=True, null=True)),
    ]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        ("fleet", "0001_initial"),
        ("maintenance", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="PrestartTemplate",
            fields=[
                *base_fields(),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                ("is_active", models.BooleanField(default=True)),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="prestart_templates",
                        to="accounts.organization",
                    ),
                ),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="PrestartTemplateItem",
            fields=[
                *base_fields(),
                ("label", models.CharField(max_length=200)),
                (
                    "field_type",
                    models.CharField(
                        choices=[
                            ("pass_fail", "Pass / Fail"),
                            ("yes_no", "Yes / No"),
                            ("text", "Text"),
                            ("number", "Number"),
                        ],
                        default="pass_fail",
                        max_length=20,
                    ),
                ),
                (
                    "is_critical",
                    models.BooleanField(
                        default=False,
                        help_text="A failure takes the unit out of service and raises a breakdown",
                    ),
                ),
                ("is_required", models.BooleanField(default=True)),
                ("sort_order", models.PositiveIntegerField(default=0)),
                (
                    "template",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="inspections.prestarttemplate",
                    ),
                ),
            ],
            options={
                "ordering": ["sort_order", "id"],
            },
        ),
        migrations.CreateModel(
            name="PrestartSubmission",
            fields=[
                *base_fields(),
                ("operator_name", models.CharField(max_length=200)),
                ("operator_phone", models.CharField(blank=True, max_length=50)),
                ("equipment_reading", models.PositiveIntegerField()),
                ("ip_address", models.GenericIPAddressField(blank=True, null=True)),
                (
                    "equipment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="prestart_submissions",
                        to="fleet.equipment",
                    ),
                ),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="prestart_submissions",
                        to="accounts.organization",
                    ),
                ),
                (
                    "template",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="submissions",
                        to="inspections.prestarttemplate",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="PrestartSubmissionItem",
            fields=[
                *base_fields(),
                ("result", models.CharField(blank=True, max_length=255)),
                ("failure_description", models.TextField(blank=True)),
                (
                    "generated_task",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="prestart_items",
                        to="maintenance.task",
                    ),
                ),
                (
                    "submission",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="inspections.prestartsubmission",
                    ),
                ),
                (
                    "template_item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="submission_items",
                        to="inspections.prestarttemplateitem",
                    ),
                ),
            ],
            options={
                "ordering": ["template_item__sort_order", "id"],
            },
        ),
        migrations.CreateModel(
            name="PrestartSubmissionItemMedia",
            fields=[
                *base_fields(),
                *media_fields(),
                (
                    "file",
                    models.FileField(
                        max_length=255,
                        upload_to=fleetfix.apps.inspections.models.prestart_item_media_upload_to,
                    ),
                ),
                (
                    "submission_item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="media",
                        to="inspections.prestartsubmissionitem",
                    ),
                ),
            ],
            options={
                "verbose_name": "Pre-start item media",
                "verbose_name_plural": "Pre-start item media",
                "ordering": ["display_order", "created_at"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="DefectReport",
            fields=[
                *base_fields(),
                ("operator_name", models.CharField(max_length=200)),
                ("operator_phone", models.CharField(blank=True, max_length=50)),
                ("equipment_reading", models.PositiveIntegerField()),
                ("description", models.TextField()),
                (
                    "severity",
                    models.CharField(
                        choices=[
                            ("low", "Low"),
                            ("medium", "Medium"),
                            ("high", "High"),
                            ("critical", "Critical"),
                        ],
                        db_index=True,
                        max_length=10,
                    ),
                ),
                ("is_equipment_down", models.BooleanField(default=False)),
                ("ip_address", models.GenericIPAddressField(blank=True, null=True)),
                (
                    "equipment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="defect_reports",
                        to="fleet.equipment",
                    ),
                ),
                (
                    "generated_task",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="defect_reports",
                        to="maintenance.task",
                    ),
                ),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="defect_reports",
                        to="accounts.organization",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="DefectReportMedia",
            fields=[
                *base_fields(),
                *media_fields(),
                (
                    "file",
                    models.FileField(
                        max_length=255,
                        upload_to=fleetfix.apps.inspections.models.defect_report_media_upload_to,
                    ),
                ),
                (
                    "report",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="media",
                        to="inspections.defectreport",
                    ),
                ),
            ],
            options={
                "verbose_name": "Defect report media",
                "verbose_name_plural": "Defect report media",
                "ordering": ["display_order", "created_at"],
                "abstract": False,
            },
        ),
    ]
