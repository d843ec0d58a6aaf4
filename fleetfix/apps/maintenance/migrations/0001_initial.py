import django.db.models.deletion
import simple_history.models
from django.conf import settings
from django.db import migrations, models

TYPE_CHOICES = [
    ("breakdown", "Breakdown"),
    ("defect", "Defect"),
    ("planned_maintenance", "Planned maintenance"),
]
STATUS_CHOICES = [
    ("created", "Created"),
    ("approved", "Approved"),
    ("prepared", "Prepared"),
    ("assigned", "Assigned"),
    ("accepted", "Accepted"),
    ("in_progress", "In progress"),
    ("completed", "Completed"),
    ("not_approved", "Not approved"),
]


def task_fields():
    return [
        ("type", models.CharField(choices=TYPE_CHOICES, max_length=30)),
        (
            "status",
            models.CharField(
                choices=STATUS_CHOICES, db_index=True, default="created", max_length=20
            ),
        ),
        ("description", models.TextField(blank=True)),
        ("reported_by_name", models.CharField(blank=True, max_length=200)),
        ("reported_by_phone", models.CharField(blank=True, max_length=50)),
        ("equipment_reading_at_report", models.PositiveIntegerField(blank=True, null=True)),
        ("scheduled_date", models.DateTimeField(blank=True, null=True)),
    ]


def history_fk(to):
    return models.ForeignKey(
        blank=True,
        db_constraint=False,
        null=True,
        on_delete=django.db.models.deletion.DO_NOTHING,
        related_name="+",
        to=to,
    )


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        ("fleet", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Task",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                *task_fields(),
                (
                    "assigned_mechanic",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="assigned_tasks",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        help_text="Owner of the equipment when the task was raised",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="tasks",
                        to="fleet.customer",
                    ),
                ),
                (
                    "equipment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="tasks",
                        to="fleet.equipment",
                    ),
                ),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="tasks",
                        to="accounts.organization",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="HistoricalTask",
            fields=[
                (
                    "id",
                    models.BigIntegerField(
                        auto_created=True, blank=True, db_index=True, verbose_name="ID"
                    ),
                ),
                ("created_at", models.DateTimeField(blank=True, editable=False)),
                ("updated_at", models.DateTimeField(blank=True, editable=False)),
                *task_fields(),
                ("history_id", models.AutoField(primary_key=True, serialize=False)),
                ("history_date", models.DateTimeField(db_index=True)),
                ("history_change_reason", models.CharField(max_length=100, null=True)),
                (
                    "history_type",
                    models.CharField(
                        choices=[("+", "Created"), ("~", "Changed"), ("-", "Deleted")],
                        max_length=1,
                    ),
                ),
                ("assigned_mechanic", history_fk(settings.AUTH_USER_MODEL)),
                ("customer", history_fk("fleet.customer")),
                ("equipment", history_fk("fleet.equipment")),
                ("organization", history_fk("accounts.organization")),
                (
                    "history_user",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "historical task",
                "verbose_name_plural": "historical tasks",
                "ordering": ("-history_date", "-history_id"),
                "get_latest_by": ("history_date", "history_id"),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]
