import django.db.models.deletion
import simple_history.models
from django.conf import settings
from django.db import migrations, models

TRACKING_UNIT_CHOICES = [("hours", "Hours"), ("kilometers", "Kilometers")]
OPERATING_STATUS_CHOICES = [("up", "Up"), ("down", "Down")]
STATUS_CHOICES = [("active", "Active"), ("inactive", "Inactive")]


def equipment_fields():
    return [
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        (
            "unit_name",
            models.CharField(help_text="Fleet number or name, e.g. 'EX-12'", max_length=200),
        ),
        ("make", models.CharField(blank=True, max_length=100)),
        ("model", models.CharField(blank=True, max_length=100)),
        ("serial_number", models.CharField(blank=True, max_length=100)),
        (
            "tracking_unit",
            models.CharField(choices=TRACKING_UNIT_CHOICES, default="hours", max_length=20),
        ),
        (
            "current_reading",
            models.PositiveIntegerField(
                default=0, help_text="Hour meter or odometer reading. Only ever moves forward."
            ),
        ),
        (
            "operating_status",
            models.CharField(
                choices=OPERATING_STATUS_CHOICES, db_index=True, default="up", max_length=10
            ),
        ),
        (
            "status",
            models.CharField(
                choices=STATUS_CHOICES, db_index=True, default="active", max_length=10
            ),
        ),
        (
            "next_service_due",
            models.PositiveIntegerField(
                blank=True, help_text="Reading at which the next service is due", null=True
            ),
        ),
        ("next_service_type", models.CharField(blank=True, max_length=100)),
        ("service_interval_hours", models.PositiveIntegerField(blank=True, null=True)),
        ("service_interval_kms", models.PositiveIntegerField(blank=True, null=True)),
    ]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=200)),
                ("contact_name", models.CharField(blank=True, max_length=200)),
                ("email", models.EmailField(blank=True, max_length=254)),
                ("phone", models.CharField(blank=True, max_length=50)),
                ("address", models.TextField(blank=True)),
                ("notes", models.TextField(blank=True)),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="customers",
                        to="accounts.organization",
                    ),
                ),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Equipment",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                *equipment_fields(),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="equipment",
                        to="fleet.customer",
                    ),
                ),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="equipment",
                        to="accounts.organization",
                    ),
                ),
            ],
            options={
                "ordering": ["unit_name"],
                "verbose_name_plural": "equipment",
            },
        ),
        migrations.CreateModel(
            name="HistoricalEquipment",
            fields=[
                (
                    "id",
                    models.BigIntegerField(
                        auto_created=True, blank=True, db_index=True, verbose_name="ID"
                    ),
                ),
                ("created_at", models.DateTimeField(blank=True, editable=False)),
                ("updated_at", models.DateTimeField(blank=True, editable=False)),
                *equipment_fields()[2:],
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
                (
                    "customer",
                    models.ForeignKey(
                        blank=True,
                        db_constraint=False,
                        null=True,
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="+",
                        to="fleet.customer",
                    ),
                ),
                (
                    "history_user",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "organization",
                    models.ForeignKey(
                        blank=True,
                        db_constraint=False,
                        null=True,
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="+",
                        to="accounts.organization",
                    ),
                ),
            ],
            options={
                "verbose_name": "historical equipment",
                "verbose_name_plural": "historical equipment",
                "ordering": ("-history_date", "-history_id"),
                "get_latest_by": ("history_date", "history_id"),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]
