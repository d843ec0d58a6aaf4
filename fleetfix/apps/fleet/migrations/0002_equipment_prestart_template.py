import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("fleet", "0001_initial"),
        ("inspections", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="equipment",
            name="prestart_template",
            field=models.ForeignKey(
                blank=True,
                help_text="Checklist operators complete before starting this unit",
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="equipment",
                to="inspections.prestarttemplate",
            ),
        ),
        migrations.AddField(
            model_name="historicalequipment",
            name="prestart_template",
            field=models.ForeignKey(
                blank=True,
                db_constraint=False,
                help_text="Checklist operators complete before starting this unit",
                null=True,
                on_delete=django.db.models.deletion.DO_NOTHING,
                related_name="+",
                to="inspections.prestarttemplate",
            ),
        ),
    ]
