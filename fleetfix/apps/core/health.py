"""Health check helpers."""

from __future__ import annotations

from django.db import connection

from fleetfix.apps.fleet.models import Equipment


def check_db_and_orm() -> dict:
    """Verify DB connectivity and ORM access by touching the equipment table."""
    details: dict[str, object] = {}
    connection.ensure_connection()
    details["db"] = "ok"

    equipment_id = Equipment.objects.order_by("id").values_list("id", flat=True).first()
    details["orm_equipment_sample"] = equipment_id if equipment_id is not None else "none"
    return details
