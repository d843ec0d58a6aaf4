"""Task creation and status changes."""

from __future__ import annotations

import logging

from django.db import transaction
from django.db.transaction import TransactionManagementError

from fleetfix.apps.fleet.models import Equipment
from fleetfix.apps.fleet.readings import mark_down
from fleetfix.apps.maintenance.models import Task
from fleetfix.apps.maintenance.transitions import check_transition

logger = logging.getLogger(__name__)


def _require_atomic(operation: str) -> None:
    if not transaction.get_connection().in_atomic_block:
        raise TransactionManagementError(f"{operation} must run inside transaction.atomic()")


def create_task(
    equipment: Equipment,
    type: str,
    description: str,
    reporter_name: str = "",
    reporter_phone: str = "",
    reading_at_report: int | None = None,
) -> Task:
    """Open a new task against ``equipment``.

    The task starts as ``created`` and keeps the customer that owns the
    equipment right now. A breakdown also takes the equipment out of service.
    Must be called inside ``transaction.atomic()`` so the task and the status
    change land together.
    """
    _require_atomic("create_task")

    task = Task.objects.create(
        organization_id=equipment.organization_id,
        equipment=equipment,
        customer_id=equipment.customer_id,
        type=type,
        status=Task.Status.CREATED,
        description=description,
        reported_by_name=reporter_name or "",
        reported_by_phone=reporter_phone or "",
        equipment_reading_at_report=reading_at_report,
    )

    if type == Task.Type.BREAKDOWN:
        mark_down(equipment)

    logger.info(
        "task_created",
        extra={
            "task_id": task.pk,
            "task_type": type,
            "equipment_id": equipment.pk,
            "organization_id": equipment.organization_id,
        },
    )
    return task


def change_task_status(task: Task, new_status: str, *, user=None) -> Task:
    """Move ``task`` to ``new_status`` after checking the transition table.

    Raises ``InvalidTransition`` when the move is not allowed; nothing is saved.
    """
    previous = task.status
    check_transition(previous, new_status)

    task.status = new_status
    if user is not None:
        task._history_user = user  # type: ignore[attr-defined]
    task.save(update_fields=["status", "updated_at"])

    logger.info(
        "task_status_changed",
        extra={
            "task_id": task.pk,
            "from_status": str(previous),
            "to_status": str(new_status),
            "user_id": getattr(user, "pk", None),
        },
    )
    return task
