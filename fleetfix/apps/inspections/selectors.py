"""Read-side queries for the operator portal."""

from __future__ import annotations

from datetime import timedelta

from django.db.models import Prefetch
from django.utils import timezone

from fleetfix.apps.fleet.models import Equipment
from fleetfix.apps.inspections.models import PrestartSubmission, PrestartSubmissionItem

HISTORY_DAYS = 30
HISTORY_LIMIT = 25


def get_prestart_history(
    equipment: Equipment, *, days: int = HISTORY_DAYS, limit: int = HISTORY_LIMIT
) -> list[PrestartSubmission]:
    """Recent pre-start submissions for a unit, newest first, answers in checklist order."""
    since = timezone.now() - timedelta(days=days)
    items = (
        PrestartSubmissionItem.objects.select_related("template_item", "generated_task")
        .prefetch_related("media")
        .order_by("template_item__sort_order", "id")
    )
    return list(
        PrestartSubmission.objects.filter(equipment=equipment, created_at__gte=since)
        .prefetch_related(Prefetch("items", queryset=items))
        .order_by("-created_at", "-id")[:limit]
    )
