"""Usage reading rules.

An equipment reading (hour meter or odometer) only ever moves forward.
``compare_reading`` is the pure check; ``advance_reading`` and
``mark_down`` apply changes under a row lock so two submissions racing on
the same unit can never lower a reading or lose the ``down`` flag.
"""

from __future__ import annotations

import enum
import logging

from django.core.exceptions import ValidationError

from fleetfix.apps.fleet.models import Equipment

logger = logging.getLogger(__name__)

MAX_READING = 1_000_000_000


class ReadingRegression(ValidationError):
    """A submitted reading is lower than the stored one."""

    def __init__(self, message: str, current_reading: int):
        super().__init__(message, code="reading_regression")
        self.current_reading = current_reading


class ReadingChange(enum.Enum):
    REGRESSION = "regression"
    UNCHANGED = "unchanged"
    ADVANCE = "advance"


def compare_reading(current: int, new: int) -> ReadingChange:
    if new < current:
        return ReadingChange.REGRESSION
    if new == current:
        return ReadingChange.UNCHANGED
    return ReadingChange.ADVANCE


def check_reading(equipment: Equipment, new: int, *, message: str | None = None) -> ReadingChange:
    """Raise ``ReadingRegression`` if ``new`` is below the equipment's stored reading."""
    change = compare_reading(equipment.current_reading, new)
    if change is ReadingChange.REGRESSION:
        raise ReadingRegression(
            message or f"Reading must be at least {equipment.current_reading:,}",
            current_reading=equipment.current_reading,
        )
    return change


def _lock(equipment: Equipment) -> Equipment:
    return Equipment.objects.select_for_update().get(pk=equipment.pk)


def advance_reading(equipment: Equipment, new: int) -> bool:
    """Raise the stored reading to ``new`` if it is higher. Returns True if changed.

    Must be called inside ``transaction.atomic()``. The comparison runs against
    the locked row, not the possibly stale ``equipment`` instance.
    """
    locked = _lock(equipment)
    if compare_reading(locked.current_reading, new) is not ReadingChange.ADVANCE:
        equipment.current_reading = locked.current_reading
        return False

    previous = locked.current_reading
    locked.current_reading = new
    locked.save(update_fields=["current_reading", "updated_at"])
    equipment.current_reading = new
    logger.info(
        "equipment_reading_advanced",
        extra={"equipment_id": equipment.pk, "previous": previous, "reading": new},
    )
    return True


def mark_down(equipment: Equipment) -> bool:
    """Set ``operating_status`` to down unless it already is. Returns True if changed.

    Must be called inside ``transaction.atomic()``.
    """
    locked = _lock(equipment)
    if locked.operating_status == Equipment.OperatingStatus.DOWN:
        equipment.operating_status = Equipment.OperatingStatus.DOWN
        return False

    locked.operating_status = Equipment.OperatingStatus.DOWN
    locked.save(update_fields=["operating_status", "updated_at"])
    equipment.operating_status = Equipment.OperatingStatus.DOWN
    logger.info("equipment_marked_down", extra={"equipment_id": equipment.pk})
    return True
