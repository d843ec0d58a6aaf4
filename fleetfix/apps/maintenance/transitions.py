"""Task status lifecycle.

Every task starts as ``created``. Most states move one step forward, may be
rejected (``not_approved``) or closed early (``completed``). A completed task
can be re-opened when more work turns up; a rejected task is final.
"""

from __future__ import annotations

from dataclasses import dataclass

from django.core.exceptions import ValidationError

from fleetfix.apps.maintenance.models import Task

Status = Task.Status

TRANSITIONS: dict[str, tuple[str, ...]] = {
    Status.CREATED: (Status.APPROVED, Status.NOT_APPROVED, Status.COMPLETED),
    Status.APPROVED: (Status.PREPARED, Status.NOT_APPROVED, Status.COMPLETED),
    Status.PREPARED: (Status.ASSIGNED, Status.NOT_APPROVED, Status.COMPLETED),
    Status.ASSIGNED: (Status.ACCEPTED, Status.NOT_APPROVED, Status.COMPLETED),
    Status.ACCEPTED: (Status.IN_PROGRESS, Status.NOT_APPROVED, Status.COMPLETED),
    Status.IN_PROGRESS: (Status.COMPLETED, Status.NOT_APPROVED),
    Status.COMPLETED: (Status.CREATED,),
    Status.NOT_APPROVED: (),
}


class InvalidTransition(ValidationError):
    def __init__(self, from_status: str, to_status: str):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(transition_error(from_status, to_status), code="invalid_transition")


@dataclass(frozen=True)
class TransitionResult:
    valid: bool
    error: str | None = None


def valid_transitions(from_status: str) -> tuple[str, ...]:
    """Statuses reachable in one step from ``from_status``, in display order."""
    return TRANSITIONS.get(from_status, ())


def is_valid_transition(from_status: str, to_status: str) -> bool:
    return to_status in valid_transitions(from_status)


def transition_error(from_status: str, to_status: str) -> str:
    allowed = ", ".join(str(s) for s in valid_transitions(from_status)) or "none"
    from_status, to_status = str(from_status), str(to_status)
    return (
        f"Invalid status transition: {from_status} → {to_status}. "
        f'Valid transitions from "{from_status}": {allowed}'
    )


def validate_transition(from_status: str, to_status: str) -> TransitionResult:
    if is_valid_transition(from_status, to_status):
        return TransitionResult(valid=True)
    return TransitionResult(valid=False, error=transition_error(from_status, to_status))


def check_transition(from_status: str, to_status: str) -> None:
    """Raise ``InvalidTransition`` unless ``from_status`` may move to ``to_status``."""
    if not is_valid_transition(from_status, to_status):
        raise InvalidTransition(from_status, to_status)
