"""Tests for the task status state machine."""

from django.test import SimpleTestCase, tag

from fleetfix.apps.maintenance.models import Task
from fleetfix.apps.maintenance.transitions import (
    TRANSITIONS,
    InvalidTransition,
    check_transition,
    is_valid_transition,
    transition_error,
    valid_transitions,
    validate_transition,
)

Status = Task.Status


@tag("unit")
class TransitionTableTests(SimpleTestCase):
    def test_every_status_has_an_entry(self):
        self.assertEqual(set(TRANSITIONS), set(Status.values))

    def test_targets_are_known_statuses(self):
        for source, targets in TRANSITIONS.items():
            with self.subTest(source=source):
                self.assertTrue(set(targets) <= set(Status.values))

    def test_happy_path_is_allowed(self):
        path = [
            Status.CREATED,
            Status.APPROVED,
            Status.PREPARED,
            Status.ASSIGNED,
            Status.ACCEPTED,
            Status.IN_PROGRESS,
            Status.COMPLETED,
        ]
        for source, target in zip(path, path[1:], strict=False):
            with self.subTest(source=source, target=target):
                self.assertTrue(is_valid_transition(source, target))

    def test_completed_can_reopen(self):
        self.assertEqual(valid_transitions(Status.COMPLETED), (Status.CREATED,))

    def test_not_approved_is_terminal(self):
        self.assertEqual(valid_transitions(Status.NOT_APPROVED), ())
        for target in Status.values:
            with self.subTest(target=target):
                self.assertFalse(is_valid_transition(Status.NOT_APPROVED, target))

    def test_no_self_transitions(self):
        for status in Status.values:
            with self.subTest(status=status):
                self.assertFalse(is_valid_transition(status, status))

    def test_skipping_steps_is_rejected(self):
        self.assertFalse(is_valid_transition(Status.CREATED, Status.IN_PROGRESS))
        self.assertFalse(is_valid_transition(Status.APPROVED, Status.ACCEPTED))

    def test_plain_strings_accepted(self):
        self.assertTrue(is_valid_transition("created", "approved"))
        self.assertFalse(is_valid_transition("created", "unknown"))
        self.assertEqual(valid_transitions("unknown"), ())


@tag("unit")
class TransitionErrorTests(SimpleTestCase):
    def test_error_lists_allowed_moves(self):
        self.assertEqual(
            transition_error("in_progress", "created"),
            "Invalid status transition: in_progress → created. "
            'Valid transitions from "in_progress": completed, not_approved',
        )

    def test_error_for_terminal_status(self):
        self.assertEqual(
            transition_error("not_approved", "created"),
            "Invalid status transition: not_approved → created. "
            'Valid transitions from "not_approved": none',
        )

    def test_validate_transition_result(self):
        self.assertEqual(validate_transition("created", "approved").valid, True)
        self.assertIsNone(validate_transition("created", "approved").error)
        result = validate_transition("created", "assigned")
        self.assertFalse(result.valid)
        self.assertIn("created → assigned", result.error)

    def test_check_transition_raises_validation_error(self):
        with self.assertRaises(InvalidTransition) as ctx:
            check_transition("completed", "approved")
        self.assertEqual(ctx.exception.from_status, "completed")
        self.assertEqual(ctx.exception.to_status, "approved")
        self.assertEqual(ctx.exception.messages, [transition_error("completed", "approved")])
