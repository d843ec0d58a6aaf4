"""Operator submissions from the QR portal.

Each entry point validates everything it can before touching the database,
then writes the submission, its tasks, its media and the new equipment
reading in a single transaction. Callers always get a ``SubmissionResult``
back: ``success``, ``info`` for a no-op, or ``error`` when nothing was saved.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass

from django.core.exceptions import ValidationError
from django.core.files.uploadedfile import UploadedFile
from django.db import DatabaseError, transaction

from fleetfix.apps.core.config import PortalConfig, get_portal_config
from fleetfix.apps.core.media import DEFECT_REPORT_LIMITS, media_limit_error
from fleetfix.apps.core.media_upload import MediaUploader, UploadFailure
from fleetfix.apps.fleet.models import Equipment
from fleetfix.apps.fleet.readings import (
    ReadingChange,
    advance_reading,
    check_reading,
    compare_reading,
)
from fleetfix.apps.inspections.exceptions import MediaLimitExceeded, NoTemplateConfigured
from fleetfix.apps.inspections.models import (
    DefectReport,
    DefectReportMedia,
    PrestartSubmission,
    PrestartSubmissionItem,
    PrestartSubmissionItemMedia,
    PrestartTemplate,
    defect_report_media_folder,
    prestart_media_folder,
)
from fleetfix.apps.inspections.parsing import ParsedItem, RawItem, parse_checklist
from fleetfix.apps.maintenance.models import Task
from fleetfix.apps.maintenance.services import create_task

logger = logging.getLogger(__name__)

SAVE_FAILED_MESSAGE = "Failed to save submission. Please try again."
UPLOAD_FAILED_MESSAGE = "Failed to upload media. Please try again."


@dataclass(frozen=True)
class SubmissionResult:
    status: str
    message: str

    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"

    @classmethod
    def success(cls, message: str) -> SubmissionResult:
        return cls(cls.SUCCESS, message)

    @classmethod
    def info(cls, message: str) -> SubmissionResult:
        return cls(cls.INFO, message)

    @classmethod
    def error(cls, message: str) -> SubmissionResult:
        return cls(cls.ERROR, message)

    @property
    def ok(self) -> bool:
        return self.status != self.ERROR


@dataclass(frozen=True)
class PrestartHeader:
    operator_name: str
    equipment_reading: int
    operator_phone: str = ""


@dataclass(frozen=True)
class ReportPayload:
    operator_name: str
    description: str
    equipment_reading: int
    severity: str = DefectReport.Severity.MEDIUM
    operator_phone: str = ""


@contextmanager
def _atomic_with_media(uploader: MediaUploader) -> Iterator[None]:
    """Run a transaction; on any failure delete the files it wrote to storage."""
    try:
        with transaction.atomic():
            yield
    except Exception:
        uploader.discard()
        raise


def _validation_message(err: ValidationError) -> str:
    return err.messages[0] if err.messages else "Invalid submission"


# ---------------------------------------------------------------------------
# Reading update
# ---------------------------------------------------------------------------


def update_reading(equipment: Equipment, reading: int) -> SubmissionResult:
    """Record a new hour meter or odometer reading from the portal."""
    unit = equipment.reading_unit_label
    change = compare_reading(equipment.current_reading, reading)

    if change is ReadingChange.ADVANCE:
        try:
            with transaction.atomic():
                advance_reading(equipment, reading)
        except DatabaseError:
            logger.exception("reading_update_failed", extra={"equipment_id": equipment.pk})
            return SubmissionResult.error(SAVE_FAILED_MESSAGE)
        # A concurrent update may have moved the stored reading past ours
        change = compare_reading(equipment.current_reading, reading)
        if change is ReadingChange.UNCHANGED:
            return SubmissionResult.success(
                f"{equipment.get_tracking_unit_display()} updated to {reading:,}"
            )

    if change is ReadingChange.REGRESSION:
        logger.info(
            "reading_rejected",
            extra={
                "equipment_id": equipment.pk,
                "current": equipment.current_reading,
                "submitted": reading,
            },
        )
        return SubmissionResult.error(
            f"New {unit} reading must be at least {equipment.current_reading:,}"
        )

    return SubmissionResult.info("Reading already up to date")


# ---------------------------------------------------------------------------
# Pre-start checklist
# ---------------------------------------------------------------------------


def resolve_template(equipment: Equipment) -> PrestartTemplate:
    template = equipment.prestart_template
    if template is None or not template.is_active:
        raise NoTemplateConfigured()
    return template


def _failure_task_description(item: ParsedItem) -> str:
    description = f"{item.template_item.label} failed during pre-start check"
    if item.failure_description:
        description = f"{description}: {item.failure_description}"
    return description


def _save_prestart(
    equipment: Equipment,
    template: PrestartTemplate,
    header: PrestartHeader,
    items: Sequence[ParsedItem],
    *,
    ip_address: str | None,
    uploader: MediaUploader,
    config: PortalConfig,
) -> PrestartSubmission:
    submission = PrestartSubmission.objects.create(
        organization_id=equipment.organization_id,
        equipment=equipment,
        template=template,
        operator_name=header.operator_name,
        operator_phone=header.operator_phone,
        equipment_reading=header.equipment_reading,
        ip_address=ip_address,
    )
    folder = prestart_media_folder(config, submission)

    for parsed in items:
        task = None
        if parsed.is_failure:
            task = create_task(
                equipment,
                type=Task.Type.BREAKDOWN if parsed.template_item.is_critical else Task.Type.DEFECT,
                description=_failure_task_description(parsed),
                reporter_name=header.operator_name,
                reporter_phone=header.operator_phone,
                reading_at_report=header.equipment_reading,
            )

        submission_item = PrestartSubmissionItem.objects.create(
            submission=submission,
            template_item=parsed.template_item,
            result=parsed.stored_result,
            failure_description=parsed.failure_description,
            generated_task=task,
        )
        if parsed.files:
            uploader.attach(
                parsed.files,
                parent=submission_item,
                media_model=PrestartSubmissionItemMedia,
                folder=folder,
            )

    advance_reading(equipment, header.equipment_reading)
    return submission


def submit_prestart_check(
    equipment: Equipment,
    header: PrestartHeader,
    raw_items: Mapping[int, RawItem],
    *,
    ip_address: str | None = None,
    config: PortalConfig | None = None,
) -> SubmissionResult:
    """Validate and store a completed pre-start checklist.

    Every failing answer raises one task; a failing critical item raises a
    breakdown and takes the unit out of service.
    """
    config = config or get_portal_config()
    try:
        template = resolve_template(equipment)
        check_reading(equipment, header.equipment_reading)
        items = parse_checklist(template.items.all(), raw_items)
    except ValidationError as err:
        message = _validation_message(err)
        logger.info(
            "prestart_rejected", extra={"equipment_id": equipment.pk, "reason": message}
        )
        return SubmissionResult.error(message)

    uploader = MediaUploader()
    try:
        with _atomic_with_media(uploader):
            submission = _save_prestart(
                equipment,
                template,
                header,
                items,
                ip_address=ip_address,
                uploader=uploader,
                config=config,
            )
    except UploadFailure as err:
        logger.warning(
            "prestart_upload_failed", extra={"equipment_id": equipment.pk, "error": str(err)}
        )
        return SubmissionResult.error(UPLOAD_FAILED_MESSAGE)
    except DatabaseError:
        logger.exception("prestart_save_failed", extra={"equipment_id": equipment.pk})
        return SubmissionResult.error(SAVE_FAILED_MESSAGE)

    failures = sum(1 for item in items if item.is_failure)
    logger.info(
        "prestart_submitted",
        extra={
            "submission_id": submission.pk,
            "equipment_id": equipment.pk,
            "failures": failures,
        },
    )
    if failures:
        return SubmissionResult.success(
            "Pre-start submitted with failures. Maintenance team has been notified."
        )
    return SubmissionResult.success("Pre-start submitted successfully.")


# ---------------------------------------------------------------------------
# Defect and breakdown reports
# ---------------------------------------------------------------------------


def submit_defect_report(
    equipment: Equipment,
    payload: ReportPayload,
    files: Sequence[UploadedFile] = (),
    *,
    ip_address: str | None = None,
    config: PortalConfig | None = None,
) -> SubmissionResult:
    return _submit_report(
        equipment, payload, files, ip_address=ip_address, config=config, force_breakdown=False
    )


def submit_breakdown_report(
    equipment: Equipment,
    payload: ReportPayload,
    files: Sequence[UploadedFile] = (),
    *,
    ip_address: str | None = None,
    config: PortalConfig | None = None,
) -> SubmissionResult:
    """Report a breakdown: always critical, always takes the unit out of service."""
    return _submit_report(
        equipment, payload, files, ip_address=ip_address, config=config, force_breakdown=True
    )


def _submit_report(
    equipment: Equipment,
    payload: ReportPayload,
    files: Sequence[UploadedFile],
    *,
    ip_address: str | None,
    config: PortalConfig | None,
    force_breakdown: bool,
) -> SubmissionResult:
    config = config or get_portal_config()
    severity = DefectReport.Severity.CRITICAL if force_breakdown else payload.severity
    files = [f for f in files if f and f.size]

    try:
        if severity not in DefectReport.Severity.values:
            raise ValidationError("Select a valid severity")
        check_reading(equipment, payload.equipment_reading)
        limit_error = media_limit_error(files, DEFECT_REPORT_LIMITS)
        if limit_error:
            raise MediaLimitExceeded(limit_error)
    except ValidationError as err:
        message = _validation_message(err)
        logger.info(
            "defect_report_rejected", extra={"equipment_id": equipment.pk, "reason": message}
        )
        return SubmissionResult.error(message)

    is_breakdown = force_breakdown or severity == DefectReport.Severity.CRITICAL

    uploader = MediaUploader()
    try:
        with _atomic_with_media(uploader):
            report = DefectReport.objects.create(
                organization_id=equipment.organization_id,
                equipment=equipment,
                operator_name=payload.operator_name,
                operator_phone=payload.operator_phone,
                equipment_reading=payload.equipment_reading,
                description=payload.description,
                severity=severity,
                is_equipment_down=is_breakdown,
                ip_address=ip_address,
            )
            task = create_task(
                equipment,
                type=Task.Type.BREAKDOWN if is_breakdown else Task.Type.DEFECT,
                description=payload.description,
                reporter_name=payload.operator_name,
                reporter_phone=payload.operator_phone,
                reading_at_report=payload.equipment_reading,
            )
            report.generated_task = task
            report.save(update_fields=["generated_task", "updated_at"])

            if files:
                uploader.attach(
                    files,
                    parent=report,
                    media_model=DefectReportMedia,
                    folder=defect_report_media_folder(config, report),
                )
            advance_reading(equipment, payload.equipment_reading)
    except UploadFailure as err:
        logger.warning(
            "defect_report_upload_failed",
            extra={"equipment_id": equipment.pk, "error": str(err)},
        )
        return SubmissionResult.error(UPLOAD_FAILED_MESSAGE)
    except DatabaseError:
        logger.exception("defect_report_save_failed", extra={"equipment_id": equipment.pk})
        return SubmissionResult.error(SAVE_FAILED_MESSAGE)

    logger.info(
        "defect_report_submitted",
        extra={
            "report_id": report.pk,
            "task_id": task.pk,
            "equipment_id": equipment.pk,
            "severity": str(severity),
            "breakdown": is_breakdown,
        },
    )
    if is_breakdown:
        return SubmissionResult.success("Breakdown reported. Equipment marked as down.")
    return SubmissionResult.success("Defect report submitted.")
