"""Forms for the public QR portal."""

from __future__ import annotations

from collections.abc import Iterable

from django import forms

from fleetfix.apps.core.forms import (
    MultiFileField,
    StyledFormMixin,
    collect_media_files,
    validate_media_files,
)
from fleetfix.apps.fleet.readings import MAX_READING
from fleetfix.apps.inspections.intake import PrestartHeader, ReportPayload
from fleetfix.apps.inspections.models import DefectReport, PrestartTemplateItem
from fleetfix.apps.inspections.parsing import RawItem


def reading_field(label: str = "Current reading") -> forms.IntegerField:
    return forms.IntegerField(
        label=label,
        min_value=0,
        max_value=MAX_READING,
        error_messages={
            "required": "Reading is required",
            "invalid": "Reading must be a whole number",
        },
        widget=forms.NumberInput(attrs={"inputmode": "numeric"}),
    )


class ReadingUpdateForm(StyledFormMixin, forms.Form):
    reading = reading_field("New reading")


class OperatorFieldsMixin(forms.Form):
    operator_name = forms.CharField(
        max_length=200,
        label="Your name",
        error_messages={"required": "Operator name is required"},
    )
    operator_phone = forms.CharField(max_length=50, required=False, label="Phone")


class PrestartHeaderForm(StyledFormMixin, OperatorFieldsMixin):
    equipment_reading = reading_field()

    def to_header(self) -> PrestartHeader:
        return PrestartHeader(
            operator_name=self.cleaned_data["operator_name"],
            operator_phone=self.cleaned_data.get("operator_phone") or "",
            equipment_reading=self.cleaned_data["equipment_reading"],
        )


def item_field_name(item: PrestartTemplateItem, part: str) -> str:
    return f"item-{item.pk}-{part}"


def collect_checklist_answers(
    data, files, template_items: Iterable[PrestartTemplateItem]
) -> dict[int, RawItem]:
    """Pick each template item's answer, notes and files out of the posted form.

    Files are checked for size and type here; raises ``ValidationError`` on a bad upload.
    """
    answers: dict[int, RawItem] = {}
    for item in template_items:
        media = files.getlist(item_field_name(item, "media")) if files is not None else []
        answers[item.pk] = RawItem(
            result=data.get(item_field_name(item, "result"), ""),
            notes=data.get(item_field_name(item, "notes"), ""),
            files=validate_media_files(list(media)),
        )
    return answers


class DefectReportForm(StyledFormMixin, OperatorFieldsMixin):
    operator_name = forms.CharField(
        max_length=200, label="Your name", error_messages={"required": "Name is required"}
    )
    equipment_reading = reading_field()
    description = forms.CharField(
        min_length=10,
        widget=forms.Textarea(attrs={"rows": 4}),
        error_messages={
            "required": "Description must be at least 10 characters",
            "min_length": "Description must be at least 10 characters",
        },
    )
    severity = forms.ChoiceField(
        choices=DefectReport.Severity.choices, initial=DefectReport.Severity.MEDIUM
    )
    media = MultiFileField(label="Photos or videos")

    def clean_media(self):
        files = collect_media_files(self.files, "media", self.cleaned_data)
        return validate_media_files(files)

    def to_payload(self) -> ReportPayload:
        return ReportPayload(
            operator_name=self.cleaned_data["operator_name"],
            operator_phone=self.cleaned_data.get("operator_phone") or "",
            description=self.cleaned_data["description"],
            equipment_reading=self.cleaned_data["equipment_reading"],
            severity=self.cleaned_data.get("severity") or DefectReport.Severity.CRITICAL,
        )


class BreakdownReportForm(DefectReportForm):
    """Breakdowns are always critical, so the severity choice is not offered."""

    severity = None
