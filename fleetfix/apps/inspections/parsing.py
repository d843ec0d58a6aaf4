"""Turn raw checklist answers into typed results.

The portal form posts one answer, an optional note and optional files per
template item. ``parse_checklist`` checks all of them against the template
before anything is written and returns one ``ParsedItem`` per template item,
in template order.

Failure rules by field type:
- pass_fail fails when the answer is ``fail``
- yes_no fails when the answer is ``no``
- text and number answers never fail
"""

from __future__ import annotations

import enum
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from django.core.files.uploadedfile import UploadedFile

from fleetfix.apps.core.media import PRESTART_ITEM_LIMITS, media_limit_error
from fleetfix.apps.inspections.exceptions import ChecklistItemError, MediaLimitExceeded
from fleetfix.apps.inspections.models import PrestartTemplateItem

FieldType = PrestartTemplateItem.FieldType


class ResultKind(enum.Enum):
    PASS = "pass"
    FAIL = "fail"
    YES = "yes"
    NO = "no"
    TEXT = "text"
    NUMBER = "number"


CHOICE_RESULTS = {
    FieldType.PASS_FAIL: {"pass": ResultKind.PASS, "fail": ResultKind.FAIL},
    FieldType.YES_NO: {"yes": ResultKind.YES, "no": ResultKind.NO},
}

FAILURE_KINDS = frozenset({ResultKind.FAIL, ResultKind.NO})


@dataclass(frozen=True)
class ItemResult:
    kind: ResultKind
    text: str = ""
    number: float | None = None

    @property
    def is_failure(self) -> bool:
        return self.kind in FAILURE_KINDS

    def stored_value(self) -> str:
        """The text form saved on the submission item."""
        if self.kind is ResultKind.TEXT:
            return self.text
        if self.kind is ResultKind.NUMBER:
            number = self.number or 0.0
            return str(int(number)) if number.is_integer() else repr(number)
        return self.kind.value


@dataclass(frozen=True)
class RawItem:
    """Answer fields as posted for one template item."""

    result: str = ""
    notes: str = ""
    files: list[UploadedFile] = field(default_factory=list)


@dataclass(frozen=True)
class ParsedItem:
    template_item: PrestartTemplateItem
    result: ItemResult | None
    failure_description: str = ""
    files: list[UploadedFile] = field(default_factory=list)

    @property
    def is_failure(self) -> bool:
        return self.result is not None and self.result.is_failure

    @property
    def is_critical_failure(self) -> bool:
        return self.is_failure and self.template_item.is_critical

    @property
    def stored_result(self) -> str:
        return self.result.stored_value() if self.result is not None else ""


def parse_result(item: PrestartTemplateItem, raw_value: str) -> ItemResult | None:
    """Parse one answer. Returns None for a blank answer; raises on a malformed one."""
    value = (raw_value or "").strip()
    if not value:
        return None

    if item.field_type in CHOICE_RESULTS:
        choices = CHOICE_RESULTS[item.field_type]
        kind = choices.get(value.lower())
        if kind is None:
            raise ChecklistItemError(
                f"{item.label} must be one of: {', '.join(choices)}", item_id=item.pk
            )
        return ItemResult(kind)

    if item.field_type == FieldType.NUMBER:
        try:
            number = float(value)
        except ValueError:
            number = math.nan
        if not math.isfinite(number):
            raise ChecklistItemError(f"{item.label} must be a number", item_id=item.pk)
        return ItemResult(ResultKind.NUMBER, number=number)

    return ItemResult(ResultKind.TEXT, text=value)


def parse_item(item: PrestartTemplateItem, raw: RawItem) -> ParsedItem:
    if item.is_required and not (raw.result or "").strip():
        raise ChecklistItemError(f"{item.label} is required", item_id=item.pk)

    result = parse_result(item, raw.result)
    notes = (raw.notes or "").strip()

    if result is not None and result.is_failure and not notes:
        raise ChecklistItemError(f"{item.label} failure notes are required", item_id=item.pk)

    files = [f for f in raw.files if f and f.size]
    limit_error = media_limit_error(files, PRESTART_ITEM_LIMITS, label=item.label)
    if limit_error:
        raise MediaLimitExceeded(limit_error)

    return ParsedItem(template_item=item, result=result, failure_description=notes, files=files)


def parse_checklist(
    template_items: Iterable[PrestartTemplateItem], raw_items: Mapping[int, RawItem]
) -> list[ParsedItem]:
    """Parse every template item's answer, stopping at the first invalid one."""
    return [parse_item(item, raw_items.get(item.pk, RawItem())) for item in template_items]
