"""Public QR portal views. No login: operators reach these by scanning a unit's QR code."""

from __future__ import annotations

from datetime import timedelta

from django.conf import settings
from django.contrib import messages
from django.core.exceptions import ValidationError
from django.shortcuts import get_object_or_404, redirect
from django.utils import timezone
from django.views.generic import FormView, TemplateView

from fleetfix.apps.core.ip import get_real_ip
from fleetfix.apps.core.media import MEDIA_ACCEPT_ATTR
from fleetfix.apps.fleet.models import Equipment
from fleetfix.apps.inspections import intake
from fleetfix.apps.inspections.forms import (
    BreakdownReportForm,
    DefectReportForm,
    PrestartHeaderForm,
    ReadingUpdateForm,
    collect_checklist_answers,
    item_field_name,
)
from fleetfix.apps.inspections.intake import SubmissionResult
from fleetfix.apps.inspections.models import DefectReport, PrestartSubmission
from fleetfix.apps.inspections.operator import get_operator_prefill, remember_operator
from fleetfix.apps.inspections.selectors import get_prestart_history
from fleetfix.logging import bind_log_context

RATE_LIMIT_MESSAGE = "Too many reports submitted recently. Please try again later."

MESSAGE_LEVELS = {
    SubmissionResult.SUCCESS: messages.SUCCESS,
    SubmissionResult.INFO: messages.INFO,
    SubmissionResult.ERROR: messages.ERROR,
}


def add_result_message(request, result: SubmissionResult) -> None:
    messages.add_message(request, MESSAGE_LEVELS[result.status], result.message)


class PortalEquipmentMixin:
    """Load the scanned unit and expose it, its organization and operator prefill to templates."""

    equipment: Equipment

    def dispatch(self, request, *args, **kwargs):
        self.equipment = get_object_or_404(
            Equipment.objects.active().select_related(
                "organization", "customer", "prestart_template"
            ),
            pk=kwargs["pk"],
        )
        bind_log_context(
            equipment_id=self.equipment.pk, organization_id=self.equipment.organization_id
        )
        return super().dispatch(request, *args, **kwargs)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["equipment"] = self.equipment
        context["organization"] = self.equipment.organization
        return context

    def get_initial(self):
        initial = super().get_initial()
        prefill = get_operator_prefill(self.request)
        if prefill:
            initial.update(prefill.as_initial())
        initial.setdefault("equipment_reading", self.equipment.current_reading)
        return initial


class ReportRateLimitMixin:
    """Cap how many reports one client IP may submit per time window."""

    def post(self, request, *args, **kwargs):
        ip_address = get_real_ip(request)
        if ip_address and not self._check_rate_limit(ip_address):
            messages.error(request, RATE_LIMIT_MESSAGE)
            return redirect(self.request.path)
        return super().post(request, *args, **kwargs)

    def _check_rate_limit(self, ip_address: str) -> bool:
        time_window = timezone.now() - timedelta(minutes=settings.RATE_LIMIT_WINDOW_MINUTES)
        recent = (
            DefectReport.objects.filter(ip_address=ip_address, created_at__gte=time_window).count()
            + PrestartSubmission.objects.filter(
                ip_address=ip_address, created_at__gte=time_window
            ).count()
        )
        return recent < settings.RATE_LIMIT_REPORTS_PER_IP


class PortalEquipmentView(PortalEquipmentMixin, FormView):
    """Landing page for a unit's QR code. POST records a new reading."""

    template_name = "inspections/portal_equipment.html"
    form_class = ReadingUpdateForm

    def get_initial(self):
        return {"reading": self.equipment.current_reading}

    def form_valid(self, form):
        result = intake.update_reading(self.equipment, form.cleaned_data["reading"])
        add_result_message(self.request, result)
        return redirect("portal-equipment", pk=self.equipment.pk)

    def form_invalid(self, form):
        messages.error(self.request, form.errors["reading"][0])
        return redirect("portal-equipment", pk=self.equipment.pk)


class PrestartCheckView(ReportRateLimitMixin, PortalEquipmentMixin, FormView):
    template_name = "inspections/portal_prestart.html"
    form_class = PrestartHeaderForm

    def get_template_items(self):
        template = self.equipment.prestart_template
        if template is None or not template.is_active:
            return []
        return list(template.items.all())

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        posted = self.request.POST if self.request.method == "POST" else {}
        context["checklist"] = [
            {
                "item": item,
                "result_name": item_field_name(item, "result"),
                "notes_name": item_field_name(item, "notes"),
                "media_name": item_field_name(item, "media"),
                "result": posted.get(item_field_name(item, "result"), ""),
                "notes": posted.get(item_field_name(item, "notes"), ""),
            }
            for item in self.get_template_items()
        ]
        context["media_accept"] = MEDIA_ACCEPT_ATTR
        return context

    def form_valid(self, form):
        try:
            answers = collect_checklist_answers(
                self.request.POST, self.request.FILES, self.get_template_items()
            )
        except ValidationError as err:
            messages.error(self.request, err.messages[0])
            return self.render_to_response(self.get_context_data(form=form))

        header = form.to_header()
        result = intake.submit_prestart_check(
            self.equipment, header, answers, ip_address=get_real_ip(self.request)
        )
        add_result_message(self.request, result)
        if not result.ok:
            return self.render_to_response(self.get_context_data(form=form))

        response = redirect("portal-prestart", pk=self.equipment.pk)
        remember_operator(response, header.operator_name, header.operator_phone)
        return response


class DefectReportView(ReportRateLimitMixin, PortalEquipmentMixin, FormView):
    template_name = "inspections/portal_report.html"
    form_class = DefectReportForm
    url_name = "portal-defect"
    is_breakdown = False

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["is_breakdown"] = self.is_breakdown
        return context

    def submit(self, payload, files) -> SubmissionResult:
        return intake.submit_defect_report(
            self.equipment, payload, files, ip_address=get_real_ip(self.request)
        )

    def form_valid(self, form):
        payload = form.to_payload()
        result = self.submit(payload, form.cleaned_data.get("media") or [])
        add_result_message(self.request, result)
        if not result.ok:
            return self.render_to_response(self.get_context_data(form=form))

        response = redirect(self.url_name, pk=self.equipment.pk)
        remember_operator(response, payload.operator_name, payload.operator_phone)
        return response


class BreakdownReportView(DefectReportView):
    form_class = BreakdownReportForm
    url_name = "portal-breakdown"
    is_breakdown = True

    def submit(self, payload, files) -> SubmissionResult:
        return intake.submit_breakdown_report(
            self.equipment, payload, files, ip_address=get_real_ip(self.request)
        )


class PrestartHistoryView(PortalEquipmentMixin, TemplateView):
    template_name = "inspections/portal_history.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["submissions"] = get_prestart_history(self.equipment)
        return context
