"""QR code views for printing equipment labels."""

from __future__ import annotations

from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from django.views.generic import TemplateView

from fleetfix.apps.accounts.scope import OrganizationScopeMixin, ensure_same_organization
from fleetfix.apps.core.config import get_portal_config
from fleetfix.apps.core.qr import (
    QR_BOX_SIZE_BULK,
    equipment_portal_url,
    generate_qr_code_base64,
    generate_qr_code_png,
)
from fleetfix.apps.fleet.models import Equipment


class EquipmentQRView(OrganizationScopeMixin, TemplateView):
    """Printable QR code pointing at a unit's public portal page.

    ``?format=png`` returns the bare image for download.
    """

    template_name = "fleet/equipment_qr.html"

    def get(self, request, *args, **kwargs):
        self.equipment = get_object_or_404(
            Equipment.objects.select_related("customer"), pk=kwargs["pk"]
        )
        ensure_same_organization(self.organization, self.equipment)
        self.portal_url = equipment_portal_url(get_portal_config(), self.equipment.pk)

        if request.GET.get("format") == "png":
            response = HttpResponse(generate_qr_code_png(self.portal_url), content_type="image/png")
            response["Content-Disposition"] = (
                f'attachment; filename="qr-{self.equipment.pk}.png"'
            )
            return response
        return super().get(request, *args, **kwargs)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["equipment"] = self.equipment
        context["portal_url"] = self.portal_url
        context["qr_code_data"] = generate_qr_code_base64(self.portal_url)
        return context


class EquipmentBulkQRView(OrganizationScopeMixin, TemplateView):
    """Printable sheet of QR codes for every active unit in the organization."""

    template_name = "fleet/equipment_qr_bulk.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        config = get_portal_config()
        qr_entries = []
        for equipment in Equipment.objects.for_organization(self.organization).active():
            portal_url = equipment_portal_url(config, equipment.pk)
            qr_entries.append(
                {
                    "equipment": equipment,
                    "qr_data": generate_qr_code_base64(portal_url, box_size=QR_BOX_SIZE_BULK),
                    "portal_url": portal_url,
                }
            )
        context["qr_entries"] = qr_entries
        return context
