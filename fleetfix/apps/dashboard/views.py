"""Staff dashboard."""

from __future__ import annotations

from django.views.generic import TemplateView

from fleetfix.apps.accounts.scope import OrganizationScopeMixin
from fleetfix.apps.dashboard.selectors import (
    get_attention_items,
    get_dashboard_stats,
    get_equipment_alerts,
    get_recent_activity,
)


class DashboardView(OrganizationScopeMixin, TemplateView):
    template_name = "dashboard/dashboard.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["stats"] = get_dashboard_stats(self.organization)
        context["attention"] = get_attention_items(self.organization)
        context["alerts"] = get_equipment_alerts(self.organization)
        context["recent_activity"] = get_recent_activity(self.organization)
        return context
