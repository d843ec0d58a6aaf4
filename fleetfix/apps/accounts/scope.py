"""Organization scope resolution for staff views.

Every staff-side read or write runs against exactly one organization: the
one the signed-in user is a member of. Objects belonging to any other
organization are rejected with ``PermissionDenied`` and no further detail.
"""

from __future__ import annotations

import logging

from django.contrib.auth.mixins import LoginRequiredMixin
from django.core.exceptions import PermissionDenied
from django.http import HttpRequest

from fleetfix.apps.accounts.models import Membership, Organization
from fleetfix.logging import bind_log_context

logger = logging.getLogger(__name__)

SESSION_ORGANIZATION_KEY = "organization_id"


def get_membership(user, organization_id: int | None = None) -> Membership | None:
    """Return the user's membership, preferring ``organization_id`` when given."""
    if not user.is_authenticated:
        return None
    memberships = Membership.objects.filter(user=user).select_related("organization")
    if organization_id is not None:
        membership = memberships.filter(organization_id=organization_id).first()
        if membership is not None:
            return membership
    return memberships.order_by("created_at", "id").first()


def resolve_membership(request: HttpRequest) -> Membership:
    """Resolve the active membership for ``request`` or raise ``PermissionDenied``."""
    membership = get_membership(request.user, request.session.get(SESSION_ORGANIZATION_KEY))
    if membership is None:
        logger.warning("organization_scope_missing", extra={"user_id": request.user.pk})
        raise PermissionDenied
    request.session[SESSION_ORGANIZATION_KEY] = membership.organization_id
    return membership


def ensure_same_organization(organization: Organization, obj) -> None:
    """Reject ``obj`` unless it belongs to ``organization``."""
    if obj.organization_id != organization.pk:
        logger.warning(
            "organization_scope_mismatch",
            extra={
                "organization_id": organization.pk,
                "object_type": type(obj).__name__,
                "object_id": obj.pk,
            },
        )
        raise PermissionDenied


class OrganizationScopeMixin(LoginRequiredMixin):
    """Resolve ``self.membership`` and ``self.organization`` before dispatch."""

    membership: Membership
    organization: Organization

    def dispatch(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return self.handle_no_permission()
        self.membership = resolve_membership(request)
        self.organization = self.membership.organization
        bind_log_context(organization_id=self.organization.pk, user_id=request.user.pk)
        return super().dispatch(request, *args, **kwargs)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["organization"] = self.organization
        context["membership"] = self.membership
        return context
